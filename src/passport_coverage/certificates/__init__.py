from passport_coverage.certificates.schemas import AnnotatedCertificate, CertificateDescriptor

__all__ = [
    "CertificateDescriptor",
    "AnnotatedCertificate",
]
