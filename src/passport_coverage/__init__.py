"""Passport coverage public surface."""

from passport_coverage.aggregator import (
    CountryRecord,
    IssuanceStatus,
    build_country_record,
    build_country_records,
    derive_issuance_status,
    status_counts,
)
from passport_coverage.certificates import AnnotatedCertificate, CertificateDescriptor
from passport_coverage.classifier import annotate_certificate, annotate_certificates, is_supported
from passport_coverage.datasets import (
    DatasetClient,
    load_certificate_dataset,
    load_coverage,
    parse_certificate_dataset,
)
from passport_coverage.errors import (
    DatasetRequestError,
    DatasetUnavailableError,
    PassportCoverageError,
    SchemaValidationError,
    UnknownTableVersionError,
)
from passport_coverage.formatting import (
    STATUS_COLORS,
    STATUS_LABELS,
    describe_country,
    format_algorithm_details,
)
from passport_coverage.overrides import DEFAULT_COUNTRY_OVERRIDES, CountryOverrides
from passport_coverage.roles import canonical_signature_algorithm, display_signature_algorithm
from passport_coverage.support_table import (
    CANONICAL_TABLE_VERSION,
    SupportEntry,
    SupportTable,
    SupportTableSet,
    available_table_versions,
    load_support_tables,
    load_support_tables_file,
)
from passport_coverage.types import (
    ALLOWED_CERTIFICATE_ROLES,
    CertificateRole,
    normalize_certificate_role,
)

__all__ = [
    "PassportCoverageError",
    "DatasetUnavailableError",
    "DatasetRequestError",
    "SchemaValidationError",
    "UnknownTableVersionError",
    "CertificateDescriptor",
    "AnnotatedCertificate",
    "CertificateRole",
    "ALLOWED_CERTIFICATE_ROLES",
    "normalize_certificate_role",
    "canonical_signature_algorithm",
    "display_signature_algorithm",
    "CANONICAL_TABLE_VERSION",
    "SupportEntry",
    "SupportTable",
    "SupportTableSet",
    "available_table_versions",
    "load_support_tables",
    "load_support_tables_file",
    "is_supported",
    "annotate_certificate",
    "annotate_certificates",
    "IssuanceStatus",
    "CountryRecord",
    "derive_issuance_status",
    "build_country_record",
    "build_country_records",
    "status_counts",
    "CountryOverrides",
    "DEFAULT_COUNTRY_OVERRIDES",
    "DatasetClient",
    "load_certificate_dataset",
    "load_coverage",
    "parse_certificate_dataset",
    "STATUS_COLORS",
    "STATUS_LABELS",
    "describe_country",
    "format_algorithm_details",
]
