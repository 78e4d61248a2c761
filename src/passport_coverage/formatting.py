"""Human-readable summaries of country records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from passport_coverage.aggregator import CountryRecord, IssuanceStatus
from passport_coverage.certificates import AnnotatedCertificate, CertificateDescriptor
from passport_coverage.overrides import DEFAULT_COUNTRY_OVERRIDES, CountryOverrides
from passport_coverage.roles import display_signature_algorithm

STATUS_COLORS: Mapping[IssuanceStatus, str] = {
    IssuanceStatus.NO_ISSUANCE: "#b4b5b3",
    IssuanceStatus.NO_CERT_AVAILABLE: "#b0cca3",
    IssuanceStatus.NO_SUPPORT: "#90b576",
    IssuanceStatus.PARTIAL_SUPPORT: "#70ac48",
    IssuanceStatus.FULL_SUPPORT: "#548233",
}

STATUS_LABELS: Mapping[IssuanceStatus, str] = {
    IssuanceStatus.NO_ISSUANCE: "Not issuing e-passports",
    IssuanceStatus.NO_CERT_AVAILABLE: "Issuing but no certificates available",
    IssuanceStatus.NO_SUPPORT: "Not supported",
    IssuanceStatus.PARTIAL_SUPPORT: "Partially supported",
    IssuanceStatus.FULL_SUPPORT: "Fully supported",
}

NO_CERT_AVAILABLE_TEXT = (
    "Issuing biometric passports, but no certificates published on international registries."
)


@dataclass(frozen=True)
class AlgorithmDetails:
    signature: str
    key_details: str


def format_algorithm_details(cert: CertificateDescriptor) -> AlgorithmDetails:
    algorithm = display_signature_algorithm(cert.signature_algorithm)
    signature = f"{cert.hash_algorithm.lower()} with {algorithm.lower()}"
    # Only the exact dataset spelling names a curve.
    if algorithm == "ecdsa":
        key_details = cert.curve_exponent
    else:
        key_details = f"e={cert.curve_exponent} {cert.bit_length}"
    return AlgorithmDetails(signature=signature, key_details=key_details)


def format_certificate_line(cert: AnnotatedCertificate) -> str:
    details = format_algorithm_details(cert)
    marker = "supported" if cert.is_supported else "unsupported"
    return f"{cert.amount} issued: {details.signature} {details.key_details} [{marker}]"


def describe_country(
    record: CountryRecord,
    *,
    overrides: CountryOverrides = DEFAULT_COUNTRY_OVERRIDES,
) -> list[str]:
    lines: list[str] = []
    passports = overrides.passports_issued(record.name)
    if passports:
        lines.append(f"~ {passports:,} passports issued")
    comment = overrides.comment_for(record.name)
    if comment:
        lines.append(comment)
    if record.issuance_status is IssuanceStatus.NO_ISSUANCE and not (
        overrides.is_manually_non_issuing(record.name)
    ):
        lines.append("Not issuing e-passport")
    if record.issuance_status is IssuanceStatus.NO_CERT_AVAILABLE:
        lines.append(NO_CERT_AVAILABLE_TEXT)
    if record.csca:
        lines.append("Top-level Certificates (CSCA)")
        lines.extend(f" - {format_certificate_line(cert)}" for cert in record.csca)
    if record.dsc:
        lines.append("Intermediate Certificates (DSC)")
        lines.extend(f" - {format_certificate_line(cert)}" for cert in record.dsc)
    return lines


def record_to_dict(record: CountryRecord) -> dict:
    return {
        "name": record.name,
        "country_code": record.country_code,
        "issuance_status": record.issuance_status.name,
        "color": STATUS_COLORS[record.issuance_status],
        "csca": [cert.model_dump() for cert in record.csca],
        "dsc": [cert.model_dump() for cert in record.dsc],
    }
