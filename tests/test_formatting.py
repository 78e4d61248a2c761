from __future__ import annotations

from passport_coverage.aggregator import IssuanceStatus, build_country_record
from passport_coverage.certificates import CertificateDescriptor
from passport_coverage.classifier import annotate_certificate
from passport_coverage.formatting import (
    NO_CERT_AVAILABLE_TEXT,
    STATUS_COLORS,
    STATUS_LABELS,
    describe_country,
    format_algorithm_details,
    format_certificate_line,
    record_to_dict,
)
from passport_coverage.roles import canonical_signature_algorithm, display_signature_algorithm


def _cert(algorithm: str, hash_algorithm: str, key: str, bits: int, amount: int = 1):
    return CertificateDescriptor(
        signature_algorithm=algorithm,
        hash_algorithm=hash_algorithm,
        curve_exponent=key,
        bit_length=bits,
        amount=amount,
    )


def test_alias_round_trip_between_dataset_and_display() -> None:
    assert canonical_signature_algorithm("rsa-pss") == "rsapss"
    assert display_signature_algorithm("rsapss") == "rsa-pss"
    assert canonical_signature_algorithm("ecdsa") == "ecdsa"
    assert display_signature_algorithm("rsa") == "rsa"


def test_format_rsa_pss_uses_display_name_without_mutation() -> None:
    cert = _cert("rsapss", "SHA256", "65537", 4096)
    details = format_algorithm_details(cert)
    assert details.signature == "sha256 with rsa-pss"
    assert details.key_details == "e=65537 4096"
    assert cert.signature_algorithm == "rsapss"


def test_format_ecdsa_shows_curve_only() -> None:
    details = format_algorithm_details(_cert("ecdsa", "sha384", "brainpoolp384r1", 384))
    assert details.signature == "sha384 with ecdsa"
    assert details.key_details == "brainpoolp384r1"


def test_format_only_lowercase_ecdsa_shows_curve() -> None:
    details = format_algorithm_details(_cert("ECDSA", "SHA256", "secp256r1", 256))
    assert details.signature == "sha256 with ecdsa"
    assert details.key_details == "e=secp256r1 256"


def test_certificate_line_marks_support() -> None:
    annotated = annotate_certificate(_cert("rsa", "sha1", "3", 1024, amount=12), "dsc")
    assert format_certificate_line(annotated) == "12 issued: sha1 with rsa e=3 1024 [unsupported]"


def test_describe_country_with_estimate_and_certificates() -> None:
    record = build_country_record(
        name="Canada",
        country_code="CAN",
        csca=[_cert("rsa", "sha256", "65537", 4096, amount=2)],
        dsc=[_cert("ecdsa", "sha256", "secp256r1", 256, amount=40)],
        issues_epassports=True,
    )
    lines = describe_country(record)
    assert lines == [
        "~ 27,000,000 passports issued",
        "Top-level Certificates (CSCA)",
        " - 2 issued: sha256 with rsa e=65537 4096 [supported]",
        "Intermediate Certificates (DSC)",
        " - 40 issued: sha256 with ecdsa secp256r1 [supported]",
    ]


def test_describe_manually_non_issuing_country_skips_generic_text() -> None:
    record = build_country_record(name="India", country_code="IND", issues_epassports=True)
    assert record.issuance_status is IssuanceStatus.NO_ISSUANCE
    lines = describe_country(record)
    assert lines == ["Just recently started issuing e-passports, penetration is very low."]


def test_describe_non_issuing_and_no_cert_countries() -> None:
    not_issuing = build_country_record(name="Antarctica", country_code="ATA")
    assert describe_country(not_issuing) == ["Not issuing e-passport"]

    no_certs = build_country_record(name="Brazil", country_code="BRA", issues_epassports=True)
    assert describe_country(no_certs) == [NO_CERT_AVAILABLE_TEXT]


def test_every_status_has_color_and_label() -> None:
    for status in IssuanceStatus:
        assert STATUS_COLORS[status].startswith("#")
        assert STATUS_LABELS[status]


def test_record_to_dict() -> None:
    record = build_country_record(
        name="Iran",
        country_code="IRN",
        csca=[_cert("rsa", "sha256", "65537", 1024)],
    )
    payload = record_to_dict(record)
    assert payload["issuance_status"] == "NO_SUPPORT"
    assert payload["color"] == "#90b576"
    assert payload["csca"][0]["is_supported"] is False
    assert payload["dsc"] == []
