from __future__ import annotations

import itertools

from passport_coverage.aggregator import (
    IssuanceStatus,
    build_country_record,
    build_country_records,
    derive_issuance_status,
    status_counts,
)
from passport_coverage.certificates import CertificateDescriptor
from passport_coverage.classifier import annotate_certificates
from passport_coverage.overrides import CountryOverrides
from passport_coverage.support_table import load_support_tables

SUPPORTED_CSCA = CertificateDescriptor(
    signature_algorithm="rsa",
    hash_algorithm="sha256",
    curve_exponent="65537",
    bit_length=4096,
    amount=3,
)
UNSUPPORTED_CSCA = CertificateDescriptor(
    signature_algorithm="rsa",
    hash_algorithm="sha256",
    curve_exponent="65537",
    bit_length=1024,
    amount=1,
)
SUPPORTED_DSC = CertificateDescriptor(
    signature_algorithm="ecdsa",
    hash_algorithm="sha256",
    curve_exponent="brainpoolp256r1",
    bit_length=256,
    amount=120,
)
UNSUPPORTED_DSC = CertificateDescriptor(
    signature_algorithm="ecdsa",
    hash_algorithm="sha256",
    curve_exponent="secp521r1",
    bit_length=521,
    amount=7,
)


def test_empty_lists_not_issuing_is_no_issuance() -> None:
    assert derive_issuance_status([], []) is IssuanceStatus.NO_ISSUANCE


def test_empty_lists_on_issuing_list_is_no_cert_available() -> None:
    status = derive_issuance_status([], [], issues_epassports=True)
    assert status is IssuanceStatus.NO_CERT_AVAILABLE


def test_dsc_only_data_does_not_count_as_support() -> None:
    status = derive_issuance_status([], [SUPPORTED_DSC], issues_epassports=True)
    assert status is IssuanceStatus.NO_CERT_AVAILABLE
    assert derive_issuance_status([], [SUPPORTED_DSC]) is IssuanceStatus.NO_ISSUANCE


def test_single_unsupported_csca_is_no_support() -> None:
    status = derive_issuance_status([UNSUPPORTED_CSCA], [], issues_epassports=True)
    assert status is IssuanceStatus.NO_SUPPORT


def test_mixed_csca_is_partial_support() -> None:
    status = derive_issuance_status([SUPPORTED_CSCA, UNSUPPORTED_CSCA], [SUPPORTED_DSC])
    assert status is IssuanceStatus.PARTIAL_SUPPORT


def test_all_supported_is_full_support() -> None:
    status = derive_issuance_status([SUPPORTED_CSCA], [SUPPORTED_DSC])
    assert status is IssuanceStatus.FULL_SUPPORT
    assert derive_issuance_status([SUPPORTED_CSCA], []) is IssuanceStatus.FULL_SUPPORT


def test_unsupported_dsc_downgrades_full_to_partial() -> None:
    status = derive_issuance_status([SUPPORTED_CSCA], [SUPPORTED_DSC, UNSUPPORTED_DSC])
    assert status is IssuanceStatus.PARTIAL_SUPPORT


def test_dsc_cannot_lift_unsupported_csca() -> None:
    status = derive_issuance_status([UNSUPPORTED_CSCA], [SUPPORTED_DSC])
    assert status is IssuanceStatus.NO_SUPPORT


def test_manual_override_wins_over_full_support() -> None:
    status = derive_issuance_status(
        [SUPPORTED_CSCA],
        [SUPPORTED_DSC],
        issues_epassports=True,
        manually_non_issuing=True,
    )
    assert status is IssuanceStatus.NO_ISSUANCE


def test_status_is_order_independent() -> None:
    csca = [SUPPORTED_CSCA, UNSUPPORTED_CSCA, SUPPORTED_CSCA]
    dsc = [SUPPORTED_DSC, UNSUPPORTED_DSC]
    statuses = {
        derive_issuance_status(list(csca_order), list(dsc_order))
        for csca_order in itertools.permutations(csca)
        for dsc_order in itertools.permutations(dsc)
    }
    assert statuses == {IssuanceStatus.PARTIAL_SUPPORT}


def test_statuses_are_ordered_by_confidence() -> None:
    assert (
        IssuanceStatus.NO_ISSUANCE
        < IssuanceStatus.NO_CERT_AVAILABLE
        < IssuanceStatus.NO_SUPPORT
        < IssuanceStatus.PARTIAL_SUPPORT
        < IssuanceStatus.FULL_SUPPORT
    )


def test_raw_records_are_accepted() -> None:
    csca = [SUPPORTED_CSCA.model_dump(), {"signature_algorithm": "dsa"}]
    assert derive_issuance_status(csca, []) is IssuanceStatus.PARTIAL_SUPPORT


def test_build_country_record_annotates_both_roles() -> None:
    record = build_country_record(
        name="Germany",
        country_code="DEU",
        dsc=[SUPPORTED_DSC, UNSUPPORTED_DSC],
        csca=[SUPPORTED_CSCA],
        issues_epassports=True,
    )
    assert record.issuance_status is IssuanceStatus.PARTIAL_SUPPORT
    assert [cert.is_supported for cert in record.dsc] == [True, False]
    assert [cert.is_supported for cert in record.csca] == [True]


def test_build_country_records_merges_by_country_code() -> None:
    records = build_country_records(
        dsc_data={"FRA": [SUPPORTED_DSC], "IND": [SUPPORTED_DSC]},
        csca_data={
            "FRA": [SUPPORTED_CSCA],
            "IRN": [UNSUPPORTED_CSCA],
            "IND": [SUPPORTED_CSCA],
        },
        issuing_countries=["FRA", "IRN", "BRA", "IND"],
        country_names={
            "FRA": "France",
            "IRN": "Iran",
            "BRA": "Brazil",
            "IND": "India",
            "ATA": "Antarctica",
        },
    )

    assert set(records) == {"France", "Iran", "Brazil", "India", "Antarctica"}
    assert records["France"].issuance_status is IssuanceStatus.FULL_SUPPORT
    assert records["France"].country_code == "FRA"
    assert records["Iran"].issuance_status is IssuanceStatus.NO_SUPPORT
    assert records["Brazil"].issuance_status is IssuanceStatus.NO_CERT_AVAILABLE
    assert records["Brazil"].csca == ()
    assert records["India"].issuance_status is IssuanceStatus.NO_ISSUANCE
    assert records["India"].csca[0].is_supported is True
    assert records["Antarctica"].issuance_status is IssuanceStatus.NO_ISSUANCE


def test_build_country_records_uses_supplied_overrides() -> None:
    overrides = CountryOverrides(non_issuing=frozenset({"France"}))
    records = build_country_records(
        dsc_data={},
        csca_data={"FRA": [SUPPORTED_CSCA], "IND": [SUPPORTED_CSCA]},
        issuing_countries=[],
        country_names={"FRA": "France", "IND": "India"},
        overrides=overrides,
    )
    assert records["France"].issuance_status is IssuanceStatus.NO_ISSUANCE
    assert records["India"].issuance_status is IssuanceStatus.FULL_SUPPORT


def test_status_counts_includes_every_status() -> None:
    records = build_country_records(
        dsc_data={},
        csca_data={"FRA": [SUPPORTED_CSCA]},
        issuing_countries=["BRA"],
        country_names={"FRA": "France", "BRA": "Brazil", "ATA": "Antarctica"},
    )
    counts = status_counts(records)
    assert counts == {
        IssuanceStatus.NO_ISSUANCE: 1,
        IssuanceStatus.NO_CERT_AVAILABLE: 1,
        IssuanceStatus.NO_SUPPORT: 0,
        IssuanceStatus.PARTIAL_SUPPORT: 0,
        IssuanceStatus.FULL_SUPPORT: 1,
    }


def test_annotated_certificates_are_reclassified_against_given_tables() -> None:
    brainpool_512 = CertificateDescriptor(
        signature_algorithm="ecdsa",
        hash_algorithm="sha256",
        curve_exponent="brainpoolp512r1",
        bit_length=512,
        amount=1,
    )
    annotated = annotate_certificates([brainpool_512], "csca", tables=load_support_tables("v2"))
    assert annotated[0].is_supported is True

    v1 = load_support_tables("v1")
    assert derive_issuance_status(annotated, [], tables=v1) is IssuanceStatus.NO_SUPPORT
    assert derive_issuance_status([brainpool_512], [], tables=v1) is IssuanceStatus.NO_SUPPORT


def test_annotated_certificates_are_reclassified_for_their_slot() -> None:
    csca_only_exponent = CertificateDescriptor(
        signature_algorithm="rsa",
        hash_algorithm="sha256",
        curve_exponent="107903",
        bit_length=4096,
        amount=1,
    )
    annotated = annotate_certificates([csca_only_exponent], "csca")
    assert annotated[0].is_supported is True

    status = derive_issuance_status([SUPPORTED_CSCA], annotated)
    assert status is IssuanceStatus.PARTIAL_SUPPORT
