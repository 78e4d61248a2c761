"""Per-country issuance status derived from certificate support results."""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Mapping, Sequence

from pydantic import BaseModel, ConfigDict

from passport_coverage.certificates import AnnotatedCertificate
from passport_coverage.classifier import CertificateLike, annotate_certificates, is_supported
from passport_coverage.overrides import DEFAULT_COUNTRY_OVERRIDES, CountryOverrides
from passport_coverage.support_table import SupportTableSet, canonical_support_tables


class IssuanceStatus(IntEnum):
    NO_ISSUANCE = 0
    NO_CERT_AVAILABLE = 1
    NO_SUPPORT = 2
    PARTIAL_SUPPORT = 3
    FULL_SUPPORT = 4


class CountryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    country_code: str
    dsc: tuple[AnnotatedCertificate, ...] = ()
    csca: tuple[AnnotatedCertificate, ...] = ()
    issuance_status: IssuanceStatus


def _status_from_flags(
    csca_flags: Sequence[bool],
    dsc_flags: Sequence[bool],
    *,
    issues_epassports: bool,
    manually_non_issuing: bool,
) -> IssuanceStatus:
    if manually_non_issuing:
        return IssuanceStatus.NO_ISSUANCE
    if csca_flags:
        if all(csca_flags) and all(dsc_flags):
            return IssuanceStatus.FULL_SUPPORT
        if any(csca_flags):
            return IssuanceStatus.PARTIAL_SUPPORT
        return IssuanceStatus.NO_SUPPORT
    if issues_epassports:
        return IssuanceStatus.NO_CERT_AVAILABLE
    return IssuanceStatus.NO_ISSUANCE


def derive_issuance_status(
    csca: Iterable[CertificateLike],
    dsc: Iterable[CertificateLike],
    *,
    issues_epassports: bool = False,
    manually_non_issuing: bool = False,
    tables: SupportTableSet | None = None,
) -> IssuanceStatus:
    """Classify one country; the first matching rule wins.

    Only the CSCA list separates full, partial and no support. DSC results can
    only keep a country with fully supported CSCA data out of FULL_SUPPORT.
    Every certificate is classified against ``tables`` for the slot it is
    passed in, including records that already carry an ``is_supported`` flag.
    """
    resolved = tables or canonical_support_tables()
    return _status_from_flags(
        [is_supported(cert, "csca", tables=resolved) for cert in csca],
        [is_supported(cert, "dsc", tables=resolved) for cert in dsc],
        issues_epassports=issues_epassports,
        manually_non_issuing=manually_non_issuing,
    )


def build_country_record(
    *,
    name: str,
    country_code: str,
    dsc: Sequence[CertificateLike] = (),
    csca: Sequence[CertificateLike] = (),
    issues_epassports: bool = False,
    overrides: CountryOverrides = DEFAULT_COUNTRY_OVERRIDES,
    tables: SupportTableSet | None = None,
) -> CountryRecord:
    resolved = tables or canonical_support_tables()
    dsc_annotated = annotate_certificates(dsc, "dsc", tables=resolved)
    csca_annotated = annotate_certificates(csca, "csca", tables=resolved)
    # Flags were just computed against the same tables and roles.
    status = _status_from_flags(
        [cert.is_supported for cert in csca_annotated],
        [cert.is_supported for cert in dsc_annotated],
        issues_epassports=issues_epassports,
        manually_non_issuing=overrides.is_manually_non_issuing(name),
    )
    return CountryRecord(
        name=name,
        country_code=country_code,
        dsc=dsc_annotated,
        csca=csca_annotated,
        issuance_status=status,
    )


def build_country_records(
    dsc_data: Mapping[str, Sequence[CertificateLike]],
    csca_data: Mapping[str, Sequence[CertificateLike]],
    issuing_countries: Iterable[str],
    country_names: Mapping[str, str],
    *,
    overrides: CountryOverrides = DEFAULT_COUNTRY_OVERRIDES,
    tables: SupportTableSet | None = None,
) -> dict[str, CountryRecord]:
    """Merge both datasets per country, keyed by country display name.

    ``dsc_data`` and ``csca_data`` are keyed by country code, as is
    ``country_names`` (code -> display name). Countries absent from a dataset
    get an empty certificate list.
    """
    resolved = tables or canonical_support_tables()
    issuing = frozenset(issuing_countries)
    records: dict[str, CountryRecord] = {}
    for country_code, name in country_names.items():
        records[name] = build_country_record(
            name=name,
            country_code=country_code,
            dsc=dsc_data.get(country_code, ()),
            csca=csca_data.get(country_code, ()),
            issues_epassports=country_code in issuing,
            overrides=overrides,
            tables=resolved,
        )
    return records


def status_counts(records: Mapping[str, CountryRecord]) -> dict[IssuanceStatus, int]:
    counts = {status: 0 for status in IssuanceStatus}
    for record in records.values():
        counts[record.issuance_status] += 1
    return counts
