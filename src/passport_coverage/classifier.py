"""Support classification for individual certificate configurations."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

from pydantic import ValidationError

from passport_coverage.certificates import AnnotatedCertificate, CertificateDescriptor
from passport_coverage.errors import SchemaValidationError
from passport_coverage.roles import canonical_signature_algorithm
from passport_coverage.support_table import SupportTableSet, canonical_support_tables

CertificateLike = Union[CertificateDescriptor, Mapping[str, Any]]


def _field(cert: CertificateLike, name: str) -> object:
    if isinstance(cert, Mapping):
        return cert.get(name)
    return getattr(cert, name, None)


def is_supported(
    cert: CertificateLike,
    role: str | None = "dsc",
    *,
    tables: SupportTableSet | None = None,
) -> bool:
    """Return True when the certificate's exact configuration is in the role's table.

    Unknown algorithms, unknown hashes, missing fields and malformed values all
    classify as unsupported; this never raises for certificate data.
    """
    table = (tables or canonical_support_tables()).for_role(role)
    signature_algorithm = canonical_signature_algorithm(_field(cert, "signature_algorithm"))
    entry = table.lookup(signature_algorithm, _field(cert, "hash_algorithm"))
    if entry is None:
        return False
    return entry.allows(_field(cert, "curve_exponent"), _field(cert, "bit_length"))


def _as_descriptor(cert: CertificateLike) -> CertificateDescriptor:
    if isinstance(cert, CertificateDescriptor):
        return cert
    try:
        return CertificateDescriptor(**cert)
    except (TypeError, ValidationError) as exc:
        raise SchemaValidationError(f"invalid certificate record: {exc}") from exc


def annotate_certificate(
    cert: CertificateLike,
    role: str | None = "dsc",
    *,
    tables: SupportTableSet | None = None,
) -> AnnotatedCertificate:
    """Return a new record carrying the support flag; the input is left untouched.

    The flag is computed from ``cert`` as given. Raw mappings must already
    carry correctly typed values; otherwise :class:`SchemaValidationError`
    is raised rather than coercing them into a supported configuration.
    """
    supported = is_supported(cert, role, tables=tables)
    descriptor = _as_descriptor(cert)
    fields = descriptor.model_dump(include=set(CertificateDescriptor.model_fields))
    return AnnotatedCertificate(**fields, is_supported=supported)


def annotate_certificates(
    certs: Iterable[CertificateLike],
    role: str | None = "dsc",
    *,
    tables: SupportTableSet | None = None,
) -> tuple[AnnotatedCertificate, ...]:
    resolved = tables or canonical_support_tables()
    return tuple(annotate_certificate(cert, role, tables=resolved) for cert in certs)
