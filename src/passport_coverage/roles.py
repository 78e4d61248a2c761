"""Certificate roles and signature algorithm aliases."""

from __future__ import annotations

from typing import Literal

CertificateRole = Literal["dsc", "csca"]

ALLOWED_CERTIFICATE_ROLES: tuple[CertificateRole, ...] = ("dsc", "csca")
DEFAULT_CERTIFICATE_ROLE: CertificateRole = "dsc"

# Datasets and support tables key RSA-PSS as "rsapss"; humans read "rsa-pss".
_LOOKUP_ALIASES = {"rsa-pss": "rsapss"}
_DISPLAY_ALIASES = {"rsapss": "rsa-pss"}


def is_valid_certificate_role(value: str) -> bool:
    return value in ALLOWED_CERTIFICATE_ROLES


def normalize_certificate_role(value: str | None) -> CertificateRole:
    if value is None:
        return DEFAULT_CERTIFICATE_ROLE
    normalized = value.strip().lower()
    if not is_valid_certificate_role(normalized):
        raise ValueError("certificate role must be one of: dsc, csca")
    return normalized  # type: ignore[return-value]


def canonical_signature_algorithm(value: object) -> object:
    """Map a signature algorithm name to the key used by the support tables."""
    if isinstance(value, str):
        return _LOOKUP_ALIASES.get(value, value)
    return value


def display_signature_algorithm(value: str) -> str:
    return _DISPLAY_ALIASES.get(value, value)
