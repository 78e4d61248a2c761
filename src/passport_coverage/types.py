"""Public types."""

from __future__ import annotations

from passport_coverage.roles import (
    ALLOWED_CERTIFICATE_ROLES,
    DEFAULT_CERTIFICATE_ROLE,
    CertificateRole,
    normalize_certificate_role,
)

__all__ = [
    "CertificateRole",
    "ALLOWED_CERTIFICATE_ROLES",
    "DEFAULT_CERTIFICATE_ROLE",
    "normalize_certificate_role",
]
