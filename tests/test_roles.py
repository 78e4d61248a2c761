from __future__ import annotations

import pytest

from passport_coverage.roles import (
    canonical_signature_algorithm,
    is_valid_certificate_role,
    normalize_certificate_role,
)
from passport_coverage.types import ALLOWED_CERTIFICATE_ROLES, DEFAULT_CERTIFICATE_ROLE


def test_allowed_roles() -> None:
    assert ALLOWED_CERTIFICATE_ROLES == ("dsc", "csca")
    assert DEFAULT_CERTIFICATE_ROLE == "dsc"
    assert is_valid_certificate_role("csca") is True
    assert is_valid_certificate_role("root") is False


def test_normalize_certificate_role() -> None:
    assert normalize_certificate_role(None) == "dsc"
    assert normalize_certificate_role(" CSCA ") == "csca"
    with pytest.raises(ValueError):
        normalize_certificate_role("intermediate")


def test_canonical_signature_algorithm_passes_other_values_through() -> None:
    assert canonical_signature_algorithm("rsa-pss") == "rsapss"
    assert canonical_signature_algorithm("rsapss") == "rsapss"
    assert canonical_signature_algorithm(None) is None
