"""Certificate configuration records as published in the map datasets."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CertificateDescriptor(BaseModel):
    """One signature/hash/key configuration observed for a country.

    ``curve_exponent`` is the RSA public exponent for ``rsa``/``rsapss``
    certificates and the named curve for ``ecdsa`` certificates. Values are
    taken as published: ``"2048"`` is not a bit length and ``65537`` is not an
    exponent string, so such records are rejected instead of coerced.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, strict=True)

    signature_algorithm: str
    hash_algorithm: str
    curve_exponent: str
    bit_length: int
    amount: int = Field(..., ge=0)


class AnnotatedCertificate(CertificateDescriptor):
    is_supported: bool
