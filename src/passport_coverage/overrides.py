"""Manually curated per-country facts layered over the published datasets."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

# Estimated biometric passports issued, in millions.
DEFAULT_PASSPORTS_ISSUED_MILLIONS: Mapping[str, int] = MappingProxyType(
    {
        "Canada": 27,
        "China": 212,
        "France": 34,
        "Germany": 34,
        "Japan": 21,
        "United Kingdom": 51,
        "United States of America": 167,
    }
)

DEFAULT_COUNTRY_COMMENTS: Mapping[str, str] = MappingProxyType(
    {
        "India": "Just recently started issuing e-passports, penetration is very low.",
        "Iran": "Atypical use of RSA, not planning on reaching full support in the near future.",
        "Austria": "Atypical use of RSA, not planning on reaching full support in the near future.",
    }
)

DEFAULT_NON_ISSUING: frozenset[str] = frozenset({"India"})


@dataclass(frozen=True)
class CountryOverrides:
    """Keyed by country display name."""

    non_issuing: frozenset[str] = DEFAULT_NON_ISSUING
    passports_issued_millions: Mapping[str, int] = field(
        default_factory=lambda: DEFAULT_PASSPORTS_ISSUED_MILLIONS
    )
    comments: Mapping[str, str] = field(default_factory=lambda: DEFAULT_COUNTRY_COMMENTS)

    def is_manually_non_issuing(self, country_name: str) -> bool:
        return country_name in self.non_issuing

    def passports_issued(self, country_name: str) -> int | None:
        millions = self.passports_issued_millions.get(country_name)
        if not millions:
            return None
        return millions * 1_000_000

    def comment_for(self, country_name: str) -> str | None:
        return self.comments.get(country_name)


DEFAULT_COUNTRY_OVERRIDES = CountryOverrides()


class OverridesError(ValueError):
    """Raised when an overrides table is malformed."""


def overrides_from_mapping(
    raw: Mapping[str, Any], *, base: CountryOverrides = DEFAULT_COUNTRY_OVERRIDES
) -> CountryOverrides:
    """Build overrides from a parsed ``[overrides]`` table.

    Keys that are present replace the corresponding default wholesale.
    """
    non_issuing = base.non_issuing
    if "non_issuing" in raw:
        value = raw["non_issuing"]
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise OverridesError("overrides.non_issuing must be a list of country names")
        non_issuing = frozenset(item.strip() for item in value if item.strip())

    passports = base.passports_issued_millions
    if "passports_issued_millions" in raw:
        value = raw["passports_issued_millions"]
        if not isinstance(value, Mapping):
            raise OverridesError("overrides.passports_issued_millions must be a table")
        parsed: dict[str, int] = {}
        for name, count in value.items():
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise OverridesError(
                    f"overrides.passports_issued_millions.{name} must be a non-negative integer"
                )
            parsed[str(name)] = count
        passports = MappingProxyType(parsed)

    comments = base.comments
    if "comments" in raw:
        value = raw["comments"]
        if not isinstance(value, Mapping) or not all(
            isinstance(text, str) for text in value.values()
        ):
            raise OverridesError("overrides.comments must be a table of strings")
        comments = MappingProxyType({str(name): text for name, text in value.items()})

    return CountryOverrides(
        non_issuing=non_issuing,
        passports_issued_millions=passports,
        comments=comments,
    )
