"""Versioned reference tables of supported certificate configurations.

Each packaged version lives in ``data/support_tables/<version>.json`` and maps
``signature algorithm -> hash algorithm -> {key_identifiers, bit_lengths}``
separately for DSC and CSCA certificates. Documents are validated on load and
exposed as read-only structures; nothing here is mutated after loading.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from passport_coverage.errors import SchemaValidationError, UnknownTableVersionError
from passport_coverage.roles import CertificateRole, normalize_certificate_role

CANONICAL_TABLE_VERSION = "v2"
PACKAGED_TABLE_VERSIONS: tuple[str, ...] = ("v1", "v2")


class SupportEntryDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key_identifiers: List[str] = Field(..., min_length=1)
    bit_lengths: List[int] = Field(..., min_length=1)


class RoleTablesDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dsc: Dict[str, Dict[str, SupportEntryDocument]]
    csca: Dict[str, Dict[str, SupportEntryDocument]]


class SupportTableDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str = Field(..., min_length=1)
    changelog: List[str] = Field(default_factory=list)
    tables: RoleTablesDocument


@dataclass(frozen=True)
class SupportEntry:
    key_identifiers: frozenset[str]
    bit_lengths: frozenset[int]

    def allows(self, key_identifier: object, bit_length: object) -> bool:
        try:
            return key_identifier in self.key_identifiers and bit_length in self.bit_lengths
        except TypeError:  # unhashable values read from a malformed record
            return False


@dataclass(frozen=True)
class SupportTable:
    role: CertificateRole
    algorithms: Mapping[str, Mapping[str, SupportEntry]]

    def lookup(self, signature_algorithm: object, hash_algorithm: object) -> SupportEntry | None:
        if not isinstance(signature_algorithm, str) or not isinstance(hash_algorithm, str):
            return None
        hashes = self.algorithms.get(signature_algorithm)
        if hashes is None:
            return None
        return hashes.get(hash_algorithm)


@dataclass(frozen=True)
class SupportTableSet:
    version: str
    changelog: tuple[str, ...]
    dsc: SupportTable
    csca: SupportTable

    def for_role(self, role: str | None) -> SupportTable:
        if normalize_certificate_role(role) == "csca":
            return self.csca
        return self.dsc


def _freeze_role_table(
    role: CertificateRole, raw: Dict[str, Dict[str, SupportEntryDocument]]
) -> SupportTable:
    algorithms = {
        signature_algorithm: MappingProxyType(
            {
                hash_algorithm: SupportEntry(
                    key_identifiers=frozenset(entry.key_identifiers),
                    bit_lengths=frozenset(entry.bit_lengths),
                )
                for hash_algorithm, entry in hashes.items()
            }
        )
        for signature_algorithm, hashes in raw.items()
    }
    return SupportTable(role=role, algorithms=MappingProxyType(algorithms))


def build_support_tables(document: dict) -> SupportTableSet:
    try:
        model = SupportTableDocument(**document)
    except (TypeError, ValidationError) as exc:
        raise SchemaValidationError(f"invalid support table document: {exc}") from exc
    return SupportTableSet(
        version=model.version,
        changelog=tuple(model.changelog),
        dsc=_freeze_role_table("dsc", model.tables.dsc),
        csca=_freeze_role_table("csca", model.tables.csca),
    )


def _parse_document(raw: str, source: str) -> SupportTableSet:
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SchemaValidationError(f"invalid JSON in {source}: {exc}") from exc
    if not isinstance(document, dict):
        raise SchemaValidationError(f"{source} must contain a JSON object")
    return build_support_tables(document)


def available_table_versions() -> tuple[str, ...]:
    return PACKAGED_TABLE_VERSIONS


def load_support_tables(version: str | None = None) -> SupportTableSet:
    """Load a packaged table version (default: the canonical one)."""
    return _load_packaged(version or CANONICAL_TABLE_VERSION)


@lru_cache(maxsize=None)
def _load_packaged(selected: str) -> SupportTableSet:
    if selected not in PACKAGED_TABLE_VERSIONS:
        raise UnknownTableVersionError(
            f"unknown support table version {selected!r}; "
            f"available: {', '.join(PACKAGED_TABLE_VERSIONS)}"
        )
    resource = files("passport_coverage") / "data" / "support_tables" / f"{selected}.json"
    tables = _parse_document(resource.read_text(encoding="utf-8"), f"{selected}.json")
    if tables.version != selected:
        raise SchemaValidationError(
            f"{selected}.json declares version {tables.version!r}"
        )
    return tables


def load_support_tables_file(path: str | Path) -> SupportTableSet:
    table_path = Path(path)
    try:
        raw = table_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaValidationError(f"cannot read support table {table_path}: {exc}") from exc
    return _parse_document(raw, str(table_path))


def canonical_support_tables() -> SupportTableSet:
    return load_support_tables(CANONICAL_TABLE_VERSION)
