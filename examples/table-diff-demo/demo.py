#!/usr/bin/env python3
"""Table diff demo: show which countries change status between support table versions."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from passport_coverage.aggregator import build_country_records
from passport_coverage.support_table import load_support_tables

SAMPLE_NAMES = {"DEU": "Germany", "AUT": "Austria", "FRA": "France"}
SAMPLE_ISSUING = ["DEU", "AUT", "FRA"]
SAMPLE_DSC = {
    "DEU": [
        {
            "signature_algorithm": "ecdsa",
            "hash_algorithm": "sha256",
            "curve_exponent": "brainpoolp512r1",
            "bit_length": 512,
            "amount": 80,
        }
    ],
    "FRA": [
        {
            "signature_algorithm": "ecdsa",
            "hash_algorithm": "sha256",
            "curve_exponent": "brainpoolp256r1",
            "bit_length": 256,
            "amount": 40,
        }
    ],
}
SAMPLE_CSCA = {
    "DEU": [
        {
            "signature_algorithm": "ecdsa",
            "hash_algorithm": "sha512",
            "curve_exponent": "brainpoolp512r1",
            "bit_length": 512,
            "amount": 3,
        }
    ],
    "AUT": [
        {
            "signature_algorithm": "rsa",
            "hash_algorithm": "sha256",
            "curve_exponent": "107903",
            "bit_length": 4096,
            "amount": 2,
        }
    ],
    "FRA": [
        {
            "signature_algorithm": "rsa-pss",
            "hash_algorithm": "sha256",
            "curve_exponent": "65537",
            "bit_length": 4096,
            "amount": 2,
        }
    ],
}


def _statuses(version: str) -> dict[str, str]:
    records = build_country_records(
        SAMPLE_DSC,
        SAMPLE_CSCA,
        SAMPLE_ISSUING,
        SAMPLE_NAMES,
        tables=load_support_tables(version),
    )
    return {name: record.issuance_status.name for name, record in sorted(records.items())}


def diff_versions(old: str, new: str) -> dict[str, tuple[str, str]]:
    before = _statuses(old)
    after = _statuses(new)
    return {name: (before[name], after[name]) for name in before if before[name] != after[name]}


def run_demo(output: Path | None = None, *, old: str = "v1", new: str = "v2") -> int:
    changes = diff_versions(old, new)
    for name, (before, after) in changes.items():
        print(f"{name}: {before} -> {after}")
    if not changes:
        print(f"no status changes between {old} and {new}")
    if output is not None:
        output.write_text(
            json.dumps({name: list(pair) for name, pair in changes.items()}, indent=2) + "\n",
            encoding="utf-8",
        )
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--old", default="v1")
    parser.add_argument("--new", default="v2")
    parser.add_argument("--output", type=Path, default=None)
    args = parser.parse_args()
    return run_demo(args.output, old=args.old, new=args.new)


if __name__ == "__main__":
    raise SystemExit(main())
