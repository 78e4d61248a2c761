"""Command-line interface for passport-coverage."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Sequence

from passport_coverage.aggregator import IssuanceStatus, build_country_records, status_counts
from passport_coverage.classifier import is_supported
from passport_coverage.cli.config import ConfigError, CoverageConfig, load_cli_config
from passport_coverage.datasets import DatasetClient, load_coverage_inputs
from passport_coverage.errors import (
    DatasetUnavailableError,
    SchemaValidationError,
    UnknownTableVersionError,
)
from passport_coverage.formatting import (
    STATUS_COLORS,
    STATUS_LABELS,
    describe_country,
    record_to_dict,
)
from passport_coverage.roles import ALLOWED_CERTIFICATE_ROLES
from passport_coverage.support_table import (
    CANONICAL_TABLE_VERSION,
    SupportTableSet,
    available_table_versions,
    load_support_tables,
    load_support_tables_file,
)

EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_NETWORK_ERROR = 2
EXIT_UNSUPPORTED = 4

_LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def _package_version() -> str:
    try:
        return pkg_version("passport-coverage")
    except PackageNotFoundError:
        return "0.0.0+local"


def _add_table_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--table-version",
        choices=available_table_versions(),
        default=None,
        help="Packaged support table version (default from config)",
    )
    group.add_argument(
        "--support-table",
        default=None,
        help="Path to a custom support table JSON document",
    )


def _add_dataset_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--dsc-source", default=None, help="DSC dataset URL or file path")
    parser.add_argument("--csca-source", default=None, help="CSCA dataset URL or file path")
    parser.add_argument(
        "--country-names",
        default=None,
        help="JSON file mapping country codes to display names",
    )
    parser.add_argument(
        "--issuing-countries",
        default=None,
        help="JSON file listing country codes known to issue e-passports",
    )
    _add_table_arguments(parser)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="passport-coverage")
    parser.add_argument(
        "--version",
        action="version",
        version=f"passport-coverage {_package_version()}",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to CLI config TOML (default: ~/.passport_coverage/config.toml)",
    )
    parser.add_argument(
        "--log-level",
        choices=("debug", "info", "warning", "error", "critical"),
        default=None,
        help="Logging level override (default from config)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    version = sub.add_parser("version", help="Show package and support table versions")
    version.add_argument("--json", action="store_true", help="Print version details as JSON")

    classify = sub.add_parser("classify", help="Check one certificate configuration")
    classify.add_argument("--role", choices=ALLOWED_CERTIFICATE_ROLES, default="dsc")
    classify.add_argument("--signature-algorithm", required=True)
    classify.add_argument("--hash-algorithm", required=True)
    classify.add_argument(
        "--curve-exponent",
        required=True,
        help="RSA public exponent or ECDSA named curve",
    )
    classify.add_argument("--bit-length", type=int, required=True)
    _add_table_arguments(classify)
    classify.add_argument("--json", action="store_true")

    table = sub.add_parser("table", help="Show a support table")
    table.add_argument("--role", choices=ALLOWED_CERTIFICATE_ROLES, default=None)
    _add_table_arguments(table)
    table.add_argument("--json", action="store_true")

    coverage = sub.add_parser("coverage", help="Summarize issuance status for every country")
    _add_dataset_arguments(coverage)
    coverage.add_argument("--json", action="store_true")

    country = sub.add_parser("country", help="Describe one country")
    country.add_argument("name", help="Country display name (or code without a names file)")
    _add_dataset_arguments(country)
    country.add_argument("--json", action="store_true")

    return parser


def _print_error(stderr, prefix: str, message: str, *, code: int) -> int:
    print(f"{prefix}: {message}", file=stderr)
    return code


def _install_log_handler(level: str, stderr) -> tuple[logging.Handler, int]:
    handler = logging.StreamHandler(stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    package_logger = logging.getLogger("passport_coverage")
    previous_level = package_logger.level
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    return handler, previous_level


def _resolve_tables(args, config: CoverageConfig) -> SupportTableSet:
    support_table = getattr(args, "support_table", None)
    if support_table:
        return load_support_tables_file(support_table)
    table_version = getattr(args, "table_version", None)
    if table_version:
        return load_support_tables(table_version)
    if config.support_table_path:
        return load_support_tables_file(config.support_table_path)
    return load_support_tables(config.table_version)


def _run_version(*, config: CoverageConfig, as_json: bool, stdout) -> int:
    payload = {
        "cli": "passport-coverage",
        "package_version": _package_version(),
        "canonical_table_version": CANONICAL_TABLE_VERSION,
        "configured_table_version": config.table_version,
        "available_table_versions": list(available_table_versions()),
    }
    if as_json:
        print(json.dumps(payload, sort_keys=True), file=stdout)
    else:
        print(f"passport-coverage {payload['package_version']}", file=stdout)
        print(f"support table: {config.table_version}", file=stdout)
        print(f"canonical support table: {CANONICAL_TABLE_VERSION}", file=stdout)
    return EXIT_SUCCESS


def _run_classify(*, args, tables: SupportTableSet, stdout) -> int:
    cert = {
        "signature_algorithm": args.signature_algorithm.strip().lower(),
        "hash_algorithm": args.hash_algorithm.strip().lower(),
        "curve_exponent": args.curve_exponent.strip(),
        "bit_length": args.bit_length,
    }
    supported = is_supported(cert, args.role, tables=tables)
    if args.json:
        payload = {
            **cert,
            "role": args.role,
            "table_version": tables.version,
            "is_supported": supported,
        }
        print(json.dumps(payload, sort_keys=True), file=stdout)
    else:
        print("supported" if supported else "unsupported", file=stdout)
    return EXIT_SUCCESS if supported else EXIT_UNSUPPORTED


def _run_table(*, args, tables: SupportTableSet, stdout) -> int:
    roles = (args.role,) if args.role else ALLOWED_CERTIFICATE_ROLES
    payload: dict = {"version": tables.version, "changelog": list(tables.changelog)}
    for role in roles:
        table = tables.for_role(role)
        payload[role] = {
            signature_algorithm: {
                hash_algorithm: {
                    "key_identifiers": sorted(entry.key_identifiers),
                    "bit_lengths": sorted(entry.bit_lengths),
                }
                for hash_algorithm, entry in hashes.items()
            }
            for signature_algorithm, hashes in table.algorithms.items()
        }

    if args.json:
        print(json.dumps(payload, sort_keys=True), file=stdout)
        return EXIT_SUCCESS

    print(f"support table {tables.version}", file=stdout)
    for role in roles:
        print(f"[{role}]", file=stdout)
        for signature_algorithm, hashes in payload[role].items():
            for hash_algorithm, entry in hashes.items():
                keys = ", ".join(entry["key_identifiers"])
                bits = ", ".join(str(bits) for bits in entry["bit_lengths"])
                print(
                    f"  {signature_algorithm}/{hash_algorithm}: {keys} @ {bits} bits",
                    file=stdout,
                )
    return EXIT_SUCCESS


def _load_records(*, args, config: CoverageConfig, tables: SupportTableSet):
    dsc_data, csca_data, issuing, country_names = load_coverage_inputs(
        dsc_source=args.dsc_source or config.dsc_url,
        csca_source=args.csca_source or config.csca_url,
        country_names_path=args.country_names or config.country_names_path,
        issuing_countries_path=args.issuing_countries or config.issuing_countries_path,
        client=DatasetClient(timeout=config.timeout),
    )
    return build_country_records(
        dsc_data,
        csca_data,
        issuing,
        country_names,
        overrides=config.overrides,
        tables=tables,
    )


def _run_coverage(*, args, config: CoverageConfig, tables: SupportTableSet, stdout) -> int:
    records = _load_records(args=args, config=config, tables=tables)
    counts = status_counts(records)
    if args.json:
        payload = {
            "table_version": tables.version,
            "counts": {status.name: counts[status] for status in IssuanceStatus},
            "countries": {
                name: record.issuance_status.name for name, record in sorted(records.items())
            },
        }
        print(json.dumps(payload, sort_keys=True), file=stdout)
        return EXIT_SUCCESS

    for status in sorted(IssuanceStatus, reverse=True):
        print(
            f"{STATUS_LABELS[status]} ({STATUS_COLORS[status]}): {counts[status]}",
            file=stdout,
        )
    for name, record in sorted(records.items()):
        print(f"{name}: {record.issuance_status.name}", file=stdout)
    return EXIT_SUCCESS


def _run_country(*, args, config: CoverageConfig, tables: SupportTableSet, stdout, stderr) -> int:
    records = _load_records(args=args, config=config, tables=tables)
    record = records.get(args.name)
    if record is None:
        return _print_error(
            stderr, "country error", f"unknown country: {args.name}", code=EXIT_VALIDATION_ERROR
        )
    if args.json:
        payload = record_to_dict(record)
        payload["summary"] = describe_country(record, overrides=config.overrides)
        print(json.dumps(payload, sort_keys=True), file=stdout)
        return EXIT_SUCCESS

    label = STATUS_LABELS[record.issuance_status]
    print(f"{record.name} ({record.country_code}): {label}", file=stdout)
    for line in describe_country(record, overrides=config.overrides):
        print(line, file=stdout)
    return EXIT_SUCCESS


def _dispatch(args, *, config: CoverageConfig, stdout, stderr) -> int:
    if args.command == "version":
        return _run_version(config=config, as_json=args.json, stdout=stdout)

    try:
        tables = _resolve_tables(args, config)
    except (UnknownTableVersionError, SchemaValidationError) as exc:
        return _print_error(stderr, "support table error", str(exc), code=EXIT_VALIDATION_ERROR)
    logger.debug("using support table %s", tables.version)

    if args.command == "classify":
        return _run_classify(args=args, tables=tables, stdout=stdout)

    if args.command == "table":
        return _run_table(args=args, tables=tables, stdout=stdout)

    try:
        if args.command == "coverage":
            return _run_coverage(args=args, config=config, tables=tables, stdout=stdout)
        if args.command == "country":
            return _run_country(
                args=args, config=config, tables=tables, stdout=stdout, stderr=stderr
            )
    except SchemaValidationError as exc:
        return _print_error(stderr, "dataset error", str(exc), code=EXIT_VALIDATION_ERROR)
    except DatasetUnavailableError as exc:
        return _print_error(stderr, "dataset error", str(exc), code=EXIT_NETWORK_ERROR)

    print("unknown command", file=stderr)
    return EXIT_VALIDATION_ERROR


def main(argv: Sequence[str] | None = None, *, stdout=sys.stdout, stderr=sys.stderr) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_cli_config(args.config)
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_VALIDATION_ERROR)

    handler, previous_level = _install_log_handler(args.log_level or config.log_level, stderr)
    try:
        return _dispatch(args, config=config, stdout=stdout, stderr=stderr)
    finally:
        package_logger = logging.getLogger("passport_coverage")
        package_logger.removeHandler(handler)
        package_logger.setLevel(previous_level)


if __name__ == "__main__":
    raise SystemExit(main())
