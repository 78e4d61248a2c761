"""Loading of the published certificate datasets and local country lists."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from pydantic import ValidationError

from passport_coverage.aggregator import CountryRecord, build_country_records
from passport_coverage.certificates import CertificateDescriptor
from passport_coverage.errors import (
    DatasetRequestError,
    DatasetUnavailableError,
    PassportCoverageError,
    SchemaValidationError,
)
from passport_coverage.overrides import DEFAULT_COUNTRY_OVERRIDES, CountryOverrides
from passport_coverage.support_table import SupportTableSet

logger = logging.getLogger(__name__)

_REGISTRY_OUTPUTS = (
    "https://raw.githubusercontent.com/selfxyz/self/"
    "52dba2742b4c37a957eb5ab8ebee83fdccdcf187/registry/outputs"
)
DEFAULT_DSC_URL = f"{_REGISTRY_OUTPUTS}/map_dsc.json"
DEFAULT_CSCA_URL = f"{_REGISTRY_OUTPUTS}/map_csca.json"

CertificateDataset = dict[str, list[CertificateDescriptor]]


@dataclass
class DatasetClient:
    timeout: float = 10.0
    retries: int = 2

    def __post_init__(self) -> None:
        try:
            import requests
            from requests.adapters import HTTPAdapter
            from urllib3.util.retry import Retry
        except Exception as exc:  # pragma: no cover
            raise DatasetUnavailableError(f"requests stack unavailable: {exc}") from exc

        self._session = requests.Session()
        retry = Retry(
            total=max(0, int(self.retries)),
            connect=max(0, int(self.retries)),
            read=max(0, int(self.retries)),
            status=max(0, int(self.retries)),
            status_forcelist=(429, 500, 502, 503, 504),
            backoff_factor=0.2,
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

    def fetch_json(self, url: str) -> object:
        logger.debug("fetching %s", url)
        try:
            response = self._session.get(url, timeout=self.timeout)
        except Exception as exc:
            raise DatasetUnavailableError(f"{url}: {exc}") from exc

        if response.status_code >= 400:
            raise DatasetRequestError(
                f"dataset request failed: {response.status_code} {url}",
                url=url,
                status_code=response.status_code,
                body=response.text,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise SchemaValidationError(f"{url} did not return JSON: {exc}") from exc

    def fetch_dataset(self, url: str) -> CertificateDataset:
        return parse_certificate_dataset(self.fetch_json(url), source=url)


def parse_certificate_dataset(raw: object, *, source: str = "dataset") -> CertificateDataset:
    """Validate a ``{country_code: [record, ...]}`` document."""
    if not isinstance(raw, dict):
        raise SchemaValidationError(f"{source} must be a JSON object keyed by country code")

    dataset: CertificateDataset = {}
    for country_code, records in raw.items():
        if not isinstance(records, list):
            raise SchemaValidationError(f"{source}: {country_code} must map to a list")
        parsed: list[CertificateDescriptor] = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise SchemaValidationError(f"{source}: {country_code}[{index}] is not an object")
            try:
                parsed.append(CertificateDescriptor(**record))
            except ValidationError as exc:
                raise SchemaValidationError(
                    f"{source}: {country_code}[{index}] is invalid: {exc}"
                ) from exc
        dataset[str(country_code)] = parsed
    return dataset


def _load_json(path: str | Path) -> object:
    json_path = Path(path)
    try:
        return json.loads(json_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DatasetUnavailableError(f"cannot read {json_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SchemaValidationError(f"invalid JSON in {json_path}: {exc}") from exc


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_certificate_dataset(
    source: str | Path, *, client: DatasetClient | None = None
) -> CertificateDataset:
    """Read a dataset from an http(s) URL or a local JSON file."""
    if isinstance(source, str) and _is_url(source):
        return (client or DatasetClient()).fetch_dataset(source)
    return parse_certificate_dataset(_load_json(source), source=str(source))


def load_country_names(path: str | Path) -> dict[str, str]:
    raw = _load_json(path)
    if not isinstance(raw, dict) or not all(
        isinstance(name, str) for name in raw.values()
    ):
        raise SchemaValidationError(f"{path} must map country codes to names")
    return {str(code): name for code, name in raw.items()}


def load_issuing_countries(path: str | Path) -> list[str]:
    raw = _load_json(path)
    if not isinstance(raw, list) or not all(isinstance(code, str) for code in raw):
        raise SchemaValidationError(f"{path} must be a list of country codes")
    return list(raw)


def _names_from_datasets(*datasets: Mapping[str, object]) -> dict[str, str]:
    codes: set[str] = set()
    for dataset in datasets:
        codes.update(dataset)
    return {code: code for code in sorted(codes)}


def load_coverage_inputs(
    *,
    dsc_source: str | Path,
    csca_source: str | Path,
    country_names_path: str | Path | None = None,
    issuing_countries_path: str | Path | None = None,
    client: DatasetClient | None = None,
) -> tuple[CertificateDataset, CertificateDataset, list[str], dict[str, str]]:
    """Load every input of the coverage map; errors propagate."""
    http_client = client
    if http_client is None and any(
        isinstance(source, str) and _is_url(source) for source in (dsc_source, csca_source)
    ):
        http_client = DatasetClient()

    dsc_data = load_certificate_dataset(dsc_source, client=http_client)
    csca_data = load_certificate_dataset(csca_source, client=http_client)
    issuing: list[str] = []
    if issuing_countries_path is not None:
        issuing = load_issuing_countries(issuing_countries_path)
    if country_names_path is not None:
        country_names = load_country_names(country_names_path)
    else:
        country_names = _names_from_datasets(dsc_data, csca_data, dict.fromkeys(issuing))
    logger.info(
        "loaded %d DSC and %d CSCA country entries for %d countries",
        len(dsc_data),
        len(csca_data),
        len(country_names),
    )
    return dsc_data, csca_data, issuing, country_names


def load_coverage(
    *,
    dsc_source: str | Path = DEFAULT_DSC_URL,
    csca_source: str | Path = DEFAULT_CSCA_URL,
    country_names_path: str | Path | None = None,
    issuing_countries_path: str | Path | None = None,
    overrides: CountryOverrides = DEFAULT_COUNTRY_OVERRIDES,
    tables: SupportTableSet | None = None,
    client: DatasetClient | None = None,
) -> dict[str, CountryRecord]:
    """Build country records, or return an empty mapping when inputs cannot be loaded."""
    try:
        dsc_data, csca_data, issuing, country_names = load_coverage_inputs(
            dsc_source=dsc_source,
            csca_source=csca_source,
            country_names_path=country_names_path,
            issuing_countries_path=issuing_countries_path,
            client=client,
        )
    except PassportCoverageError as exc:
        logger.error("error fetching map data: %s", exc)
        return {}
    return build_country_records(
        dsc_data,
        csca_data,
        issuing,
        country_names,
        overrides=overrides,
        tables=tables,
    )
