"""Catalog loading and service/region selection."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import CatalogEntry, ServiceFilter
from .exceptions import CatalogError

LOG = logging.getLogger(__name__)


def select_entries(
    catalog: Iterable[CatalogEntry], route_filter: ServiceFilter
) -> List[CatalogEntry]:
    """Return the entries matched by ``route_filter`` in catalog order."""

    return [entry for entry in catalog if route_filter.matches(entry)]


def select(catalog: Iterable[CatalogEntry], route_filter: ServiceFilter) -> List[str]:
    """Flatten the prefixes of every matching entry, preserving order."""

    return [
        prefix
        for entry in select_entries(catalog, route_filter)
        for prefix in entry.prefixes
    ]


def available_filters(catalog: Iterable[CatalogEntry]) -> Dict[str, List[str]]:
    """Distinct services and regions present in ``catalog``, sorted."""

    services = set()
    regions = set()
    for entry in catalog:
        services.add(entry.service)
        if entry.region:
            regions.add(entry.region)
    return {
        "services": sorted(services, key=str.lower),
        "regions": sorted(regions, key=str.lower),
    }


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _prefixes(raw: Any, where: str) -> tuple:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise CatalogError(f"{where}: prefixes must be a list")
    return tuple(str(p) for p in raw)


def _parse_entry(item: Any, index: int) -> CatalogEntry:
    if not isinstance(item, dict):
        raise CatalogError(f"entry {index} must be a mapping")
    service = _optional_str(item.get("service"))
    if service is None:
        raise CatalogError(f"entry {index} missing 'service'")
    return CatalogEntry(
        service=service,
        region=_optional_str(item.get("region")),
        prefixes=_prefixes(item.get("prefixes"), f"entry {index}"),
        name=_optional_str(item.get("name")),
    )


def _parse_service_tag(item: Any, index: int) -> CatalogEntry:
    # {"name": "AzureSQL.WestEurope", "properties": {"systemService": ...}}
    if not isinstance(item, dict):
        raise CatalogError(f"value {index} must be a mapping")
    name = _optional_str(item.get("name"))
    properties = item.get("properties") or {}
    if not isinstance(properties, dict):
        raise CatalogError(f"value {index}: 'properties' must be a mapping")

    service = _optional_str(properties.get("systemService")) or name
    if service is None:
        raise CatalogError(f"value {index} has neither a name nor a systemService")
    return CatalogEntry(
        service=service,
        region=_optional_str(properties.get("region")),
        prefixes=_prefixes(properties.get("addressPrefixes"), f"value {index}"),
        name=name,
    )


def parse_catalog(payload: Any) -> List[CatalogEntry]:
    """Build catalog entries from an already decoded JSON document."""

    if isinstance(payload, list):
        return [_parse_entry(item, i) for i, item in enumerate(payload)]
    if not isinstance(payload, dict):
        raise CatalogError("catalog must be a list or a mapping")

    if "entries" in payload:
        entries = payload["entries"]
        if not isinstance(entries, list):
            raise CatalogError("'entries' must be a list")
        return [_parse_entry(item, i) for i, item in enumerate(entries)]

    if "values" in payload:
        values = payload["values"]
        if not isinstance(values, list):
            raise CatalogError("'values' must be a list")
        return [_parse_service_tag(item, i) for i, item in enumerate(values)]

    raise CatalogError("catalog mapping needs an 'entries' or 'values' key")


def load_catalog(path: Path) -> List[CatalogEntry]:
    """Read a catalog JSON file from ``path``."""

    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8-sig"))
    except FileNotFoundError as exc:
        raise CatalogError(f"catalog file {path} does not exist") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"failed to parse catalog {path}: {exc}") from exc

    entries = parse_catalog(payload)
    LOG.debug("Loaded %d catalog entries from %s", len(entries), path)
    return entries


def count_prefixes(entries: Sequence[CatalogEntry]) -> int:
    return sum(len(entry.prefixes) for entry in entries)
