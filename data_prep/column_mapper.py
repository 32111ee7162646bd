"""
Infer which spreadsheet column holds each canonical loan field.

Matching is alias-table driven, no scoring:
  1. Normalize every header and every alias the same way.
  2. For each canonical field, walk its aliases in priority order.
  3. The first alias that equals, contains, or is contained in some header
     claims the FIRST such header (left to right) and the field is done.

A header may be claimed by several fields; that ambiguity is reported as-is.
Fields that match nothing are absent from the mapping, never mapped to ''.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

from core.schema import VALIDATOR_FIELDS, CanonicalField, field_names

logger = logging.getLogger(__name__)

# Canonical field name -> source column name. Read-only once built.
ColumnMapping = Mapping[str, str]

_NOT_WORD = re.compile(r"[^a-z0-9_]")
_NOT_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_header(header: str) -> str:
    """Validator rule: lower-case, keep [a-z0-9_]."""
    return _NOT_WORD.sub("", str(header).lower())


def normalize_header_loose(header: str) -> str:
    """Ingestion rule: lower-case, keep [a-z0-9] only (underscores dropped too)."""
    return _NOT_ALNUM.sub("", str(header).lower())


def _matches(norm_header: str, norm_alias: str) -> bool:
    return (
        norm_header == norm_alias
        or norm_alias in norm_header
        or norm_header in norm_alias
    )


def match_columns(
    headers: Sequence[str],
    fields: Tuple[CanonicalField, ...],
    normalize: Callable[[str], str],
) -> Dict[str, str]:
    """Run the alias walk for every field; returns a plain dict in field order."""
    normalized = [normalize(h) for h in headers]
    mapping: Dict[str, str] = {}

    for fld in fields:
        for alias in fld.aliases:
            norm_alias = normalize(alias)
            hit = next(
                (
                    i for i, h in enumerate(normalized)
                    # a header with nothing left after normalizing can't mean anything
                    if h and _matches(h, norm_alias)
                ),
                None,
            )
            if hit is not None:
                mapping[fld.name] = headers[hit]
                logger.debug(f"[Column Mapper] {fld.name} -> {headers[hit]!r} (alias {alias!r})")
                break

    return mapping


def map_columns(
    headers: Sequence[str],
    *,
    fields: Tuple[CanonicalField, ...] = VALIDATOR_FIELDS,
    normalize: Callable[[str], str] = normalize_header,
) -> ColumnMapping:
    """Auto-map headers to canonical fields. Never fails; worst case is empty."""
    return MappingProxyType(match_columns(list(headers), fields, normalize))


def resolve_mapping(
    headers: Sequence[str],
    existing_mapping: Optional[Mapping[str, str]] = None,
    *,
    fields: Tuple[CanonicalField, ...] = VALIDATOR_FIELDS,
    normalize: Callable[[str], str] = normalize_header,
) -> ColumnMapping:
    """
    Merge a caller-supplied mapping with auto-mapping.

    Entries in `existing_mapping` win; auto-mapping fills every field they
    don't name. Blank override values are ignored. An override for an unknown
    field, or one pointing at a column not in `headers`, raises ValueError.
    """
    headers = list(headers)
    if not existing_mapping:
        return map_columns(headers, fields=fields, normalize=normalize)

    known = field_names(fields)
    overrides: Dict[str, str] = {}
    for name, column in existing_mapping.items():
        if name not in known:
            raise ValueError(f"Unknown canonical field in mapping: {name!r}")
        if column is None or not str(column).strip():
            continue
        if column not in headers:
            raise ValueError(f"Mapped column {column!r} for {name!r} is not in the file headers.")
        overrides[name] = column

    auto = match_columns(headers, fields, normalize)
    merged = {
        name: overrides.get(name, auto.get(name))
        for name in known
        if name in overrides or name in auto
    }
    return MappingProxyType(merged)
