"""
Flatten extraction results into pandas DataFrames.

Produces one table per section group:
- "document": one row per document with every requested single-valued
  section as a column
- one table per requested multi-valued section ("authors", "refs", ...),
  one row per sub-entity, each carrying the originating document

A document with no entries for a section (not found, unsupported, or a
failed document) still contributes one row of None values, so every
document appears in every table and row shape is uniform.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import pandas as pd

from pubchunks.models import (
    Author,
    DocumentResult,
    Reference,
    Section,
    parse_sections,
)

DOCUMENT_TABLE = "document"

# Back-reference columns present in every table
KEY_COLUMNS = ("document", "publisher")

# Columns for structured multi-valued sections
ENTITY_COLUMNS: dict[Section, tuple[str, ...]] = {
    Section.AUTHORS: ("given_names", "surname", "email"),
    Section.REFS: ("ref_id", "text", "doi"),
}
LIST_COLUMNS = ("value",)


def _keys(result: DocumentResult) -> dict[str, Any]:
    return {
        "document": result.document_id,
        "publisher": result.publisher.value if result.publisher else None,
    }


def _entity_row(value: Any, columns: Sequence[str]) -> dict[str, Any]:
    if isinstance(value, Author):
        return {"given_names": value.given_names, "surname": value.surname, "email": value.email}
    if isinstance(value, Reference):
        return {"ref_id": value.ref_id, "text": value.text, "doi": value.doi}
    if len(columns) == 1:
        return {columns[0]: value}
    # Plain text in a structured section (custom rule); keep it in the first column
    row = dict.fromkeys(columns)
    row[columns[0]] = value
    return row


def _requested_sections(
    results: Sequence[DocumentResult], sections: Iterable[str | Section] | None
) -> tuple[Section, ...]:
    if sections is not None:
        return parse_sections(sections)
    # Union of what was extracted, in Section order
    seen = {s for r in results for s in r.sections}
    return tuple(s for s in Section if s in seen)


def document_table(
    results: Sequence[DocumentResult], sections: Sequence[Section]
) -> pd.DataFrame:
    """One row per document; single-valued sections as columns."""
    columns = [*KEY_COLUMNS, "error", *(s.value for s in sections)]
    rows = []
    for result in results:
        row = _keys(result)
        row["error"] = result.error.message if result.error else None
        for section in sections:
            section_result = result.sections.get(section)
            row[section.value] = section_result.value if section_result else None
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def section_table(results: Sequence[DocumentResult], section: Section) -> pd.DataFrame:
    """One row per sub-entity of a multi-valued section."""
    entity_columns = ENTITY_COLUMNS.get(section, LIST_COLUMNS)
    columns = [*KEY_COLUMNS, *entity_columns]
    rows = []
    for result in results:
        keys = _keys(result)
        section_result = result.sections.get(section)
        values = section_result.values if section_result else ()
        if not values:
            rows.append({**keys, **dict.fromkeys(entity_columns)})
            continue
        for value in values:
            rows.append({**keys, **_entity_row(value, entity_columns)})
    return pd.DataFrame(rows, columns=columns)


def tabularize(
    results: DocumentResult | Iterable[DocumentResult],
    sections: Iterable[str | Section] | None = None,
) -> dict[str, pd.DataFrame]:
    """
    Flatten results into tables keyed by group name.

    Args:
        results: One DocumentResult or several
        sections: Sections to include (all extracted sections if None)

    Returns:
        {"document": DataFrame, "<multi-valued section>": DataFrame, ...}

    Example:
        >>> results = pubchunks.chunks_batch(paths, sections=["title", "refs"])
        >>> tables = tabularize(results)
        >>> tables["refs"].groupby("document").size()
    """
    if isinstance(results, DocumentResult):
        results = [results]
    results = list(results)
    requested = _requested_sections(results, sections)

    single = [s for s in requested if not s.is_multi_valued]
    multi = [s for s in requested if s.is_multi_valued]

    tables = {DOCUMENT_TABLE: document_table(results, single)}
    for section in multi:
        tables[section.value] = section_table(results, section)
    return tables
