"""
Structural queries and value conversion.

A SectionRule is an ordered list of ElementPath queries (the XPath subset
supported by xml.etree.ElementTree) plus a ValueKind saying how matched
elements become values. Queries are tried in order; the first one that
yields a non-empty value wins.

Sub-entity converters (authors, references) match descendants by local
name, so the same converter works for JATS and for namespaced formats
like the Elsevier article API.
"""

from __future__ import annotations

import copy
import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pubchunks.exceptions import ConfigurationError
from pubchunks.models import Author, Reference
from pubchunks.readers.xml_reader import local_name

logger = logging.getLogger(__name__)


class ValueKind(str, Enum):
    """How matched elements are turned into section values."""

    TEXT = "text"  # Text of the first match
    TEXT_LIST = "text_list"  # Text of every match
    CONTENT = "content"  # Whole subtree of the first match (text or XML)
    AUTHORS = "authors"  # One Author per match
    REFERENCES = "references"  # One Reference per match


@dataclass(frozen=True)
class SectionRule:
    """Candidate queries for one section, tried in order.

    Attributes:
        queries: ElementPath expressions relative to the document root.
        kind: Conversion applied to the matched elements.
    """

    queries: tuple[str, ...]
    kind: ValueKind = ValueKind.TEXT

    def __post_init__(self):
        queries = self.queries
        if isinstance(queries, str):
            queries = (queries,)
        queries = tuple(queries)
        if not queries:
            raise ConfigurationError("SectionRule needs at least one query")
        for query in queries:
            if not isinstance(query, str) or not query.strip():
                raise ConfigurationError(f"Invalid query {query!r}")
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "queries", queries)
        try:
            object.__setattr__(self, "kind", ValueKind(self.kind))
        except ValueError:
            raise ConfigurationError(
                f"Unknown value kind {self.kind!r}. Known: {', '.join(k.value for k in ValueKind)}"
            ) from None


def rule(*queries: str, kind: ValueKind | str = ValueKind.TEXT) -> SectionRule:
    """Shorthand for building a SectionRule in profile tables."""
    return SectionRule(queries=queries, kind=kind)


def normalize_text(text: str) -> str:
    """Collapse runs of whitespace to single spaces."""
    return " ".join(text.split())


def element_text(element: ET.Element, normalize: bool = True) -> str:
    """All text inside an element, children included."""
    text = "".join(element.itertext())
    return normalize_text(text) if normalize else text.strip()


def element_xml(element: ET.Element) -> str:
    """Serialise an element without its tail text."""
    # Shallow copy so the caller's tree keeps its tail
    detached = copy.copy(element)
    detached.tail = None
    return ET.tostring(detached, encoding="unicode")


def _descendants(element: ET.Element, *names: str) -> Iterable[ET.Element]:
    wanted = set(names)
    for child in element.iter():
        if child is not element and local_name(child.tag) in wanted:
            yield child


def _first_text(element: ET.Element, *names: str, normalize: bool = True) -> str | None:
    for child in _descendants(element, *names):
        text = element_text(child, normalize)
        if text:
            return text
    return None


def to_author(element: ET.Element, normalize: bool = True) -> Author:
    """Build an Author from a JATS contrib or Elsevier ce:author element."""
    given = _first_text(element, "given-names", "given-name", normalize=normalize)
    surname = _first_text(element, "surname", normalize=normalize)
    email = _first_text(element, "email", "e-address", normalize=normalize)
    if given is None and surname is None:
        # Collaborations and string names carry no name parts
        surname = _first_text(element, "collab", "string-name", normalize=normalize)
    return Author(given_names=given, surname=surname, email=email)


def _reference_doi(element: ET.Element) -> str | None:
    for child in _descendants(element, "pub-id", "object-id"):
        if child.get("pub-id-type") == "doi":
            return element_text(child) or None
    for child in _descendants(element, "ext-link"):
        if child.get("ext-link-type") == "doi":
            return element_text(child) or None
    doi = next(iter(_descendants(element, "doi")), None)
    if doi is not None:
        return element_text(doi) or None
    return None


def to_reference(element: ET.Element, normalize: bool = True) -> Reference:
    """Build a Reference from a JATS ref or Elsevier ce:bib-reference element."""
    citation = next(
        iter(
            _descendants(
                element,
                "mixed-citation",
                "element-citation",
                "citation",
                "nlm-citation",
                "source-text",
                "reference",
            )
        ),
        element,
    )
    text = element_text(citation, normalize) or None
    return Reference(ref_id=element.get("id"), text=text, doi=_reference_doi(element))


def convert(
    kind: ValueKind,
    elements: list[ET.Element],
    *,
    output: str = "text",
    normalize: bool = True,
) -> tuple[Any, ...]:
    """Convert matched elements into section values.

    Empty strings and entities with no content are dropped.
    """
    if kind is ValueKind.TEXT:
        texts = (element_text(e, normalize) for e in elements)
        first = next((t for t in texts if t), None)
        return (first,) if first else ()

    if kind is ValueKind.TEXT_LIST:
        return tuple(t for t in (element_text(e, normalize) for e in elements) if t)

    if kind is ValueKind.CONTENT:
        for element in elements:
            if output == "xml":
                return (element_xml(element),)
            text = element_text(element, normalize)
            if text:
                return (text,)
        return ()

    if kind is ValueKind.AUTHORS:
        authors = (to_author(e, normalize) for e in elements)
        return tuple(a for a in authors if a.given_names or a.surname)

    if kind is ValueKind.REFERENCES:
        refs = (to_reference(e, normalize) for e in elements)
        return tuple(r for r in refs if r.text or r.doi)

    raise ConfigurationError(f"Unhandled value kind: {kind!r}")


def evaluate(
    section_rule: SectionRule,
    root: ET.Element,
    namespaces: Mapping[str, str] | None = None,
    *,
    output: str = "text",
    normalize: bool = True,
) -> tuple[tuple[Any, ...], str | None]:
    """Run a rule's queries against a tree.

    Returns:
        (values, matched_query); values is empty and matched_query None
        when no query produced anything.
    """
    ns = dict(namespaces or {})
    for query in section_rule.queries:
        try:
            elements = root.findall(query, ns)
        except (SyntaxError, KeyError) as e:
            # Bad custom query or undeclared prefix; try the next candidate
            logger.warning("Skipping invalid query %r: %s", query, e)
            continue

        if not elements:
            continue

        values = convert(section_rule.kind, elements, output=output, normalize=normalize)
        if values:
            return values, query

    return (), None
