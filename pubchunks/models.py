"""
Data models for pubchunks.

These models represent the identifiers used by the rule registry and the
output of section extraction. Everything here is a freshly constructed
value; nothing holds a reference back into the parsed XML tree.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pubchunks.exceptions import ConfigurationError

# ═══════════════════════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════════════════════


class Publisher(str, Enum):
    """Publisher profiles with extraction rules."""

    ELIFE = "elife"
    PLOS = "plos"
    ELSEVIER = "elsevier"
    ENTREZ = "entrez"  # PubMed Central XML fetched through Entrez
    HINDAWI = "hindawi"
    PENSOFT = "pensoft"
    PEERJ = "peerj"
    COPERNICUS = "copernicus"
    FRONTIERS = "frontiers"
    F1000RESEARCH = "f1000research"
    COGENT = "cogent"
    UNKNOWN = "unknown"  # Generic JATS rules, best effort


class Section(str, Enum):
    """Logical parts of a scholarly article."""

    FRONT = "front"
    BODY = "body"
    BACK = "back"
    TITLE = "title"
    DOI = "doi"
    CATEGORIES = "categories"
    AUTHORS = "authors"
    AFF = "aff"
    KEYWORDS = "keywords"
    ABSTRACT = "abstract"
    EXECUTIVE_SUMMARY = "executive_summary"
    REFS = "refs"
    REFS_DOIS = "refs_dois"
    PUBLISHER = "publisher"
    JOURNAL_META = "journal_meta"
    ARTICLE_META = "article_meta"
    ACKNOWLEDGMENTS = "acknowledgments"
    PERMISSIONS = "permissions"
    HISTORY = "history"

    @property
    def is_multi_valued(self) -> bool:
        """True for sections that hold one entry per sub-entity."""
        return self in MULTI_VALUED_SECTIONS


MULTI_VALUED_SECTIONS = frozenset(
    {
        Section.AUTHORS,
        Section.AFF,
        Section.KEYWORDS,
        Section.CATEGORIES,
        Section.REFS,
        Section.REFS_DOIS,
    }
)


class SectionStatus(str, Enum):
    """Outcome of extracting one section from one document."""

    FOUND = "found"
    NOT_FOUND = "not_found"  # Rule exists, nothing matched
    UNSUPPORTED = "unsupported"  # No rule for this publisher
    FAILED = "failed"  # The whole document could not be processed


class FailureKind(str, Enum):
    """Why a whole document could not be processed."""

    SOURCE_NOT_FOUND = "source_not_found"
    PARSE_ERROR = "parse_error"
    EXTRACTION_ERROR = "extraction_error"


def parse_publisher(name: str | Publisher) -> Publisher:
    """
    Normalise a publisher name to a Publisher member.

    Raises:
        ConfigurationError: If the name is not a known publisher
    """
    try:
        return Publisher(name)
    except ValueError:
        raise ConfigurationError(
            f"Unknown publisher {name!r}. Known: {', '.join(p.value for p in Publisher)}"
        ) from None


def parse_section(name: str | Section) -> Section:
    """
    Normalise one section name to a Section member.

    Raises:
        ConfigurationError: If the name is not a known section
    """
    try:
        return Section(name)
    except ValueError:
        raise ConfigurationError(
            f"Unknown section {name!r}. Known: {', '.join(s.value for s in Section)}"
        ) from None


def parse_sections(sections: Iterable[str | Section] | str | None) -> tuple[Section, ...]:
    """
    Normalise section names to Section members.

    None means every section. Duplicates are dropped, order is kept.

    Raises:
        ConfigurationError: If a name is not a known section
    """
    if sections is None:
        return tuple(Section)
    if isinstance(sections, str):
        sections = [sections]

    parsed: list[Section] = []
    for name in sections:
        section = parse_section(name)
        if section not in parsed:
            parsed.append(section)
    return tuple(parsed)


# ═══════════════════════════════════════════════════════════════════════════════
# Sub-entities
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Author:
    """An author from a contributor list."""

    given_names: str | None = None
    surname: str | None = None
    email: str | None = None

    @property
    def name(self) -> str:
        """Display name, "Given Surname"."""
        return " ".join(p for p in (self.given_names, self.surname) if p)


@dataclass(frozen=True)
class Reference:
    """A bibliography entry."""

    ref_id: str | None = None
    text: str | None = None
    doi: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Results
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SectionResult:
    """Extraction outcome for one section of one document."""

    section: Section
    status: SectionStatus
    values: tuple[Any, ...] = ()
    query: str | None = None  # The query that matched, if any

    @property
    def found(self) -> bool:
        return self.status is SectionStatus.FOUND

    @property
    def value(self) -> Any:
        """First value, or None when nothing was extracted."""
        return self.values[0] if self.values else None

    @classmethod
    def unsupported(cls, section: Section) -> SectionResult:
        return cls(section=section, status=SectionStatus.UNSUPPORTED)

    @classmethod
    def not_found(cls, section: Section) -> SectionResult:
        return cls(section=section, status=SectionStatus.NOT_FOUND)

    @classmethod
    def failed(cls, section: Section) -> SectionResult:
        return cls(section=section, status=SectionStatus.FAILED)


@dataclass(frozen=True)
class ExtractionFailure:
    """A document-level failure recorded instead of raised."""

    kind: FailureKind
    message: str


@dataclass
class DocumentResult:
    """
    Extraction output for a single document.

    Every requested section has an entry in `sections`. When the document
    could not be read or extracted, `error` says why and each requested
    section carries a `failed` status with no values.

    Example:
        >>> result = pubchunks.chunks("article.xml", sections=["title", "refs"])
        >>> result.publisher
        <Publisher.PENSOFT: 'pensoft'>
        >>> result["title"].value
        'A new species of ...'
    """

    document_id: str
    publisher: Publisher | None = None
    sections: dict[Section, SectionResult] = field(default_factory=dict)
    error: ExtractionFailure | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the document was read and extracted."""
        return self.error is None

    def __getitem__(self, section: str | Section) -> SectionResult:
        return self.sections[parse_section(section)]

    def get(self, section: str | Section) -> SectionResult | None:
        return self.sections.get(parse_section(section))

    @classmethod
    def failed(
        cls,
        document_id: str,
        kind: FailureKind,
        message: str,
        sections: Iterable[Section] = (),
    ) -> DocumentResult:
        """Result for a document that could not be processed.

        Each of `sections` gets an explicit failed marker.
        """
        return cls(
            document_id=document_id,
            sections={s: SectionResult.failed(s) for s in sections},
            error=ExtractionFailure(kind=kind, message=message),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the result
        """
        sections = {}
        for section, result in self.sections.items():
            sections[section.value] = {
                "status": result.status.value,
                "values": [_value_to_json(v) for v in result.values],
            }
        return {
            "document": self.document_id,
            "publisher": self.publisher.value if self.publisher else None,
            "sections": sections,
            "error": (
                {"kind": self.error.kind.value, "message": self.error.message}
                if self.error
                else None
            ),
            "warnings": self.warnings,
        }


def _value_to_json(value: Any) -> Any:
    if isinstance(value, Author):
        return {"given_names": value.given_names, "surname": value.surname, "email": value.email}
    if isinstance(value, Reference):
        return {"ref_id": value.ref_id, "text": value.text, "doi": value.doi}
    return value
