"""
Extraction orchestrator.

This module provides the main `chunks()` function that pulls sections out
of article XML by wiring together:
- XMLReader (document source -> parsed tree)
- PublisherDetector (tree -> publisher profile)
- RuleRegistry (publisher, section -> rule)
- SectionExtractor (rules -> section values)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pubchunks.config import ExtractionConfig
from pubchunks.extractors.detector import PublisherDetector
from pubchunks.extractors.registry import DEFAULT_REGISTRY, RuleRegistry
from pubchunks.extractors.sections import SectionExtractor
from pubchunks.models import DocumentResult, Publisher, Section
from pubchunks.readers.xml_reader import Document, DocumentSource, read_document


def _extractor(config: ExtractionConfig | None, registry: RuleRegistry | None) -> SectionExtractor:
    return SectionExtractor(registry=registry, config=config or ExtractionConfig())


def chunks(
    source: DocumentSource | Document,
    sections: Iterable[str | Section] | str | None = None,
    publisher: Publisher | str | None = None,
    config: ExtractionConfig | None = None,
    registry: RuleRegistry | None = None,
) -> DocumentResult:
    """
    Extract sections from one article.

    Args:
        source: Path, inline XML text, bytes, parsed ElementTree/Element, or Document
        sections: Section names (config.sections, then all sections, if None)
        publisher: Force a publisher profile (config.publisher if None)
        config: Extraction configuration (uses defaults if None)
        registry: Rule registry (built-in rules if None)

    Returns:
        DocumentResult keyed by section

    Raises:
        ConfigurationError: If a section or publisher name is unknown
        DocumentSourceError, DocumentParseError, ExtractionError:
            Only when config.on_error == "raise"

    Example:
        >>> result = chunks("zookeys.xml", sections=["title", "abstract"])
        >>> result.publisher.value
        'pensoft'
        >>> result["abstract"].found
        True
    """
    config = config or ExtractionConfig()
    extractor = _extractor(config, registry)
    return extractor.extract_source(
        source,
        sections,
        publisher,
        raise_errors=config.on_error == "raise",
    )


def chunks_batch(
    sources: Sequence[DocumentSource | Document],
    sections: Iterable[str | Section] | str | None = None,
    publisher: Publisher | str | None = None,
    config: ExtractionConfig | None = None,
    registry: RuleRegistry | None = None,
    parallel: bool | None = None,
    max_workers: int | None = None,
) -> list[DocumentResult]:
    """
    Extract sections from many articles.

    Never aborts on a bad document: each failure is recorded on that
    document's result, whatever config.on_error says.

    Args:
        sources: Document sources
        sections: Section names to extract
        publisher: Force one publisher profile for every document
        config: Extraction configuration
        registry: Rule registry
        parallel: Process documents on a thread pool (config.parallel if None)
        max_workers: Thread pool size (config.max_workers if None)

    Returns:
        One DocumentResult per source, in input order
    """
    extractor = _extractor(config, registry)
    return extractor.extract_batch(
        sources,
        sections,
        publisher,
        parallel=parallel,
        max_workers=max_workers,
    )


def guess_publisher(source: DocumentSource | Document) -> Publisher:
    """
    Detect the publisher of an article.

    Raises:
        DocumentSourceError: If the source cannot be read
        DocumentParseError: If the XML is malformed
    """
    return PublisherDetector().detect(read_document(source))


def available_sections() -> list[str]:
    """Return every section name."""
    return [s.value for s in Section]


def available_publishers() -> list[str]:
    """Return every publisher name with a built-in profile."""
    return [p.value for p in DEFAULT_REGISTRY]


def supported_sections(publisher: Publisher | str) -> list[str]:
    """
    Sections the built-in profile for `publisher` has rules for.

    Raises:
        ConfigurationError: If the publisher name is unknown
    """
    profile = DEFAULT_REGISTRY.profile(publisher)
    if profile is None:
        return []
    return [s.value for s in profile.supported_sections]
