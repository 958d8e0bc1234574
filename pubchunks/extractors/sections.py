"""
Section extractor.

Runs the pipeline for one document:
1. Resolve the publisher (forced, or PublisherDetector)
2. Look up each requested section in the RuleRegistry
3. Evaluate the rule's candidate queries until one matches
4. Record found / not_found / unsupported per section

Batch extraction isolates documents from each other: a missing file or
malformed XML becomes an ExtractionFailure on that document's result and
the remaining documents are processed normally.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from pubchunks.config import ExtractionConfig
from pubchunks.exceptions import DocumentParseError, DocumentSourceError, ExtractionError
from pubchunks.extractors.detector import PublisherDetector
from pubchunks.extractors.queries import evaluate
from pubchunks.extractors.registry import DEFAULT_REGISTRY, RuleRegistry
from pubchunks.models import (
    DocumentResult,
    FailureKind,
    Publisher,
    Section,
    SectionResult,
    SectionStatus,
    parse_publisher,
    parse_sections,
)
from pubchunks.readers.xml_reader import Document, DocumentSource, read_document, source_id

logger = logging.getLogger(__name__)

SectionNames = Iterable[str | Section] | str | None


class SectionExtractor:
    """Extracts named sections from article XML.

    Usage:
        extractor = SectionExtractor()
        result = extractor.extract(document, sections=["title", "abstract"])
        for section, section_result in result.sections.items():
            print(section.value, section_result.status.value, section_result.value)

    Custom rules:
        registry = DEFAULT_REGISTRY.extend("hindawi", {"refs_dois": rule(".//ref//pub-id")})
        extractor = SectionExtractor(registry=registry)
    """

    def __init__(
        self,
        *,
        registry: RuleRegistry | None = None,
        detector: PublisherDetector | None = None,
        config: ExtractionConfig | None = None,
    ):
        """Initialize the extractor.

        Args:
            registry: Rule registry (default: built-in profiles, plus
                config.rules_path when set).
            detector: Publisher detector (default creates one).
            config: Extraction configuration (default creates one).
        """
        self.config = config or ExtractionConfig()
        if registry is None:
            registry = DEFAULT_REGISTRY
            if self.config.rules_path is not None:
                registry = RuleRegistry.from_yaml(self.config.rules_path, base=registry)
        self.registry = registry
        self.detector = detector or PublisherDetector()

    @classmethod
    def for_config(cls, config: ExtractionConfig) -> SectionExtractor:
        return cls(config=config)

    # ─────────────────────────────────────────────────────────────────────────
    # Single document
    # ─────────────────────────────────────────────────────────────────────────

    def resolve_publisher(
        self, document: Document, publisher: Publisher | str | None = None
    ) -> Publisher:
        """Forced publisher if given (argument, then config), else detection."""
        if publisher is not None:
            return parse_publisher(publisher)
        forced = self.config.forced_publisher
        if forced is not None:
            return forced
        return self.detector.detect(document)

    def extract(
        self,
        document: Document,
        sections: SectionNames = None,
        publisher: Publisher | str | None = None,
    ) -> DocumentResult:
        """
        Extract sections from a parsed document.

        Args:
            document: Parsed document
            sections: Section names (config.sections, then all sections, if None)
            publisher: Force a publisher profile instead of detecting one

        Returns:
            DocumentResult with one SectionResult per requested section

        Raises:
            ConfigurationError: If a section or publisher name is unknown
        """
        requested = self._requested(sections)
        resolved = self.resolve_publisher(document, publisher)

        result = DocumentResult(document_id=document.document_id, publisher=resolved)
        if resolved is Publisher.UNKNOWN:
            result.warnings.append("Unrecognized publisher, using generic JATS rules")

        for section in requested:
            result.sections[section] = self.extract_section(document, resolved, section)

        found = sum(1 for r in result.sections.values() if r.found)
        logger.debug(
            "%s (%s): %d/%d sections found",
            document.document_id,
            resolved.value,
            found,
            len(requested),
        )
        return result

    def extract_section(
        self, document: Document, publisher: Publisher, section: Section
    ) -> SectionResult:
        """Evaluate one section's rule against a document."""
        section_rule = self.registry.lookup(publisher, section)
        if section_rule is None:
            return SectionResult.unsupported(section)

        values, query = evaluate(
            section_rule,
            document.root,
            self.registry.namespaces(publisher),
            output=self.config.output,
            normalize=self.config.normalize_whitespace,
        )
        if not values:
            return SectionResult.not_found(section)
        return SectionResult(
            section=section, status=SectionStatus.FOUND, values=values, query=query
        )

    def extract_source(
        self,
        source: DocumentSource | Document,
        sections: SectionNames = None,
        publisher: Publisher | str | None = None,
        *,
        raise_errors: bool = False,
    ) -> DocumentResult:
        """
        Read a source and extract from it, recording failures on the result.

        Args:
            source: Path, inline XML, bytes, parsed tree, or Document
            sections: Section names to extract
            publisher: Force a publisher profile
            raise_errors: Raise instead of recording document failures

        Returns:
            DocumentResult; on failure `error` is set and every requested
            section has a `failed` status
        """
        # Caller errors in names are raised, not recorded
        requested = self._requested(sections)
        forced = parse_publisher(publisher) if publisher is not None else None

        doc_id = source_id(source)
        try:
            document = read_document(source)
            return self.extract(document, requested, forced)
        except DocumentSourceError as e:
            if raise_errors:
                raise
            return self._failure(doc_id, FailureKind.SOURCE_NOT_FOUND, e, requested)
        except DocumentParseError as e:
            if raise_errors:
                raise
            return self._failure(doc_id, FailureKind.PARSE_ERROR, e, requested)
        except Exception as e:
            if raise_errors:
                raise ExtractionError(f"Failed to extract {doc_id}: {e}") from e
            return self._failure(doc_id, FailureKind.EXTRACTION_ERROR, e, requested)

    # ─────────────────────────────────────────────────────────────────────────
    # Batch
    # ─────────────────────────────────────────────────────────────────────────

    def extract_batch(
        self,
        sources: Sequence[DocumentSource | Document],
        sections: SectionNames = None,
        publisher: Publisher | str | None = None,
        *,
        parallel: bool | None = None,
        max_workers: int | None = None,
    ) -> list[DocumentResult]:
        """
        Extract from many sources, one result per source in input order.

        Section and publisher names are validated once up front; every
        per-document problem is recorded on that document's result.

        Args:
            sources: Document sources
            sections: Section names to extract
            publisher: Force a publisher profile for every document
            parallel: Use a thread pool (config.parallel if None)
            max_workers: Pool size (config.max_workers if None)

        Returns:
            List of DocumentResult, same length and order as `sources`
        """
        requested = self._requested(sections)
        forced = parse_publisher(publisher) if publisher is not None else None
        parallel = self.config.parallel if parallel is None else parallel
        max_workers = max_workers or self.config.max_workers

        work = partial(self.extract_source, sections=requested, publisher=forced)
        sources = list(sources)

        if parallel and len(sources) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                results = list(executor.map(work, sources))
        else:
            results = [work(source) for source in sources]

        failed = sum(1 for r in results if not r.ok)
        if failed:
            logger.info("Batch finished: %d documents, %d failed", len(results), failed)
        return results

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _requested(self, sections: SectionNames) -> tuple[Section, ...]:
        if sections is None:
            return self.config.requested_sections
        return parse_sections(sections)

    def _failure(
        self,
        doc_id: str,
        kind: FailureKind,
        error: Exception,
        sections: tuple[Section, ...],
    ) -> DocumentResult:
        if self.config.on_error == "warn":
            logger.warning("Extraction failed for %s (%s): %s", doc_id, kind.value, error)
        else:
            logger.debug("Extraction failed for %s (%s): %s", doc_id, kind.value, error)
        return DocumentResult.failed(doc_id, kind, str(error), sections)


def extract_sections(
    source: DocumentSource | Document,
    sections: SectionNames = None,
    publisher: Publisher | str | None = None,
) -> DocumentResult:
    """Convenience function for single-document extraction with defaults."""
    return SectionExtractor().extract_source(source, sections, publisher)
