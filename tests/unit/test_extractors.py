"""
Unit tests for the section extractor.

Tests single-document extraction, status reporting and batch isolation.
"""

from pathlib import Path

import pytest

from pubchunks.config import ExtractionConfig
from pubchunks.exceptions import (
    ConfigurationError,
    DocumentParseError,
    DocumentSourceError,
    ExtractionError,
)
from pubchunks.extractors import (
    DEFAULT_REGISTRY,
    SectionExtractor,
    ValueKind,
    extract_sections,
    rule,
)
from pubchunks.models import (
    Author,
    DocumentResult,
    FailureKind,
    Publisher,
    Section,
    SectionStatus,
)
from pubchunks.readers import Document, XMLReader


@pytest.fixture
def extractor() -> SectionExtractor:
    """Extractor with default settings."""
    return SectionExtractor()


@pytest.fixture
def pensoft_doc(pensoft_xml) -> Document:
    return XMLReader().read(pensoft_xml)


class TestExtract:
    """Test SectionExtractor.extract() on parsed documents."""

    def test_pensoft_title_and_abstract(self, extractor, pensoft_doc):
        """Requested sections are found and keyed by section."""
        result = extractor.extract(pensoft_doc, ["abstract", "title"])

        assert isinstance(result, DocumentResult)
        assert result.ok
        assert result.publisher is Publisher.PENSOFT
        assert result.document_id == pensoft_doc.document_id
        assert list(result.sections) == [Section.ABSTRACT, Section.TITLE]
        assert result["title"].value == "A new species of Agra from the Ecuadorian Andes"
        assert "cloud forest canopy" in result["abstract"].value

    def test_all_sections_by_default(self, extractor, pensoft_doc):
        """No section list means every section has an entry."""
        result = extractor.extract(pensoft_doc)
        assert set(result.sections) == set(Section)

    def test_unsupported_section(self, extractor, hindawi_xml):
        """A section without a rule is reported unsupported."""
        doc = XMLReader().read(hindawi_xml)
        result = extractor.extract(doc, ["refs_dois", "refs"])

        assert result.publisher is Publisher.HINDAWI
        assert result["refs_dois"].status is SectionStatus.UNSUPPORTED
        assert result["refs_dois"].values == ()
        assert result["refs"].status is SectionStatus.FOUND

    def test_not_found_section(self, extractor, hindawi_xml):
        """A supported section missing from the document is not_found."""
        doc = XMLReader().read(hindawi_xml)
        result = extractor.extract(doc, ["keywords"])
        assert result["keywords"].status is SectionStatus.NOT_FOUND
        assert result["keywords"].value is None

    def test_authors(self, extractor, pensoft_doc):
        """Authors come back as Author entities."""
        authors = extractor.extract(pensoft_doc, ["authors"])["authors"].values
        assert authors == (
            Author(given_names="Terry L.", surname="Erwin", email="erwint@example.org"),
            Author(given_names="Laura S.", surname="Zamorano"),
        )

    def test_references(self, extractor, pensoft_doc):
        """Each ref is one Reference with its DOI when present."""
        refs = extractor.extract(pensoft_doc, ["refs"])["refs"].values
        assert [r.ref_id for r in refs] == ["B1", "B2", "B3"]
        assert [r.doi for r in refs] == ["10.1234/tfc.1982", "10.1234/agra.1985", None]

    def test_refs_dois(self, extractor, pensoft_doc):
        result = extractor.extract(pensoft_doc, ["refs_dois"])
        assert result["refs_dois"].values == ("10.1234/tfc.1982", "10.1234/agra.1985")

    def test_forced_publisher(self, extractor, pensoft_doc):
        """A forced publisher skips detection."""
        result = extractor.extract(pensoft_doc, ["refs_dois"], publisher="hindawi")
        assert result.publisher is Publisher.HINDAWI
        assert result["refs_dois"].status is SectionStatus.UNSUPPORTED

    def test_config_publisher(self, pensoft_doc):
        """config.publisher forces a profile too."""
        extractor = SectionExtractor(config=ExtractionConfig(publisher="cogent"))
        assert extractor.extract(pensoft_doc, ["title"]).publisher is Publisher.COGENT

    def test_config_sections(self, pensoft_doc):
        """config.sections is used when no sections are passed."""
        extractor = SectionExtractor(config=ExtractionConfig(sections=("doi",)))
        result = extractor.extract(pensoft_doc)
        assert list(result.sections) == [Section.DOI]
        assert result["doi"].value == "10.3897/zookeys.1000.12345"

    def test_unknown_publisher_best_effort(self, extractor, unknown_xml):
        """Unrecognized documents use generic rules and get a warning."""
        doc = XMLReader().read(unknown_xml)
        result = extractor.extract(doc, ["title", "doi"])

        assert result.publisher is Publisher.UNKNOWN
        assert result.ok
        assert result.warnings
        assert result["title"].value == "Notes on regional moss flora"
        assert result["doi"].status is SectionStatus.NOT_FOUND

    def test_title_ignores_cited_titles(self, extractor):
        """A cited article's title is never taken as the document title."""
        cited = (
            "<article><front><article-meta/></front><back><ref-list><ref id='r1'>"
            "<element-citation><article-title>Someone else's paper</article-title>"
            "</element-citation></ref></ref-list></back></article>"
        )
        result = extractor.extract(XMLReader().read(cited), ["title"])
        assert result["title"].status is SectionStatus.NOT_FOUND

        front_only = (
            "<article><front><title-group><article-title>Front title</article-title>"
            "</title-group></front></article>"
        )
        assert extractor.extract(XMLReader().read(front_only), ["title"])["title"].value == (
            "Front title"
        )

    def test_unknown_section_name_raises(self, extractor, pensoft_doc):
        """Unknown section names are caller errors."""
        with pytest.raises(ConfigurationError):
            extractor.extract(pensoft_doc, ["conclusions"])

    def test_xml_output(self, pensoft_doc):
        """output='xml' serialises content sections."""
        extractor = SectionExtractor(config=ExtractionConfig(output="xml"))
        result = extractor.extract(pensoft_doc, ["abstract", "title"])
        assert result["abstract"].value.startswith("<abstract>")
        # Text sections stay text
        assert not result["title"].value.startswith("<")

    def test_document_not_mutated(self, extractor, pensoft_doc):
        """Extraction leaves the tree unchanged."""
        import xml.etree.ElementTree as ET

        before = ET.tostring(pensoft_doc.root)
        extractor.extract(pensoft_doc)
        SectionExtractor(config=ExtractionConfig(output="xml")).extract(pensoft_doc)
        assert ET.tostring(pensoft_doc.root) == before

    def test_custom_registry(self, hindawi_xml):
        """Extending the registry adds support without code changes."""
        registry = DEFAULT_REGISTRY.extend(
            "hindawi", {"refs_dois": rule(".//ref-list//mixed-citation", kind=ValueKind.TEXT_LIST)}
        )
        extractor = SectionExtractor(registry=registry)
        result = extractor.extract(XMLReader().read(hindawi_xml), ["refs_dois"])
        assert result["refs_dois"].status is SectionStatus.FOUND
        assert len(result["refs_dois"].values) == 2

    def test_rules_path(self, tmp_path, hindawi_xml):
        """config.rules_path loads YAML rules."""
        path = tmp_path / "rules.yaml"
        path.write_text("publishers:\n  hindawi:\n    keywords: \".//article-title\"\n")
        extractor = SectionExtractor(config=ExtractionConfig(rules_path=path))
        result = extractor.extract(XMLReader().read(hindawi_xml), ["keywords"])
        # Base keywords rule is a list, so the override keeps list conversion
        assert result["keywords"].values == ("Serum markers of liver fibrosis",)


class TestExtractSource:
    """Test extract_source() failure recording."""

    def test_missing_file_recorded(self, extractor, tmp_path):
        missing = tmp_path / "missing.xml"
        result = extractor.extract_source(missing, ["title"])
        assert not result.ok
        assert result.error.kind is FailureKind.SOURCE_NOT_FOUND
        assert result.document_id == str(missing)
        assert result["title"].status is SectionStatus.FAILED
        assert result["title"].value is None

    def test_parse_error_recorded(self, extractor, malformed_xml):
        result = extractor.extract_source(malformed_xml, ["title"])
        assert result.error.kind is FailureKind.PARSE_ERROR
        assert "Malformed" in result.error.message

    def test_raise_errors(self, extractor, malformed_xml, tmp_path):
        """raise_errors re-raises document failures."""
        with pytest.raises(DocumentParseError):
            extractor.extract_source(malformed_xml, raise_errors=True)
        with pytest.raises(DocumentSourceError):
            extractor.extract_source(tmp_path / "missing.xml", raise_errors=True)

    def test_unexpected_error_recorded(self, extractor, pensoft_xml, monkeypatch):
        """Unexpected failures become extraction_error results."""

        def boom(*args, **kwargs):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(extractor, "extract_section", boom)
        result = extractor.extract_source(pensoft_xml, ["title"])
        assert result.error.kind is FailureKind.EXTRACTION_ERROR
        assert "kaboom" in result.error.message

        with pytest.raises(ExtractionError):
            extractor.extract_source(pensoft_xml, ["title"], raise_errors=True)

    def test_bad_section_name_raises(self, extractor, pensoft_xml):
        """Caller errors are raised even when failures are recorded."""
        with pytest.raises(ConfigurationError):
            extractor.extract_source(pensoft_xml, ["conclusions"])

    def test_convenience_function(self, pensoft_xml):
        result = extract_sections(pensoft_xml, ["title"])
        assert result["title"].found


class TestExtractBatch:
    """Test batch extraction."""

    def test_mixed_batch(self, extractor, pensoft_xml, malformed_xml, plos_xml, tmp_path):
        """One result per input, failures isolated, order kept."""
        sources = [pensoft_xml, malformed_xml, tmp_path / "missing.xml", plos_xml]
        results = extractor.extract_batch(sources, ["title"])

        assert len(results) == 4
        assert [r.document_id for r in results] == [str(Path(s)) for s in sources]
        assert results[0].ok and results[0]["title"].found
        assert results[1].error.kind is FailureKind.PARSE_ERROR
        assert results[2].error.kind is FailureKind.SOURCE_NOT_FOUND
        assert results[3].ok and results[3].publisher is Publisher.PLOS

    def test_parallel_matches_sequential(self, extractor, fixtures_dir):
        """Thread-pool batches keep input order and results."""
        sources = sorted(fixtures_dir.glob("*.xml"))
        sequential = extractor.extract_batch(sources, ["title", "refs"])
        parallel = extractor.extract_batch(sources, ["title", "refs"], parallel=True, max_workers=3)

        assert [r.to_dict() for r in parallel] == [r.to_dict() for r in sequential]

    def test_batch_on_error_raise_still_records(self, malformed_xml, pensoft_xml):
        """Batches never raise for a bad document."""
        extractor = SectionExtractor(config=ExtractionConfig(on_error="raise"))
        results = extractor.extract_batch([malformed_xml, pensoft_xml], ["title"])
        assert not results[0].ok
        assert results[1].ok

    def test_batch_bad_section_raises(self, extractor, pensoft_xml):
        with pytest.raises(ConfigurationError):
            extractor.extract_batch([pensoft_xml], ["conclusions"])

    def test_empty_batch(self, extractor):
        assert extractor.extract_batch([]) == []

    def test_failures_logged(self, extractor, malformed_xml, caplog):
        """on_error='warn' logs each failure."""
        with caplog.at_level("WARNING", logger="pubchunks"):
            extractor.extract_batch([malformed_xml], ["title"])
        assert "parse_error" in caplog.text

    def test_record_mode_is_quiet(self, malformed_xml, caplog):
        extractor = SectionExtractor(config=ExtractionConfig(on_error="record"))
        with caplog.at_level("WARNING", logger="pubchunks"):
            results = extractor.extract_batch([malformed_xml], ["title"])
        assert not results[0].ok
        assert caplog.text == ""
