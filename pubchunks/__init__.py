"""
pubchunks: Extract sections from scholarly article XML.

This library pulls named sections (title, abstract, authors, references,
...) out of publisher XML (JATS flavours and the Elsevier article API
format) and flattens them into tables.

Example:
    >>> import pubchunks
    >>> result = pubchunks.chunks("article.xml", sections=["title", "abstract"])
    >>> result.publisher
    <Publisher.PENSOFT: 'pensoft'>
    >>> print(result["abstract"].value)

    >>> # Many documents, then one table per section group
    >>> results = pubchunks.chunks_batch(paths, sections=["title", "authors"])
    >>> tables = pubchunks.tabularize(results)
    >>> tables["authors"].head()
"""

from pubchunks.chunks import (
    available_publishers,
    available_sections,
    chunks,
    chunks_batch,
    guess_publisher,
    supported_sections,
)
from pubchunks.config import ExtractionConfig
from pubchunks.exceptions import (
    ConfigurationError,
    DocumentParseError,
    DocumentSourceError,
    ExtractionError,
    PubChunksError,
)
from pubchunks.extractors import (
    DEFAULT_REGISTRY,
    PublisherDetector,
    PublisherProfile,
    RuleRegistry,
    SectionExtractor,
    SectionRule,
    ValueKind,
    rule,
)
from pubchunks.models import (
    # Sub-entities
    Author,
    # Results
    DocumentResult,
    ExtractionFailure,
    # Enums
    FailureKind,
    Publisher,
    Reference,
    Section,
    SectionResult,
    SectionStatus,
)
from pubchunks.readers import Document, XMLReader
from pubchunks.tabularize import tabularize

__version__ = "0.1.0"
__all__ = [
    # Main API
    "chunks",
    "chunks_batch",
    "guess_publisher",
    "tabularize",
    "available_sections",
    "available_publishers",
    "supported_sections",
    # Configuration
    "ExtractionConfig",
    # Reading
    "XMLReader",
    "Document",
    # Extraction
    "SectionExtractor",
    "PublisherDetector",
    "PublisherProfile",
    "RuleRegistry",
    "DEFAULT_REGISTRY",
    "SectionRule",
    "ValueKind",
    "rule",
    # Enums
    "Publisher",
    "Section",
    "SectionStatus",
    "FailureKind",
    # Results
    "DocumentResult",
    "SectionResult",
    "ExtractionFailure",
    "Author",
    "Reference",
    # Exceptions
    "PubChunksError",
    "DocumentSourceError",
    "DocumentParseError",
    "ExtractionError",
    "ConfigurationError",
]
