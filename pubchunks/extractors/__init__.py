"""
Section extraction module.

Pipeline: PublisherDetector -> RuleRegistry -> SectionExtractor.

Supports publisher profiles holding per-section structural queries:
- JATS publishers: eLife, PLOS, Pensoft, PeerJ, Hindawi, Copernicus,
  Frontiers, F1000Research, Cogent, PubMed Central (entrez)
- Elsevier article API XML
- DEFAULT_PROFILE: generic JATS fallback for unrecognized publishers
"""

from pubchunks.extractors.detector import (
    DOI_PREFIXES,
    JOURNAL_ID_PATTERNS,
    PUBLISHER_NAME_PATTERNS,
    PublisherDetector,
    detect_publisher,
)
from pubchunks.extractors.profiles import (
    DEFAULT_PROFILE,
    ELSEVIER_PROFILE,
    JATS_RULES,
    PROFILES,
    PublisherProfile,
    jats_rules,
)
from pubchunks.extractors.queries import (
    SectionRule,
    ValueKind,
    evaluate,
    rule,
)
from pubchunks.extractors.registry import (
    DEFAULT_REGISTRY,
    RuleRegistry,
)
from pubchunks.extractors.sections import (
    SectionExtractor,
    extract_sections,
)

__all__ = [
    # Main extractor
    "SectionExtractor",
    "extract_sections",
    # Detection
    "PublisherDetector",
    "detect_publisher",
    "PUBLISHER_NAME_PATTERNS",
    "JOURNAL_ID_PATTERNS",
    "DOI_PREFIXES",
    # Profiles
    "PublisherProfile",
    "PROFILES",
    "DEFAULT_PROFILE",
    "ELSEVIER_PROFILE",
    "JATS_RULES",
    "jats_rules",
    # Rules
    "SectionRule",
    "ValueKind",
    "rule",
    "evaluate",
    "RuleRegistry",
    "DEFAULT_REGISTRY",
]
