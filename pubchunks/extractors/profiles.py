"""Publisher profiles for section extraction.

A profile maps each supported Section to a SectionRule for one publisher's
XML flavour. Most publishers ship JATS, so their profiles start from the
shared JATS table and add or drop rules. Elsevier's article API format is
namespaced and gets its own table.

A section missing from a profile is "unsupported" for that publisher,
which is reported differently from "supported but absent in this document".
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pubchunks.exceptions import ConfigurationError
from pubchunks.extractors.queries import SectionRule, ValueKind, rule
from pubchunks.models import Publisher, Section, parse_section


@dataclass(frozen=True)
class PublisherProfile:
    """Extraction rules for one publisher.

    Attributes:
        publisher: Publisher this profile applies to.
        description: Human-readable description.
        rules: Read-only mapping of Section to SectionRule.
        namespaces: Prefix map used when evaluating the rules' queries.
    """

    publisher: Publisher
    description: str
    rules: Mapping[Section, SectionRule] = field(default_factory=dict)
    namespaces: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        try:
            object.__setattr__(self, "publisher", Publisher(self.publisher))
        except ValueError:
            raise ConfigurationError(f"Unknown publisher {self.publisher!r}") from None

        checked: dict[Section, SectionRule] = {}
        for key, section_rule in self.rules.items():
            try:
                section = Section(key)
            except ValueError:
                raise ConfigurationError(
                    f"Profile {self.publisher.value!r} has a rule for unknown section {key!r}"
                ) from None
            if not isinstance(section_rule, SectionRule):
                raise ConfigurationError(
                    f"Rule for {self.publisher.value}/{section.value} must be a SectionRule"
                )
            checked[section] = section_rule

        object.__setattr__(self, "rules", MappingProxyType(checked))
        object.__setattr__(self, "namespaces", MappingProxyType(dict(self.namespaces)))

    @property
    def name(self) -> str:
        return self.publisher.value

    @property
    def supported_sections(self) -> tuple[Section, ...]:
        """Sections this profile has rules for, in Section order."""
        return tuple(s for s in Section if s in self.rules)

    def rule_for(self, section: Section | str) -> SectionRule | None:
        """The rule for a section, or None when unsupported."""
        return self.rules.get(parse_section(section))

    def with_rules(
        self,
        rules: Mapping[Section | str, SectionRule],
        namespaces: Mapping[str, str] | None = None,
    ) -> PublisherProfile:
        """Return a new profile with `rules` added or replacing existing ones."""
        merged: dict[Section | str, SectionRule] = dict(self.rules)
        for key, section_rule in rules.items():
            try:
                merged[Section(key)] = section_rule
            except ValueError:
                raise ConfigurationError(f"Unknown section {key!r}") from None
        merged_ns = dict(self.namespaces)
        merged_ns.update(namespaces or {})
        return PublisherProfile(
            publisher=self.publisher,
            description=self.description,
            rules=merged,
            namespaces=merged_ns,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Rule tables
# ═══════════════════════════════════════════════════════════════════════════════

REFS_DOI_QUERY = ".//ref-list//pub-id[@pub-id-type='doi']"

JATS_RULES: dict[Section, SectionRule] = {
    Section.FRONT: rule(".//front", kind=ValueKind.CONTENT),
    Section.BODY: rule(".//body", kind=ValueKind.CONTENT),
    Section.BACK: rule(".//back", kind=ValueKind.CONTENT),
    Section.TITLE: rule(".//article-meta/title-group/article-title", ".//front//article-title"),
    Section.DOI: rule(".//article-meta/article-id[@pub-id-type='doi']"),
    Section.CATEGORIES: rule(".//article-categories//subject", kind=ValueKind.TEXT_LIST),
    Section.AUTHORS: rule(
        ".//article-meta/contrib-group/contrib[@contrib-type='author']",
        ".//contrib-group/contrib",
        kind=ValueKind.AUTHORS,
    ),
    Section.AFF: rule(".//article-meta//aff", ".//aff", kind=ValueKind.TEXT_LIST),
    Section.KEYWORDS: rule(".//article-meta/kwd-group/kwd", ".//kwd", kind=ValueKind.TEXT_LIST),
    # First abstract in document order; elife puts the executive summary after it
    Section.ABSTRACT: rule(".//article-meta/abstract", ".//abstract", kind=ValueKind.CONTENT),
    Section.REFS: rule(".//back/ref-list/ref", ".//ref-list//ref", kind=ValueKind.REFERENCES),
    Section.REFS_DOIS: rule(REFS_DOI_QUERY, kind=ValueKind.TEXT_LIST),
    Section.PUBLISHER: rule(".//journal-meta/publisher/publisher-name"),
    Section.JOURNAL_META: rule(".//journal-meta", kind=ValueKind.CONTENT),
    Section.ARTICLE_META: rule(".//article-meta", kind=ValueKind.CONTENT),
    Section.ACKNOWLEDGMENTS: rule(".//back/ack", ".//ack", kind=ValueKind.CONTENT),
    Section.PERMISSIONS: rule(".//article-meta/permissions", kind=ValueKind.CONTENT),
    Section.HISTORY: rule(".//article-meta/history", kind=ValueKind.CONTENT),
}


def jats_rules(
    *,
    drop: tuple[Section, ...] = (),
    **overrides: SectionRule,
) -> dict[Section, SectionRule]:
    """JATS table with `overrides` (keyed by section value) and `drop` applied."""
    rules = {s: r for s, r in JATS_RULES.items() if s not in drop}
    for name, section_rule in overrides.items():
        rules[Section(name)] = section_rule
    return rules


ELSEVIER_NAMESPACES = {
    "svapi": "http://www.elsevier.com/xml/svapi/article/dtd",
    "dc": "http://purl.org/dc/elements/1.1/",
    "dcterms": "http://purl.org/dc/terms/",
    "prism": "http://prismstandard.org/namespaces/basic/2.0/",
    "ce": "http://www.elsevier.com/xml/common/dtd",
    "ja": "http://www.elsevier.com/xml/ja/dtd",
    "sb": "http://www.elsevier.com/xml/common/struct-bib/dtd",
    "xocs": "http://www.elsevier.com/xml/xocs/dtd",
}

ELSEVIER_RULES: dict[Section, SectionRule] = {
    Section.FRONT: rule(".//ja:head", kind=ValueKind.CONTENT),
    Section.BODY: rule(".//ja:body", ".//ce:sections", kind=ValueKind.CONTENT),
    Section.BACK: rule(".//ja:tail", kind=ValueKind.CONTENT),
    Section.TITLE: rule(".//svapi:coredata/dc:title", ".//ce:title"),
    Section.DOI: rule(".//svapi:coredata/prism:doi", ".//ce:doi"),
    Section.CATEGORIES: rule(".//svapi:coredata/dcterms:subject", kind=ValueKind.TEXT_LIST),
    Section.AUTHORS: rule(".//ce:author-group/ce:author", kind=ValueKind.AUTHORS),
    Section.KEYWORDS: rule(".//ce:keywords/ce:keyword", kind=ValueKind.TEXT_LIST),
    Section.ABSTRACT: rule(
        ".//svapi:coredata/dc:description", ".//ce:abstract", kind=ValueKind.CONTENT
    ),
    Section.REFS: rule(".//ce:bibliography//ce:bib-reference", kind=ValueKind.REFERENCES),
    Section.REFS_DOIS: rule(".//ce:bibliography//ce:doi", kind=ValueKind.TEXT_LIST),
    Section.PUBLISHER: rule(".//svapi:coredata/prism:publisher"),
    Section.JOURNAL_META: rule(".//svapi:coredata/prism:publicationName", kind=ValueKind.CONTENT),
    Section.ARTICLE_META: rule(".//svapi:coredata", kind=ValueKind.CONTENT),
    Section.ACKNOWLEDGMENTS: rule(".//ce:acknowledgment", kind=ValueKind.CONTENT),
}


# ═══════════════════════════════════════════════════════════════════════════════
# Standard profiles
# ═══════════════════════════════════════════════════════════════════════════════

ELIFE_PROFILE = PublisherProfile(
    publisher=Publisher.ELIFE,
    description="eLife JATS, with executive summary (eLife digest)",
    rules=jats_rules(
        executive_summary=rule(
            ".//article-meta/abstract[@abstract-type='executive-summary']",
            kind=ValueKind.CONTENT,
        ),
    ),
)

PLOS_PROFILE = PublisherProfile(
    publisher=Publisher.PLOS,
    description="Public Library of Science JATS",
    rules=jats_rules(
        categories=rule(
            ".//article-categories/subj-group[@subj-group-type='Discipline-v3']//subject",
            ".//article-categories//subject",
            kind=ValueKind.TEXT_LIST,
        ),
    ),
)

ELSEVIER_PROFILE = PublisherProfile(
    publisher=Publisher.ELSEVIER,
    description="Elsevier article retrieval API full-text XML",
    rules=ELSEVIER_RULES,
    namespaces=ELSEVIER_NAMESPACES,
)

ENTREZ_PROFILE = PublisherProfile(
    publisher=Publisher.ENTREZ,
    description="PubMed Central article sets fetched through Entrez",
    rules=jats_rules(),
)

HINDAWI_PROFILE = PublisherProfile(
    publisher=Publisher.HINDAWI,
    description="Hindawi JATS (no DOIs on references)",
    rules=jats_rules(drop=(Section.REFS_DOIS,)),
)

PENSOFT_PROFILE = PublisherProfile(
    publisher=Publisher.PENSOFT,
    description="Pensoft JATS (ZooKeys, PhytoKeys, ...)",
    rules=jats_rules(
        refs_dois=rule(
            ".//ref-list//ext-link[@ext-link-type='doi']",
            REFS_DOI_QUERY,
            kind=ValueKind.TEXT_LIST,
        ),
    ),
)

PEERJ_PROFILE = PublisherProfile(
    publisher=Publisher.PEERJ,
    description="PeerJ JATS",
    rules=jats_rules(),
)

COPERNICUS_PROFILE = PublisherProfile(
    publisher=Publisher.COPERNICUS,
    description="Copernicus Publications JATS (no DOIs on references)",
    rules=jats_rules(drop=(Section.REFS_DOIS,)),
)

FRONTIERS_PROFILE = PublisherProfile(
    publisher=Publisher.FRONTIERS,
    description="Frontiers JATS",
    rules=jats_rules(),
)

F1000RESEARCH_PROFILE = PublisherProfile(
    publisher=Publisher.F1000RESEARCH,
    description="F1000Research JATS",
    rules=jats_rules(),
)

COGENT_PROFILE = PublisherProfile(
    publisher=Publisher.COGENT,
    description="Cogent OA (Taylor & Francis) JATS (no DOIs on references)",
    rules=jats_rules(drop=(Section.REFS_DOIS, Section.HISTORY)),
)

DEFAULT_PROFILE = PublisherProfile(
    publisher=Publisher.UNKNOWN,
    description="Fallback generic JATS rules for unrecognized publishers",
    rules=jats_rules(),
)


# Profile lookup dictionary
PROFILES: dict[Publisher, PublisherProfile] = {
    profile.publisher: profile
    for profile in (
        ELIFE_PROFILE,
        PLOS_PROFILE,
        ELSEVIER_PROFILE,
        ENTREZ_PROFILE,
        HINDAWI_PROFILE,
        PENSOFT_PROFILE,
        PEERJ_PROFILE,
        COPERNICUS_PROFILE,
        FRONTIERS_PROFILE,
        F1000RESEARCH_PROFILE,
        COGENT_PROFILE,
        DEFAULT_PROFILE,
    )
}
