"""Rule registry: (publisher, section) -> SectionRule.

The registry is read-only data built once at import time from the standard
profiles. New rules are added by deriving a new registry, either in code
with extend() or from a YAML file with from_yaml(); extraction code never
changes to support them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from pubchunks.exceptions import ConfigurationError
from pubchunks.extractors.profiles import PROFILES, PublisherProfile
from pubchunks.extractors.queries import SectionRule, ValueKind
from pubchunks.models import Publisher, Section, parse_publisher

logger = logging.getLogger(__name__)


class RuleRegistry(Mapping[Publisher, PublisherProfile]):
    """Immutable mapping of publishers to their profiles.

    Usage:
        registry = RuleRegistry(PROFILES.values())
        rule = registry.lookup("pensoft", "refs_dois")
        if rule is None:
            print("unsupported")

        # Derive a registry with an extra rule
        custom = registry.extend("hindawi", {"refs_dois": rule(".//ref//pub-id")})
    """

    def __init__(self, profiles: Iterable[PublisherProfile]):
        by_publisher: dict[Publisher, PublisherProfile] = {}
        for profile in profiles:
            if profile.publisher in by_publisher:
                raise ConfigurationError(f"Duplicate profile for {profile.publisher.value!r}")
            by_publisher[profile.publisher] = profile
        self._profiles = MappingProxyType(by_publisher)

    def __getitem__(self, publisher: Publisher | str) -> PublisherProfile:
        try:
            return self._profiles[Publisher(publisher)]
        except ValueError:
            raise KeyError(publisher) from None

    def __iter__(self) -> Iterator[Publisher]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __repr__(self) -> str:
        return f"RuleRegistry({', '.join(p.value for p in self._profiles)})"

    def profile(self, publisher: Publisher | str) -> PublisherProfile | None:
        """Profile for a publisher, or None when the registry has none.

        Raises:
            ConfigurationError: If the publisher name is unknown
        """
        return self._profiles.get(parse_publisher(publisher))

    def lookup(self, publisher: Publisher | str, section: Section | str) -> SectionRule | None:
        """Rule for (publisher, section), or None when unsupported."""
        profile = self.profile(publisher)
        if profile is None:
            return None
        return profile.rule_for(section)

    def supports(self, publisher: Publisher | str, section: Section | str) -> bool:
        return self.lookup(publisher, section) is not None

    def namespaces(self, publisher: Publisher | str) -> Mapping[str, str]:
        profile = self.profile(publisher)
        return profile.namespaces if profile is not None else MappingProxyType({})

    def extend(
        self,
        publisher: Publisher | str,
        rules: Mapping[Section | str, SectionRule],
        namespaces: Mapping[str, str] | None = None,
    ) -> RuleRegistry:
        """Return a new registry with rules added for one publisher."""
        publisher = parse_publisher(publisher)
        existing = self.profile(publisher)
        if existing is None:
            existing = PublisherProfile(
                publisher=publisher,
                description=f"Custom rules for {publisher.value}",
            )
        updated = existing.with_rules(rules, namespaces)
        profiles = [p for p in self._profiles.values() if p.publisher is not publisher]
        profiles.append(updated)
        return RuleRegistry(profiles)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: RuleRegistry | None = None) -> RuleRegistry:
        """
        Build a registry from parsed rule-file data.

        Args:
            data: Mapping with optional "namespaces" and a "publishers" table
            base: Registry to extend (DEFAULT_REGISTRY if None)

        Returns:
            New RuleRegistry with the rules merged in

        Raises:
            ConfigurationError: If the data is malformed
        """
        registry = base if base is not None else DEFAULT_REGISTRY
        if not isinstance(data, Mapping):
            raise ConfigurationError("Rule data must be a mapping")

        namespaces = data.get("namespaces") or {}
        if not isinstance(namespaces, Mapping):
            raise ConfigurationError("'namespaces' must be a mapping of prefix to URI")

        publishers = data.get("publishers") or {}
        if not isinstance(publishers, Mapping):
            raise ConfigurationError("'publishers' must be a mapping")

        for name, sections in publishers.items():
            try:
                publisher = Publisher(name)
            except ValueError:
                raise ConfigurationError(f"Unknown publisher {name!r} in rule data") from None
            if not isinstance(sections, Mapping):
                raise ConfigurationError(f"Rules for {name!r} must be a mapping")

            rules = {}
            for section_name, spec in sections.items():
                try:
                    section = Section(section_name)
                except ValueError:
                    raise ConfigurationError(
                        f"Unknown section {section_name!r} for publisher {name!r}"
                    ) from None
                rules[section] = _rule_from_spec(spec, registry.lookup(publisher, section))

            logger.debug("Loaded %d rules for %s", len(rules), publisher.value)
            registry = registry.extend(publisher, rules, namespaces)

        return registry

    @classmethod
    def from_yaml(cls, path: str | Path, base: RuleRegistry | None = None) -> RuleRegistry:
        """Load extra rules from a YAML file (see from_dict for the layout)."""
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Rule file not found: {path}") from None
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        return cls.from_dict(data or {}, base=base)


def _rule_from_spec(spec: Any, existing: SectionRule | None) -> SectionRule:
    """Rule from a YAML entry: a query, a list of queries, or {queries, kind}.

    Without an explicit kind the existing rule's kind is kept, so overriding
    the queries of a structured section keeps its conversion.
    """
    default_kind = existing.kind if existing is not None else ValueKind.TEXT

    if isinstance(spec, str):
        return SectionRule(queries=(spec,), kind=default_kind)
    if isinstance(spec, list):
        return SectionRule(queries=tuple(spec), kind=default_kind)
    if isinstance(spec, Mapping):
        queries = spec.get("queries")
        if queries is None:
            raise ConfigurationError(f"Rule entry {dict(spec)!r} has no 'queries'")
        if isinstance(queries, str):
            queries = [queries]
        return SectionRule(queries=tuple(queries), kind=spec.get("kind", default_kind))
    raise ConfigurationError(f"Cannot build a rule from {spec!r}")


DEFAULT_REGISTRY = RuleRegistry(PROFILES.values())
