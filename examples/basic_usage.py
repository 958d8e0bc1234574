#!/usr/bin/env python3
"""
Basic pubchunks Usage Example

This example demonstrates the core workflow:
1. Extract sections from one article
2. Inspect section status and sub-entities
3. Extract a batch of articles in parallel
4. Flatten results into DataFrames
5. Extend the rules for a publisher
"""

import sys
from pathlib import Path

from pubchunks import (
    DEFAULT_REGISTRY,
    ExtractionConfig,
    SectionStatus,
    ValueKind,
    chunks,
    chunks_batch,
    guess_publisher,
    rule,
    supported_sections,
    tabularize,
)


def main(article_dir: Path):
    paths = sorted(article_dir.glob("*.xml"))
    if not paths:
        print(f"No XML files in {article_dir}")
        return

    # ─────────────────────────────────────────────────────────────────────────
    # 1. Single article
    # ─────────────────────────────────────────────────────────────────────────

    first = paths[0]
    print(f"{first.name}: {guess_publisher(first).value}")

    result = chunks(first, sections=["title", "abstract", "authors", "refs"])
    print(f"  Title: {result['title'].value}")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Section status and entities
    # ─────────────────────────────────────────────────────────────────────────

    for section, section_result in result.sections.items():
        if section_result.status is SectionStatus.UNSUPPORTED:
            print(f"  {section.value}: not available for {result.publisher.value}")
        elif section_result.status is SectionStatus.NOT_FOUND:
            print(f"  {section.value}: missing from this article")

    for author in result["authors"].values:
        print(f"  Author: {author.name}")

    for ref in result["refs"].values[:3]:
        print(f"  Ref {ref.ref_id}: {ref.doi or '(no DOI)'}")

    print(f"  Supported sections: {', '.join(supported_sections(result.publisher))}")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Batch extraction
    # ─────────────────────────────────────────────────────────────────────────

    config = ExtractionConfig(
        sections=("title", "doi", "authors", "refs_dois"),
        on_error="record",  # Keep failures on the results, don't log them
        parallel=True,
        max_workers=4,
    )
    results = chunks_batch(paths, config=config)

    failed = [r for r in results if not r.ok]
    print(f"\nExtracted {len(results) - len(failed)}/{len(results)} articles")
    for r in failed:
        print(f"  {r.document_id}: {r.error.kind.value} ({r.error.message})")

    # ─────────────────────────────────────────────────────────────────────────
    # 4. Tables
    # ─────────────────────────────────────────────────────────────────────────

    tables = tabularize(results, config.sections)
    for name, table in tables.items():
        print(f"\n{name}: {len(table)} rows")
        print(table.head())

    # ─────────────────────────────────────────────────────────────────────────
    # 5. Custom rules
    # ─────────────────────────────────────────────────────────────────────────

    # Hindawi references carry no DOI markup; treat the citation text instead
    registry = DEFAULT_REGISTRY.extend(
        "hindawi",
        {"refs_dois": rule(".//ref-list//mixed-citation", kind=ValueKind.TEXT_LIST)},
    )
    custom = chunks_batch(paths, sections=["refs_dois"], registry=registry)
    found = sum(1 for r in custom if r.ok and r["refs_dois"].found)
    print(f"\nWith custom rules: refs_dois found in {found}/{len(custom)} articles")


if __name__ == "__main__":
    main(Path(sys.argv[1]) if len(sys.argv) > 1 else Path("."))
