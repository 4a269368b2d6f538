#!/usr/bin/env python3
"""
Convert, embed and record the template letters.

Reads each .docx from object storage, writes its plain text under
documents-txt/, embeds it and upserts the template_documents row.
A document that fails is reported and the rest carry on.

Usage:
    uv run python scripts/process_templates.py
    uv run python scripts/process_templates.py "documents/POA Inauthentic.docx"
    uv run python scripts/process_templates.py --discover
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from app.db.engine import init_db
from app.services.corpus import discover_template_keys, process_templates


async def run(keys: list[str] | None, discover: bool = False) -> int:
    await init_db()
    if discover:
        keys = await asyncio.to_thread(discover_template_keys)
        print(f"Found {len(keys)} source documents in storage")
        if not keys:
            return 0
    summary = await process_templates(keys)

    print(f"\nProcessed {summary.total} documents: "
          f"{summary.succeeded} succeeded, {summary.failed} failed")
    for outcome in summary.outcomes:
        if outcome.error:
            print(f"  FAILED  {outcome.document_name}: {outcome.error}")
        else:
            print(f"  OK      {outcome.document_name} ({outcome.characters:,} chars)")
    return 1 if summary.failed else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Convert and embed template letters.")
    parser.add_argument(
        "keys", nargs="*",
        help="Source keys to process (default: the built-in template list)",
    )
    parser.add_argument(
        "--discover", action="store_true",
        help="Process every convertible document under the source prefix",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(asyncio.run(run(args.keys or None, discover=args.discover)))


if __name__ == "__main__":
    main()
