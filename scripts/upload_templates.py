#!/usr/bin/env python3
"""
Upload local template letters to object storage.

Only .docx files whose names contain POA, Appeal or Escalation are
uploaded, under the documents/ prefix.

Usage:
    uv run python scripts/upload_templates.py ./letters
"""

from __future__ import annotations

import argparse
import logging

from app.services.corpus import upload_templates


def main() -> None:
    parser = argparse.ArgumentParser(description="Upload template letters to object storage.")
    parser.add_argument("directory", help="Local directory containing the .docx letters")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    keys = upload_templates(args.directory)
    print(f"Uploaded {len(keys)} template documents")


if __name__ == "__main__":
    main()
