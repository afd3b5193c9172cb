#!/usr/bin/env python3
"""
Offline annotated-PDF export.

Usage:
    autodoc-export --pdf /path/to/document.pdf --annotations annotations.json [options]

The annotations file holds a JSON list in the API shape:
    [{"page": 1, "coords": {"x": 0, "y": 0, "width": 50, "height": 50},
      "comment": "A", "color": "red"}]

Options:
    --pdf PATH          Path to source PDF (required)
    --annotations PATH  Path to annotations JSON (required)
    --output PATH       Output PDF (default: annotated_<pdf name> next to the source)
    --log-level LEVEL   Logging level (DEBUG, INFO, WARNING, ERROR)
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from autodoc.services.pdf_export import (
    AnnotationRecord,
    ExportError,
    export_annotated_file,
)


def setup_logging(level: str = "INFO"):
    """Configure logging with specified level."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )
    return logging.getLogger(__name__)


def load_annotations(path: Path) -> List[AnnotationRecord]:
    """Read annotation records from a JSON list."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError("Annotations file must contain a JSON list")

    return [AnnotationRecord.from_mapping(item) for item in data]


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Burn annotations into a copy of a PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--pdf", required=True, help="Path to source PDF")
    parser.add_argument("--annotations", required=True, help="Path to annotations JSON")
    parser.add_argument("--output", default=None, help="Output PDF path")
    parser.add_argument("--log-level", default="INFO", help="Logging level")

    args = parser.parse_args(argv)
    logger = setup_logging(args.log_level)

    pdf_path = Path(args.pdf)
    output_path = Path(args.output) if args.output else pdf_path.with_name(f"annotated_{pdf_path.name}")

    try:
        annotations = load_annotations(Path(args.annotations))
    except (OSError, ValueError, KeyError, TypeError) as e:
        print(f"Error: could not read annotations: {e}")
        return 1

    try:
        result = export_annotated_file(pdf_path, annotations)
    except ExportError as e:
        logger.error(f"Export failed: {e}")
        print(f"Error: {e}")
        return 1

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.pdf_bytes)

    print("Export complete!")
    print(f"  Output: {output_path}")
    print(f"  Pages: {result.page_count}")
    print(f"  Marks rendered: {result.rendered_count}")
    print(f"  Annotations skipped: {result.skipped_count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
