#!/usr/bin/env python3
"""
Build the canonical biomarker reference export from raw import files.

Each input is a JSON document holding a list of import records (or an object
with a "records" list). Records are normalized, merged by id (later files win
per field) and written as one sorted JSON array.

Usage:
    # Export built-ins plus two sources
    python export_catalog.py lab_sources.json vitals.json --output references.json

    # Fail on the first invalid record instead of skipping it
    python export_catalog.py lab_sources.json --strict
"""
import sys
import os
import argparse
import logging
from pathlib import Path
from typing import List, Optional

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from dotenv import load_dotenv

from biomarker_catalog.core.config import Settings
from biomarker_catalog.core.logging_config import configure_logging
from biomarker_catalog.reference_ranges.exceptions import NormalizationError
from biomarker_catalog.reference_ranges.merger import load_json
from biomarker_catalog.services.catalog_service import BiomarkerCatalog

logger = logging.getLogger(__name__)


def export_catalog(
    inputs: List[Path],
    output: Optional[Path],
    include_builtins: bool = True,
    strict: bool = False,
    settings: Optional[Settings] = None,
) -> BiomarkerCatalog:
    catalog = BiomarkerCatalog(settings=settings)
    if include_builtins:
        catalog.include_builtins()

    for path in inputs:
        rows = load_json(Path(path).read_bytes())
        report = catalog.ingest(rows, skip_invalid=not strict)
        logger.info(f"{path}: {len(report.records)} records, {len(report.rejected)} rejected")

    document = catalog.export_json()
    if output is None:
        sys.stdout.write(document.decode("utf-8"))
    else:
        Path(output).write_bytes(document)
        logger.info(f"Wrote {len(catalog)} biomarkers to {output}")
    return catalog


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Normalize, merge and export biomarker reference records',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        'inputs',
        nargs='*',
        type=Path,
        help='JSON files with raw import records, merged in order'
    )

    parser.add_argument(
        '--output',
        type=Path,
        help='Output file (default: stdout)',
        default=None
    )

    parser.add_argument(
        '--no-builtins',
        action='store_true',
        help='Do not include the built-in special, laboratory and custom biomarkers'
    )

    parser.add_argument(
        '--strict',
        action='store_true',
        help='Abort on the first invalid record instead of skipping it'
    )

    args = parser.parse_args(argv)

    load_dotenv()
    settings = Settings()
    configure_logging(settings, stream=sys.stderr)

    try:
        export_catalog(args.inputs, args.output, include_builtins=not args.no_builtins, strict=args.strict, settings=settings)
    except NormalizationError as e:
        logger.error(f"Invalid record {e.record_id or ''}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
