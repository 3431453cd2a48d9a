#!/usr/bin/env python3
"""
Case-definition converter - DMN decision model to DOCX and aligned tables.

Reads a DMN case-definition file, assembles the normalized model and writes
a styled Word document and/or a plaintext document with every decision
table as a column-aligned pipe table.

Usage:
    python main.py campylobacter.dmn
    python main.py campylobacter.dmn --format md -o out/
    python main.py campylobacter.dmn --style style.yaml --locale en --include-tables

Environment (also read from .env):
    DMN_STYLE_CONFIG   default for --style
    DMN_LOCALE         default for --locale
    DMN_OUTPUT_DIR     default for --output-dir
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from lxml import etree

from core.constants import DOCX_SUFFIX, SYSTEM_NAME, TABLES_SUFFIX, VERSION
from core.errors import ConversionError, InputError
from core.logging_config import configure_logging, stage_logger
from core.styling import StylingConfig, load_styling
from extraction import build_model
from rendering import render_docx, render_markdown_tables

logger = logging.getLogger(__name__)


def parse_document(path: str):
    """Parse a DMN file with lxml (no entity resolution, no network)."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
    try:
        return etree.parse(path, parser)
    except OSError as e:
        raise InputError(f"Cannot read {path}", stage="parse", source=path, cause=e)
    except etree.XMLSyntaxError as e:
        raise InputError(f"Invalid XML structure: {e}", stage="parse", source=path, cause=e)


def convert_file(
    input_path: str,
    output_dir: str,
    formats: str = "both",
    styling: Optional[StylingConfig] = None,
    locale: Optional[str] = None,
    include_decision_tables: bool = False,
) -> List[str]:
    """Convert one DMN file; returns the paths written."""
    doc = parse_document(input_path)
    model = build_model(doc, locale=locale)

    stem = Path(input_path).stem
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    written = []

    # Render everything before writing so a failure leaves no partial output
    docx_result = None
    markdown = None
    if formats in ("docx", "both"):
        docx_result = render_docx(model, styling, include_decision_tables=include_decision_tables)
    if formats in ("md", "both"):
        markdown = render_markdown_tables(model)

    if docx_result is not None:
        path = out / f"{stem}{DOCX_SUFFIX}"
        path.write_bytes(docx_result.content)
        written.append(str(path))
    if markdown is not None:
        path = out / f"{stem}{TABLES_SUFFIX}"
        path.write_text(markdown, encoding="utf-8")
        written.append(str(path))

    write_log = stage_logger(__name__, "write", source=input_path)
    for path in written:
        write_log.info(f"Wrote {path}")
    return written


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Convert a DMN case definition into a Word document and aligned decision tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py model.dmn                       # DOCX + tables next to cwd
    python main.py model.dmn --format docx -o out  # DOCX only
    python main.py model.dmn --locale en           # English section text
        """,
    )
    parser.add_argument("input_path", help="Path to the .dmn / .xml file")
    parser.add_argument("--output-dir", "-o", default=os.environ.get("DMN_OUTPUT_DIR", "."),
                        help="Output directory (default: current directory)")
    parser.add_argument("--format", "-f", choices=("docx", "md", "both"), default="both",
                        help="Which outputs to write (default: both)")
    parser.add_argument("--style", default=os.environ.get("DMN_STYLE_CONFIG"),
                        help="Styling config (YAML or JSON)")
    parser.add_argument("--locale", default=os.environ.get("DMN_LOCALE"),
                        help="Output locale, e.g. de or en")
    parser.add_argument("--include-tables", action="store_true",
                        help="Append every decision table to the Word document")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug output")

    log_group = parser.add_argument_group('Logging')
    log_group.add_argument("--json-log", action="store_true", help="Emit structured JSON log lines to stderr")
    log_group.add_argument("--log-file", type=str, metavar="PATH", help="Write JSON logs to file")

    args = parser.parse_args(argv)

    configure_logging(
        json_mode=args.json_log,
        log_file=args.log_file,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )
    logger.info(f"{SYSTEM_NAME} v{VERSION}")

    try:
        styling = load_styling(args.style) if args.style else StylingConfig()
        convert_file(
            args.input_path,
            args.output_dir,
            formats=args.format,
            styling=styling,
            locale=args.locale,
            include_decision_tables=args.include_tables,
        )
    except ConversionError as e:
        logger.error(f"Conversion failed: {e}", extra={"stage": e.stage or "", "source": e.source or ""})
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
