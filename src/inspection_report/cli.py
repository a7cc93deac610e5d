"""
Command line entry point.

Commands:
    build SNAPSHOT -o OUT.pdf   Lay out and render a report
    pages SNAPSHOT              Print the page plan without rendering
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ReportConfig
from .controller import ReportError, build_layout, build_report
from .core.schemas import ValidationError
from .layout import PageKind, ReportLayout
from .loading import SnapshotError, load_snapshot
from .logging_utils import configure_logging, detach_handler

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inspection-report",
        description="Paginate and render construction-site inspection reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s build vistoria.json -o relatorio.pdf
  %(prog)s pages vistoria.json -v
        """,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Lay out and render a report to PDF")
    build.add_argument("snapshot", type=Path, help="Path to the JSON snapshot")
    build.add_argument("-o", "--output", type=Path, required=True, help="PDF file to write")
    build.add_argument(
        "--no-footer",
        action="store_true",
        help="Skip header and page footer",
    )

    pages = subparsers.add_parser("pages", help="Print the page plan")
    pages.add_argument("snapshot", type=Path, help="Path to the JSON snapshot")

    return parser


def format_page_plan(layout: ReportLayout) -> List[str]:
    """One line per page describing what it holds."""
    lines = []
    for page in layout.pages:
        prefix = f"{page.number:>3}/{layout.total_pages} {page.kind}"
        if page.kind is PageKind.CONTENT and page.content is not None:
            keys = ", ".join(item.key for item in page.content.items)
            lines.append(f"{prefix} weight={page.content.total_weight:g} [{keys}]")
        elif page.kind is PageKind.GALLERY:
            lines.append(f"{prefix} photos={len(page.gallery)}")
        elif page.kind is PageKind.SIGNATURES:
            lines.append(f"{prefix} signatures={len(page.signatures)}")
        else:
            lines.append(prefix)
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    handler = configure_logging(args.verbose)
    try:
        if args.command == "build":
            return _run_build(args)
        return _run_pages(args)
    finally:
        detach_handler(handler)


def _run_build(args: argparse.Namespace) -> int:
    try:
        config = ReportConfig(
            snapshot_path=args.snapshot,
            output_path=args.output,
            show_footer=not args.no_footer,
        )
        result = build_report(config)
    except (ReportError, ValueError) as e:
        logger.error(str(e))
        return 1
    print(f"Wrote {result.page_count} pages to {result.pdf_path}")
    return 0


def _run_pages(args: argparse.Namespace) -> int:
    try:
        snapshot = load_snapshot(args.snapshot)
    except (SnapshotError, ValidationError) as e:
        logger.error(str(e))
        return 1
    layout = build_layout(snapshot)
    for line in format_page_plan(layout):
        print(line)
    for warning in layout.warnings:
        print(f"warning: {warning}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
