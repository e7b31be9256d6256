"""
Command-line interface for pageflow.

Usage:
    pageflow render content.json --output report.pdf
    pageflow render content.json --config options.json --show-header first
    pageflow layout content.json --json
    pageflow version
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import DocumentOptions
from .exceptions import PageflowError

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pageflow",
        description="pageflow - paginated PDF reports from structured content",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pageflow render content.json -o report.pdf
  pageflow render content.json --header-text "ACME - Q3" --show-footer all-except-first
  pageflow layout content.json --json
  pageflow version
        """,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Render content to PDF")
    _add_content_arguments(render_parser)
    render_parser.add_argument(
        "-o", "--output",
        help="Output PDF path (default: option 'filename' or report.pdf)"
    )
    render_parser.add_argument(
        "--dump-layout",
        metavar="PATH",
        help="Also write the computed layout as JSON"
    )

    layout_parser = subparsers.add_parser("layout", help="Paginate content and print a summary")
    _add_content_arguments(layout_parser)
    layout_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full layout as JSON"
    )

    subparsers.add_parser("version", help="Show version information")

    return parser


def _add_content_arguments(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("input", help="Content tree as JSON")
    sub.add_argument("--config", help="Options file (JSON object)")
    sub.add_argument("--header-text", help="Header title")
    sub.add_argument("--logo", help="Header logo (URL, path, data URI or base64)")
    sub.add_argument("--footer-logo", help="Footer logo (URL, path, data URI or base64)")
    sub.add_argument(
        "--show-header",
        help="Header visibility: all, first, all-except-first, none or page list (1,3,5)"
    )
    sub.add_argument("--show-footer", help="Footer visibility (same values as --show-header)")
    sub.add_argument("--page-format", choices=["a4", "letter", "legal"], help="Page format")
    sub.add_argument("--image-timeout", type=float, help="Per-image load timeout in seconds")


def _parse_visibility(value: Optional[str]):
    if value is None or not value.replace(",", "").replace(" ", "").isdigit():
        return value
    return [int(part) for part in value.split(",") if part.strip()]


def _local_path(value: Optional[str]) -> Optional[str]:
    """Anchor a logo given as an existing local path to the working directory."""
    if not value or value.startswith(("http://", "https://", "data:")):
        return value
    try:
        path = Path(value)
        return str(path.resolve()) if path.is_file() else value
    except OSError:
        return value


def _load_options(args) -> DocumentOptions:
    options = DocumentOptions.from_file(args.config) if args.config else DocumentOptions()
    return options.merged(
        header_text=args.header_text,
        logo_url=_local_path(args.logo),
        footer_logo_url=_local_path(args.footer_logo),
        show_header_on=_parse_visibility(args.show_header),
        show_footer_on=_parse_visibility(args.show_footer),
        page_format=args.page_format,
        image_timeout=args.image_timeout,
    )


def _load_content(path: Path):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise PageflowError(f"Invalid content JSON in {path}", str(e)) from e


def _print_diagnostics(diagnostics) -> None:
    for diag in diagnostics:
        where = f" (page {diag.page_number})" if diag.page_number else ""
        print(f"⚠️  {diag.kind}: {diag.message}{where}", file=sys.stderr)


def cmd_render(args) -> int:
    """Handle render command."""
    from .api import generate_pdf
    from .export import LayoutJSONExporter

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    options = _load_options(args)
    content = _load_content(input_path)

    print(f"📄 Rendering: {input_path}")
    result = asyncio.run(
        generate_pdf(content, options, output_path=args.output, base_path=input_path.parent)
    )
    _print_diagnostics(result.diagnostics)

    if args.dump_layout:
        LayoutJSONExporter().export(result.layout, Path(args.dump_layout))
        print(f"📊 Layout: {args.dump_layout}")

    print(f"✅ Saved: {result.output_path}")
    print(f"   Pages: {result.page_count}")
    return 0


def cmd_layout(args) -> int:
    """Handle layout command."""
    from .api import layout_document
    from .engine import LayoutValidator
    from .export import LayoutJSONExporter

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    options = _load_options(args)
    content = _load_content(input_path)
    layout = asyncio.run(layout_document(content, options, base_path=input_path.parent))

    if args.json:
        print(LayoutJSONExporter().to_json(layout))
        return 0

    _, errors, warnings = LayoutValidator(layout).validate()
    print(f"📄 File: {input_path}")
    print(f"   Pages: {layout.page_count}")
    for page in layout.pages:
        print(
            f"   Page {page.number}: {len(page.in_band('body'))} body, "
            f"{len(page.in_band('header'))} header, {len(page.in_band('footer'))} footer"
        )
    _print_diagnostics(layout.diagnostics)
    for message in warnings:
        print(f"   warning: {message}")
    for message in errors:
        print(f"   error: {message}", file=sys.stderr)
    return 1 if errors else 0


def cmd_version(args=None) -> int:
    """Handle version command."""
    from .version import __version__
    print(f"pageflow v{__version__}")
    print("Paginated PDF reports from structured content")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    from .utils import setup_logging

    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    commands = {
        "render": cmd_render,
        "layout": cmd_layout,
        "version": cmd_version,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args)
    except PageflowError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
