"""Command line entry point: ``python -m mdtree``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from mdtree import __version__
from mdtree.assemble import assemble_document
from mdtree.exceptions import MdTreeError
from mdtree.explode import explode_document
from mdtree.link_checker import check_links
from mdtree.schemas import LinkCheckReport, LinkResult


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        return asyncio.run(args.handler(args))
    except MdTreeError as exc:
        print(f"❌ Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdtree",
        description="Explode Markdown documents into sections, reassemble them, and check links.",
    )
    parser.add_argument("--version", action="version", version=f"mdtree {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True, metavar="<command>")

    explode = commands.add_parser(
        "explode", help="Extract all level 2 sections and create index"
    )
    explode.add_argument("file", type=Path, help="Markdown document to explode")
    explode.add_argument("output_dir", type=Path, help="Directory for section files and index.md")
    explode.set_defaults(handler=_run_explode)

    assemble = commands.add_parser(
        "assemble", help="Reassemble an exploded directory into one document"
    )
    assemble.add_argument("directory", type=Path, help="Directory containing index.md")
    assemble.add_argument("output", help="Output file, or - for stdout")
    assemble.set_defaults(handler=_run_assemble)

    links = commands.add_parser("check-links", help="Verify the links of a document")
    links.add_argument("file", type=Path, help="Markdown document to check")
    links.add_argument(
        "-r", "--recursive", action="store_true", help="Follow links to local Markdown files"
    )
    links.add_argument(
        "-c", "--concurrency", type=int, default=None, help="Maximum link checks in flight"
    )
    links.set_defaults(handler=_run_check_links)

    return parser


async def _run_explode(args: argparse.Namespace) -> int:
    result = await explode_document(args.file, args.output_dir)
    if result.section_count == 0:
        return 0
    for filename, reason in result.failed.items():
        print(f"❌ {filename} ({reason})", file=sys.stderr)
    print(f"✨ Document exploded to {result.output_dir} ({len(result.written) + 1} files)")
    return 1 if result.failed else 0


async def _run_assemble(args: argparse.Namespace) -> int:
    output = None if args.output == "-" else Path(args.output)
    result = await assemble_document(args.directory, output)
    if output is None:
        sys.stdout.write(result.content)
    else:
        print(f"✨ Assembled {len(result.included)} sections into {output}")
    return 0


async def _run_check_links(args: argparse.Namespace) -> int:
    report = await check_links(
        args.file, recursive=args.recursive, max_concurrency=args.concurrency
    )
    print_report(report)
    return 1 if report.has_broken else 0


def print_report(report: LinkCheckReport) -> None:
    for document in report.documents:
        print(f"\n🔗 Checking links in {_display_path(document.source)}:\n")
        if not document.results:
            print("  No links found.")
        for result in document.results:
            print(format_result(result))
    print(
        f"\n📊 {report.ok_count} ok, {report.broken_count} broken, "
        f"{report.skipped_count} skipped across {len(report.visited)} file(s)"
    )


def format_result(result: LinkResult) -> str:
    if result.status == "ok":
        return f"✅ {result.url}"
    if result.status == "skipped":
        return f"⏭️  {result.url} ({result.reason} - skipped)"
    return f"❌ {result.url} ({result.reason})"


def _display_path(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    sys.exit(main())
