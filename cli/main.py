"""CLI entry point."""

import argparse
import math
import os
import sys
from pathlib import Path
from typing import List, Optional

from cli.builder import BuildReport, build_project
from cli.constants import DEFAULT_CHUNK_SIZE_MB, DESCRIPTION, GREEN, PROG_NAME, RED, RESET, YELLOW
from common.constants import DEFAULT_OUTPUT_DIR, DEFAULT_THRESHOLD_MB
from common.logging_config import setup_logging
from common.utils import megabytes_to_bytes


def positive_float(value: str) -> float:
    """argparse type for sizes in MB that come to at least one byte."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value}")
    if not math.isfinite(number) or number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    if megabytes_to_bytes(number) < 1:
        raise argparse.ArgumentTypeError(f"must be at least one byte: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with the build and serve commands."""
    parser = argparse.ArgumentParser(prog=PROG_NAME, description=DESCRIPTION)
    parser.add_argument('--version', action='version', version='%(prog)s 1.0.0')
    subparsers = parser.add_subparsers(dest='command', required=True)

    build = subparsers.add_parser('build', help="Create a server project from the current build")
    build.add_argument('-t', '--threshold', type=positive_float, default=DEFAULT_THRESHOLD_MB,
                       help=f"Size threshold in MB for splitting files (default: {DEFAULT_THRESHOLD_MB})")
    build.add_argument('-o', '--output', default=DEFAULT_OUTPUT_DIR,
                       help=f"Output directory for the generated project (default: {DEFAULT_OUTPUT_DIR})")
    build.add_argument('-s', '--source', default='.',
                       help="Directory containing the build (default: current directory)")
    build.add_argument('--chunk-size', type=positive_float, default=DEFAULT_CHUNK_SIZE_MB,
                       help=f"Chunk size in MB (default: {DEFAULT_CHUNK_SIZE_MB})")
    build.add_argument('--keep-originals', action='store_true',
                       help="Keep split files in public/ next to their chunks")
    build.add_argument('--debug', action='store_true', help="Enable debug logging")

    serve = subparsers.add_parser('serve', help="Serve a generated project")
    serve.add_argument('port', nargs='?', type=int, default=None)
    serve.add_argument('--root', default='.', help="Project directory (default: current directory)")
    serve.add_argument('--debug', action='store_true', help="Enable debug logging")

    return parser


def print_report(report: BuildReport) -> None:
    """Print a colored summary of a build."""
    if not report.split_files and not report.failed_files:
        print(f"{YELLOW}No large files found that need splitting.{RESET}")
    for name, chunk_count in report.split_files:
        print(f"{GREEN}✓ Split {name} into {chunk_count} chunks{RESET}")
    for name, error in report.failed_files:
        print(f"{RED}✗ Failed to split {name}: {error}{RESET}")

    print(f"\n{GREEN}Server project created in {report.output_dir}{RESET}")
    print("Next steps:")
    print(f"  cd {report.output_dir}")
    print("  pip install -r requirements.txt")
    print("  python app.py")


def run_build(args: argparse.Namespace) -> int:
    """Run the build command and return the exit status."""
    report = build_project(
        source_dir=Path(args.source),
        output_dir=Path(args.output),
        threshold_bytes=megabytes_to_bytes(args.threshold),
        chunk_size=megabytes_to_bytes(args.chunk_size),
        keep_originals=args.keep_originals,
    )
    print_report(report)
    return 0 if report.succeeded else 1


def run_serve(args: argparse.Namespace) -> int:
    """Run the server for a generated project."""
    from server.main import main as serve_main

    root = Path(args.root)
    server_args = [
        '--public-dir', str(root / 'public'),
        '--chunks-dir', str(root / 'chunks'),
    ]
    if args.port is not None:
        server_args.insert(0, str(args.port))
    if args.debug:
        server_args.append('--debug')
    serve_main(server_args)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for CLI."""
    args = build_parser().parse_args(argv)

    log_level = 'DEBUG' if args.debug else os.getenv('LOG_LEVEL', 'INFO')
    logger = setup_logging('cli', log_level=log_level)

    if args.command == 'serve':
        return run_serve(args)

    try:
        return run_build(args)
    except OSError as e:
        logger.error(f"Build failed: {e}", exc_info=True)
        print(f"{RED}Error: {e}{RESET}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
