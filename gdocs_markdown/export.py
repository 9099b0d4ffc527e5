#!/usr/bin/env python3
"""
Google Docs to Markdown export tool - command-line entry point.

Downloads each requested document, converts it to Markdown with a
front-matter header and writes it to ``<title>.md`` or to the filename given
after the document ID.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from . import __version__
from .config_loader import ConfigLoader, get_nested
from .logger import log_config, log_section, setup_logging
from .models import ExportRequest
from .orchestrator import ExportOrchestrator, export_json_report, format_console_report

DEFAULT_CONFIG_PATH = 'config.yaml'
DEFAULT_ENV_FILE = '.env'


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='gdocs-markdown',
        description="Export Google Docs documents to Markdown files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export a document to "<title>.md"
  gdocs-markdown 1AbCdEfGh

  # Export to an explicit filename
  gdocs-markdown 1AbCdEfGh:handbook.md

  # Export every document listed in a file (one ID[:FILENAME] per line)
  gdocs-markdown --ids-file documents.txt --output-dir docs/

  # Convert saved API responses without network access
  gdocs-markdown --mode json --json-dir exports/ 1AbCdEfGh

  # Preview without writing files
  gdocs-markdown --dry-run -v 1AbCdEfGh
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        'documents',
        nargs='*',
        metavar='DOCUMENT_ID[:FILENAME]',
        help='Documents to export, optionally with an output filename'
    )

    parser.add_argument(
        '--ids-file',
        type=str,
        help='File listing DOCUMENT_ID[:FILENAME] entries, one per line'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f'Path to configuration YAML file (default: {DEFAULT_CONFIG_PATH})'
    )

    parser.add_argument(
        '--env-file',
        type=str,
        default=DEFAULT_ENV_FILE,
        help=f'Read GOOGLE_DOCS_* variables from this dotenv file if it exists (default: {DEFAULT_ENV_FILE})'
    )

    parser.add_argument(
        '--mode',
        choices=['api', 'json'],
        help='Fetch from the Docs API or from saved JSON responses'
    )

    parser.add_argument(
        '--json-dir',
        type=str,
        help='Directory of <DOCUMENT_ID>.json files for json mode'
    )

    parser.add_argument(
        '-o', '--output-dir',
        type=str,
        help='Directory for the Markdown files (default: current directory)'
    )

    parser.add_argument(
        '--dry-run',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Fetch and convert without writing files'
    )

    parser.add_argument(
        '--report',
        type=str,
        help='Write a JSON export report to this path'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write logs to this file'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable the progress bar'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def read_ids_file(path: str) -> List[str]:
    """Read document entries from a file, skipping blank lines and # comments."""
    with open(path, 'r', encoding='utf-8') as f:
        return [
            line.strip() for line in f
            if line.strip() and not line.strip().startswith('#')
        ]


def collect_requests(args: argparse.Namespace) -> List[ExportRequest]:
    """
    Build export requests from positional arguments and the IDs file.

    Raises:
        ValueError: If an entry is malformed or no documents were given
    """
    entries = list(args.documents or [])
    if args.ids_file:
        entries.extend(read_ids_file(args.ids_file))

    if not entries:
        raise ValueError("No documents given. Pass DOCUMENT_ID[:FILENAME] arguments or --ids-file")

    return [ExportRequest.parse(entry) for entry in entries]


def load_config(args: argparse.Namespace) -> dict:
    """
    Load the config file, falling back to built-in defaults when the default path is absent.

    Variables from the dotenv file are loaded first so ``${VAR}`` placeholders
    can resolve against them. Variables already set in the process win.
    """
    if args.env_file != DEFAULT_ENV_FILE and not os.path.exists(args.env_file):
        raise FileNotFoundError(f"Environment file not found: {args.env_file}")
    if os.path.exists(args.env_file):
        load_dotenv(args.env_file, override=False)

    if os.path.exists(args.config):
        config = ConfigLoader.load(args.config)
    elif args.config != DEFAULT_CONFIG_PATH:
        raise FileNotFoundError(f"Configuration file not found: {args.config}")
    else:
        config = ConfigLoader.defaults()

    config = ConfigLoader.merge_with_args(config, args)
    ConfigLoader.validate(config)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(verbosity=args.verbose)
        logger = logging.getLogger('gdocs_markdown.cli')

        log_section("Google Docs to Markdown Export")
        logger.info(f"Version: {__version__}")

        config = load_config(args)
        export_requests = collect_requests(args)

        # Reconfigure logging with config file settings
        setup_logging(
            verbosity=args.verbose,
            level=get_nested(config, 'logging.level'),
            log_file=get_nested(config, 'logging.file')
        )
        log_config(config)

        orchestrator = ExportOrchestrator(config, logger)
        report = orchestrator.run(export_requests, show_progress=not args.no_progress)

        print("\n" + format_console_report(report))

        report_path = get_nested(config, 'export.report_path')
        if report_path:
            try:
                export_json_report(report, report_path)
                logger.info(f"Export report saved to {report_path}")
            except OSError as e:
                logger.warning(f"Failed to export JSON report: {str(e)}")

        errors = report['summary']['total_errors']
        if errors > 0:
            logger.warning(f"Export completed with {errors} errors")
            return 1

        logger.info("Export completed successfully")
        return 0

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nExport interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
