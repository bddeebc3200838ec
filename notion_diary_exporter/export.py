#!/usr/bin/env python3
"""
Notion Diary Exporter - Main CLI Entry Point

Exports diary pages from a Notion database into one markdown file per entry
plus a combined, indexed markdown file.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

import yaml

from . import __version__
from .config_loader import ConfigLoader
from .exporters import FileSink, MemorySink, OutputSinkError
from .fetchers import FetcherError
from .logger import log_config, log_section, setup_logging
from .orchestrator import ExportOrchestrator

DEFAULT_CONFIG_PATH = 'config.yaml'


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='notion-diary-export',
        description="Export diary pages from a Notion database to markdown files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export using NOTION_TOKEN / NOTION_DATABASE_ID from the environment
  notion-diary-export

  # Use a configuration file
  notion-diary-export --config config.yaml

  # Export every page, not only titles containing the filter text
  notion-diary-export --all

  # Preview without writing files
  notion-diary-export --dry-run -v
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        help=f'Path to configuration YAML file (default: {DEFAULT_CONFIG_PATH} if present, '
             'otherwise built-in defaults)'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        help='Directory for the exported markdown files (default: ./diary)'
    )

    filter_group = parser.add_mutually_exclusive_group()
    filter_group.add_argument(
        '--filter',
        type=str,
        help='Only export pages whose title contains this text'
    )
    filter_group.add_argument(
        '--all',
        action='store_true',
        help='Export every page of the database'
    )

    parser.add_argument(
        '--title-property',
        type=str,
        help='Name of the title property (default: タイトル)'
    )

    parser.add_argument(
        '--date-property',
        type=str,
        help='Name of the date property (default: 日付)'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Fetch and render everything but only list the files that would be written'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write logs to this file'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def load_configuration(config_path: Optional[str]) -> dict:
    """
    Load the YAML configuration.

    An explicitly given path must exist. Without one, config.yaml in the
    working directory is used when present, else the built-in defaults.

    Raises:
        FileNotFoundError: If an explicit config path does not exist
    """
    if config_path is not None:
        return ConfigLoader.load(config_path)
    if os.path.exists(DEFAULT_CONFIG_PATH):
        return ConfigLoader.load(DEFAULT_CONFIG_PATH)
    return ConfigLoader.default_config()


def run_export(config: dict, dry_run: bool, logger: logging.Logger) -> int:
    """Execute the export and map failures to exit codes."""
    sink = MemorySink() if dry_run else FileSink(config['export']['output_directory'], logger)

    try:
        orchestrator = ExportOrchestrator.from_config(config, sink=sink, logger=logger)
        stats = orchestrator.run()
    except FetcherError as e:
        logger.error(f"Export aborted, Notion fetch failed: {str(e)}")
        return 1
    except OutputSinkError as e:
        logger.error(f"Export aborted, could not write output: {str(e)}")
        return 1

    if dry_run:
        print("\n" + "=" * 60)
        print("EXPORT PREVIEW (DRY RUN)")
        print("=" * 60)
        for key in sink.documents:
            print(f"  {key}")
        print(f"\n{len(sink.documents)} files would be written to {config['export']['output_directory']}")
        return 0

    logger.info(f"Exported {stats['entries_exported']} entries to {config['export']['output_directory']}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = load_configuration(args.config)
        config = ConfigLoader.merge_with_args(config, args)

        logging_config = config.get('logging', {}) or {}
        level = logging_config.get('level') if not args.verbose else None
        logger = setup_logging(
            verbosity=args.verbose,
            log_file=logging_config.get('file'),
            level=level
        )

        log_section("Notion Diary Exporter")
        logger.info(f"Version: {__version__}")

        ConfigLoader.validate(config)
        log_config(config)

        return run_export(config, args.dry_run, logger)

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except yaml.YAMLError as e:
        print(f"ERROR: Invalid configuration file: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nExport interrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"ERROR: Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
