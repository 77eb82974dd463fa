#!/usr/bin/env python3
"""
mdb2sql Exporter
================

Export a Microsoft Access database (.mdb / .accdb) to a MySQL script:
table definitions, optionally the table data, and foreign keys for the
declared relationships.

Usage:
    # Schema and data, no prompts
    python3 tools/mdb_exporter.py Northwind.mdb --with-data --output-dir ./export

    # Password-protected database, prompt for the password
    python3 tools/mdb_exporter.py Secure.accdb --ask-password --no-data

    # Print what would be exported without writing anything
    python3 tools/mdb_exporter.py Northwind.mdb --dry-run --no-data
"""

import argparse
import getpass
import logging
import shutil
import sys
from pathlib import Path
from typing import Callable, List, Optional

# Add parent directory to path to import mdb2sql core when run as a script
sys.path.insert(0, str(Path(__file__).parent.parent.resolve()))

from config.export_config import ExportConfig, load_config
from core.errors import ExportError, OutputError
from core.export_report import ExportReport
from core.exporter import CatalogExporter
from extensions.plugins.access_adapter import AccessCatalog, ConnectionConfig

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

def ask_yes_no(question: str, default: bool = False,
               input_fn: Callable[[str], str] = input) -> bool:
    """Ask a yes/no question until a recognizable answer is given"""
    suffix = " [Y/n] " if default else " [y/N] "
    while True:
        answer = input_fn(question + suffix).strip().lower()
        if not answer:
            return default
        if answer in ('y', 'yes'):
            return True
        if answer in ('n', 'no'):
            return False
        print("Please answer 'y' or 'n'.")

def prepare_output(output_dir: Path, clean: bool = False) -> int:
    """Create the output directory; with clean, empty it first.

    Returns the number of removed entries.
    """
    removed = 0
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        if clean:
            for entry in output_dir.iterdir():
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
                removed += 1
    except OSError as e:
        raise OutputError(f"Failed to prepare output directory {output_dir}: {e}",
                          {'path': str(output_dir)}) from e
    return removed

def configure_logging(level: str, log_file: Optional[Path] = None):
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT)
    logging.getLogger().setLevel(getattr(logging, level))
    logging.captureWarnings(True)
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)

def print_report(report: ExportReport):
    """Print dry run report"""
    print("\n" + "=" * 70)
    print("EXPORT DRY RUN REPORT")
    print("=" * 70)
    print(f"Source: {report.source}")
    print("-" * 70)
    print("TABLES:")
    for t in report.converted_tables:
        rows = "schema only" if t['rows'] is None else f"{t['rows']:,} rows"
        print(f"  ✓ {t['table']} ({t['columns']} columns, {rows})")
    if report.relationships:
        print("-" * 70)
        print("RELATIONSHIPS:")
        for r in report.relationships:
            print(f"  ✓ {r}")
    if report.skipped_objects:
        print("-" * 70)
        print("SKIPPED:")
        for s in report.skipped_objects:
            print(f"  - {s['name']}: {s['reason']}")
    if report.warnings:
        print("-" * 70)
        print("WARNINGS:")
        for w in report.warnings:
            print(f"  ⚠️  {w}")
    print("-" * 70)
    print(f"  Total Tables: {len(report.converted_tables)}")
    print(f"  Total Rows: {report.total_rows:,}")
    print("=" * 70 + "\n")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdb2sql", description="Export an Access database to a MySQL script")
    parser.add_argument("source", help="Path to the .mdb / .accdb file")
    parser.add_argument("--output-dir", help="Directory for the generated script (default: ./export)")
    parser.add_argument("--output-file", help="Script file name (default: <source name>.sql)")
    data = parser.add_mutually_exclusive_group()
    data.add_argument("--with-data", dest="export_data", action="store_const", const=True,
                      help="Export table rows as INSERT statements")
    data.add_argument("--no-data", dest="export_data", action="store_const", const=False,
                      help="Export the schema only")
    pw = parser.add_mutually_exclusive_group()
    pw.add_argument("--password", help="Database password")
    pw.add_argument("--ask-password", action="store_true", help="Prompt for the database password")
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--report", dest="write_report", action="store_const", const=True,
                        help="Write export_report.md next to the script")
    parser.add_argument("--dry-run", action="store_true", help="Build the export and print a report without writing")
    parser.add_argument("--clean", action="store_true", help="Empty the output directory before exporting")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser

def run_export(source: str, config: ExportConfig, dry_run: bool = False,
               catalog: Optional[AccessCatalog] = None) -> ExportReport:
    """Run one export with an already-resolved configuration"""
    output_path = config.output_path(source)
    report = ExportReport(source, output_path)

    if catalog is None:
        catalog = AccessCatalog(
            ConnectionConfig(path=source, password=config.password, driver=config.odbc_driver),
            fetch_size=config.fetch_size,
        )

    with catalog:
        exporter = CatalogExporter(catalog, config, report=report)
        document = exporter.export(bool(config.export_data))

    if dry_run:
        print_report(report)
        return report

    prepare_output(output_path.parent)
    document.write(output_path)
    if config.write_report:
        report_path = report.write(output_path.parent / "export_report.md")
        logger.info(f"Export report generated: {report_path}")
    logger.info("Export completed successfully! ✨")
    return report

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not Path(args.source).exists():
        parser.error(f"Source database not found: {args.source}")

    try:
        config = load_config(
            config_file=args.config,
            output_dir=args.output_dir,
            output_file=args.output_file,
            export_data=args.export_data,
            password=args.password,
            write_report=args.write_report,
            log_level=args.log_level,
        )
    except ExportError as e:
        parser.error(e.message)

    log_file = None
    removed = 0
    if not args.dry_run:
        # Emptied before the log file is opened inside it
        try:
            removed = prepare_output(config.output_dir, args.clean)
        except ExportError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        log_file = config.output_dir / "export.log"
    configure_logging(config.log_level, log_file)
    logger.debug(f"Configuration: {config.get_safe_dict()}")
    if removed:
        logger.info(f"Cleared {removed} entries from {config.output_dir}")

    if args.ask_password:
        config.password = getpass.getpass("Database password: ")
    if config.export_data is None:
        config.export_data = ask_yes_no("Export table data as well?")

    try:
        run_export(args.source, config, dry_run=args.dry_run)
    except ExportError as e:
        logger.error(f"Export failed: {e.message}")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
