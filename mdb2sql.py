#!/usr/bin/env python3
"""
mdb2sql - Access to MySQL exporter, programmatic entry point

This is the canonical way to use mdb2sql from Python. The command line
tool lives in tools/mdb_exporter.py (installed as `mdb2sql`).
"""

import logging
from pathlib import Path
from typing import Optional

from config.export_config import ExportConfig, load_config
from core.catalog import SourceCatalog
from core.dialect import MySQLDialect
from core.export_report import ExportReport
from core.exporter import CatalogExporter
from extensions.plugins.access_adapter import AccessCatalog, ConnectionConfig

logger = logging.getLogger(__name__)

MDB2SQL_VERSION = "1.0.0"


class MDB2SQL:
    """
    Blessed API for mdb2sql

    Example:
        >>> from mdb2sql import MDB2SQL
        >>>
        >>> with MDB2SQL("Northwind.mdb") as exporter:
        ...     sql = exporter.to_sql(export_data=True)
        ...     report = exporter.export("export/Northwind.sql", export_data=True)
    """

    def __init__(self,
                 source: str,
                 password: Optional[str] = None,
                 config: Optional[ExportConfig] = None,
                 catalog: Optional[SourceCatalog] = None,
                 dialect: Optional[MySQLDialect] = None):
        """
        Args:
            source: Path to the .mdb / .accdb file
            password: Database password, if the file is protected
            config: Export settings (default: environment / .env / defaults)
            catalog: Already-open catalog to use instead of connecting via ODBC
            dialect: Identifier and literal conventions (default: MySQL backticks)
        """
        self.source = source
        self.dialect = dialect or MySQLDialect()
        self.config = config or load_config()
        if password is not None:
            self.config.password = password

        self.catalog = catalog or AccessCatalog(
            ConnectionConfig(path=source, password=self.config.password, driver=self.config.odbc_driver),
            fetch_size=self.config.fetch_size,
        )

    def to_sql(self, export_data: bool = False) -> str:
        """Build the whole script in memory and return it"""
        exporter = CatalogExporter(self.catalog, self.config, dialect=self.dialect)
        return exporter.export(export_data).render()

    def export(self, output_path: Optional[str] = None, export_data: bool = False) -> ExportReport:
        """Write the script to output_path (default: configured output dir / <source>.sql)"""
        path = Path(output_path) if output_path else self.config.output_path(self.source)
        path.parent.mkdir(parents=True, exist_ok=True)

        report = ExportReport(self.source, path)
        CatalogExporter(self.catalog, self.config, dialect=self.dialect, report=report).run(path, export_data)
        return report

    def close(self):
        self.catalog.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
