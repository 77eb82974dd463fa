#!/usr/bin/env python3
"""
mdb2sql Catalog Exporter
========================

Walks a source catalog once and produces the statement document:
CREATE TABLE (+ INSERT) statements for every exported table in catalog
order, then ALTER TABLE ... ADD FOREIGN KEY for every exported
relationship in catalog order.

Usage:
    with AccessCatalog(ConnectionConfig(path="Northwind.mdb")) as catalog:
        exporter = CatalogExporter(catalog, config)
        exporter.run(Path("export/Northwind.sql"), export_data=True)
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from config.export_config import ExportConfig
from core.catalog import SourceCatalog
from core.dialect import MySQLDialect
from core.export_report import ExportReport
from core.relationship_emitter import RelationshipEmitter
from core.schema_ir import RelationshipIR, TableIR
from core.statement_document import StatementDocument
from core.table_emitter import TableEmitter
from core.type_mapper import TypeMapper
from core.value_formatter import ValueFormatter

logger = logging.getLogger(__name__)

class TableFilter:
    """Decides which catalog tables are left out of the export"""

    def __init__(self, prefixes=(), markers=(), names=()):
        self.prefixes = tuple(p.lower() for p in prefixes)
        self.markers = tuple(m.lower() for m in markers)
        self.names = frozenset(names)

    @classmethod
    def from_config(cls, config: ExportConfig) -> 'TableFilter':
        return cls(config.excluded_prefixes, config.excluded_markers, config.excluded_names)

    def exclusion_reason(self, name: str, is_system: bool = False) -> Optional[str]:
        """Why the table is excluded, or None when it is exported"""
        lowered = name.lower()
        if is_system:
            return "system table"
        if self.prefixes and lowered.startswith(self.prefixes):
            return "reserved prefix"
        if self.markers and lowered.startswith(self.markers):
            return "reserved marker"
        if name in self.names:
            return "excluded by name"
        return None

    def is_excluded(self, name: str, is_system: bool = False) -> bool:
        return self.exclusion_reason(name, is_system) is not None

class CatalogExporter:
    """Drives the emitters over a source catalog"""

    def __init__(self, catalog: SourceCatalog, config: Optional[ExportConfig] = None,
                 dialect: Optional[MySQLDialect] = None,
                 report: Optional[ExportReport] = None):
        self.catalog = catalog
        self.config = config or ExportConfig()
        self.dialect = dialect or MySQLDialect()
        self.report = report or ExportReport(catalog.description)
        self.table_filter = TableFilter.from_config(self.config)

        self.table_emitter = TableEmitter(
            catalog,
            TypeMapper(self.config.date_only_columns),
            ValueFormatter(self.dialect, self.config.date_only_columns),
            dialect=self.dialect,
            excluded_data_tables=self.config.excluded_data_tables,
            report=self.report,
        )
        self.relationship_emitter = RelationshipEmitter(self.dialect, self.report)

    def export(self, export_data: bool = False,
               document: Optional[StatementDocument] = None) -> StatementDocument:
        """Build the statement document without writing it anywhere"""
        document = document if document is not None else StatementDocument()

        tables = self.catalog.get_tables()
        logger.info(f"Found {len(tables)} tables in {self.catalog.description}")
        system_tables = self.emit_tables(tables, document, export_data)

        relationships = self.catalog.get_relationships()
        logger.info(f"Found {len(relationships)} relationships")
        self.emit_relationships(relationships, document, system_tables)

        self.report.finish()
        return document

    def emit_tables(self, tables: List[TableIR], document: StatementDocument,
                    export_data: bool = False) -> Dict[str, bool]:
        """Append table statements; returns {table name: is_system} for relationship filtering"""
        system_tables = {}
        for table in tables:
            system_tables[table.name] = table.is_system
            reason = self.table_filter.exclusion_reason(table.name, table.is_system)
            if reason:
                logger.debug(f"Skipping table {table.name} ({reason})")
                self.report.log_skipped(table.name, reason)
                continue

            logger.info(f"Exporting table {table.name}...")
            document.append(self.table_emitter.emit(table, export_data))
        return system_tables

    def emit_relationships(self, relationships: List[RelationshipIR], document: StatementDocument,
                           system_tables: Optional[Dict[str, bool]] = None):
        system_tables = system_tables or {}
        for rel in relationships:
            excluded = [
                name for name in (rel.primary_table, rel.foreign_table)
                if self.table_filter.is_excluded(name, system_tables.get(name, False))
            ]
            if excluded:
                logger.debug(f"Skipping relationship {rel.name} (excluded table {excluded[0]})")
                self.report.log_skipped(rel.name, f"references excluded table {excluded[0]}")
                continue

            if rel.is_self_referencing:
                msg = f"Self-referencing relationship {rel.name} on {rel.primary_table} not exported"
                logger.warning(msg)
                self.report.log_warning(msg)
                self.report.log_skipped(rel.name, "self-referencing")
                continue

            statement = self.relationship_emitter.emit(rel)
            if statement:
                document.append(statement)

    def run(self, output_path: Path, export_data: bool = False) -> StatementDocument:
        """Export and write the document once; nothing is written if the export fails"""
        document = self.export(export_data)
        self.report.output_path = Path(output_path)
        document.write(output_path)
        return document
