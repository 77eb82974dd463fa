#!/usr/bin/env python3
"""
mdb2sql Access Adapter - Microsoft Access source catalog over ODBC

This module reads an Access database (.mdb / .accdb) through pyodbc and the
Microsoft Access ODBC driver:
- Table enumeration (user and system tables)
- Column metadata with Access type names mapped to source types
- Index metadata (the 'PrimaryKey' index drives the primary key)
- Relationships from MSysRelationships
- Scoped, batched row cursors

Usage:
    config = ConnectionConfig(path=r"C:\\data\\Northwind.mdb")
    with AccessCatalog(config) as catalog:
        tables = catalog.get_tables()
"""

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from config.export_config import DEFAULT_ODBC_DRIVER
from core.catalog import Row, SourceCatalog
from core.errors import CatalogAccessError, RowCursorError
from core.schema_ir import ColumnIR, ColumnProperty, IndexIR, RelationshipIR, TableIR
from core.type_registry import SourceType, TypeRegistry

logger = logging.getLogger(__name__)

RELATIONSHIPS_QUERY = (
    "SELECT szRelationship, szReferencedObject, szReferencedColumn, "
    "szObject, szColumn, icolumn FROM MSysRelationships"
)

@dataclass
class ConnectionConfig:
    """Access connection configuration"""
    path: str
    password: Optional[str] = field(default=None, repr=False)
    driver: str = DEFAULT_ODBC_DRIVER

    def to_connection_string(self) -> str:
        parts = [f"DRIVER={self.driver}", f"DBQ={self.path}"]
        if self.password:
            parts.append(f"PWD={self.password}")
        return ";".join(parts) + ";"

def _sanitize_error(e: Exception) -> str:
    """Mask passwords in driver error messages"""
    return re.sub(r'(PWD\s*=\s*)[^;]*', r'\1***', str(e), flags=re.IGNORECASE)

class AccessCatalog(SourceCatalog):
    """
    Source catalog for Microsoft Access databases

    A ready DB-API connection can be passed in (tests, callers managing
    their own connection); otherwise one is opened from the config on
    first use.
    """

    def __init__(self, config: Optional[ConnectionConfig] = None, connection: Any = None,
                 fetch_size: int = 500):
        if config is None and connection is None:
            raise ValueError("Either config or connection must be provided")
        self.config = config
        self.fetch_size = fetch_size
        self._connection = connection
        self._owns_connection = connection is None
        self.description = config.path if config else "ODBC connection"

    def connect(self):
        """Open the ODBC connection"""
        if self._connection is not None:
            return self._connection

        logger.info(f"Connecting to Access database: {self.config.path}...")
        try:
            import pyodbc
        except ImportError as e:
            raise CatalogAccessError(
                "pyodbc not installed. Please install it: pip install pyodbc") from e

        try:
            self._connection = pyodbc.connect(self.config.to_connection_string(), autocommit=True)
        except Exception as e:
            raise CatalogAccessError(
                f"Failed to open {self.config.path}: {_sanitize_error(e)}",
                {'path': self.config.path}) from e

        logger.info("Connected to Access source")
        return self._connection

    def close(self):
        if self._connection is not None and self._owns_connection:
            try:
                self._connection.close()
            finally:
                self._connection = None
                logger.debug("Access connection closed")

    @contextmanager
    def _metadata_cursor(self, what: str):
        cursor = self.connect().cursor()
        try:
            yield cursor
        except CatalogAccessError:
            raise
        except Exception as e:
            raise CatalogAccessError(f"Failed to read {what}: {_sanitize_error(e)}") from e
        finally:
            cursor.close()

    # ===== Tables =====

    def get_tables(self) -> List[TableIR]:
        tables = []
        for name, is_system in self.get_table_names():
            tables.append(TableIR(
                name=name,
                columns=self.get_columns(name),
                indexes=self.get_indexes(name),
                is_system=is_system,
            ))
        return tables

    def get_table_names(self) -> List[Tuple[str, bool]]:
        """(table name, is system table) in catalog order; queries and links are skipped"""
        with self._metadata_cursor("table list") as cursor:
            rows = cursor.tables().fetchall()

        names = []
        for row in rows:
            table_type = (row.table_type or "").upper()
            if table_type in ("TABLE", "SYSTEM TABLE"):
                names.append((row.table_name, table_type == "SYSTEM TABLE"))
        logger.debug(f"Found {len(names)} tables")
        return names

    def get_columns(self, table_name: str) -> List[ColumnIR]:
        with self._metadata_cursor(f"columns of {table_name}") as cursor:
            rows = cursor.columns(table=table_name).fetchall()

        rows = sorted(rows, key=lambda r: r.ordinal_position or 0)
        return [self._column_from_row(row) for row in rows]

    def _column_from_row(self, row) -> ColumnIR:
        type_name = row.type_name or ""
        source_type = TypeRegistry.from_type_name(type_name)
        nullable = bool(row.nullable)

        properties = ColumnProperty.NONE
        if source_type not in (SourceType.TEXT, SourceType.MEMO):
            properties |= ColumnProperty.FIXED
        if TypeRegistry.is_auto_increment_type(type_name):
            properties |= ColumnProperty.AUTO_INCREMENT | ColumnProperty.FIXED
        # ODBC does not expose AllowZeroLength; nullable text is the closest signal
        if nullable and source_type.is_textual:
            properties |= ColumnProperty.ALLOW_ZERO_LENGTH
        if not nullable:
            properties |= ColumnProperty.REQUIRED

        if source_type is SourceType.UNKNOWN:
            logger.debug(f"Column {row.column_name}: no mapping for Access type {type_name!r}")

        return ColumnIR(
            name=row.column_name,
            source_type=source_type,
            size=row.column_size if source_type is SourceType.TEXT else None,
            properties=properties,
            raw_type=type_name,
        )

    def get_indexes(self, table_name: str) -> List[IndexIR]:
        with self._metadata_cursor(f"indexes of {table_name}") as cursor:
            rows = cursor.statistics(table=table_name).fetchall()

        grouped: Dict[str, List[Tuple[int, str]]] = {}
        for row in rows:
            # The table-statistics row carries no index name
            if not row.index_name or not row.column_name:
                continue
            grouped.setdefault(row.index_name, []).append((row.ordinal_position or 0, row.column_name))

        return [
            IndexIR(name=name, columns=tuple(col for _, col in sorted(cols)))
            for name, cols in grouped.items()
        ]

    # ===== Relationships =====

    def get_relationships(self) -> List[RelationshipIR]:
        """Relationships from MSysRelationships, grouped by name in catalog order.

        Reading MSysRelationships needs read permission on system objects.
        """
        with self._metadata_cursor("MSysRelationships") as cursor:
            cursor.execute(RELATIONSHIPS_QUERY)
            rows = cursor.fetchall()

        grouped: Dict[str, Dict[str, Any]] = {}
        for name, ref_table, ref_column, table, column, position in rows:
            entry = grouped.setdefault(name, {'primary': ref_table, 'foreign': table, 'pairs': []})
            entry['pairs'].append((position or 0, ref_column, column))

        relationships = []
        for name, entry in grouped.items():
            pairs = tuple((p, f) for _, p, f in sorted(entry['pairs'], key=lambda x: x[0]))
            relationships.append(RelationshipIR(
                name=name,
                primary_table=entry['primary'],
                foreign_table=entry['foreign'],
                column_pairs=pairs,
            ))
        return relationships

    # ===== Rows =====

    @staticmethod
    def quote_identifier(identifier: str) -> str:
        return f"[{identifier}]"

    @contextmanager
    def open_rows(self, table: TableIR) -> Iterator[Iterator[Row]]:
        columns = ", ".join(self.quote_identifier(c) for c in table.column_names)
        query = f"SELECT {columns} FROM {self.quote_identifier(table.name)}"

        cursor = self.connect().cursor()
        try:
            try:
                cursor.execute(query)
            except Exception as e:
                raise RowCursorError(f"Failed to open cursor on {table.name}: {_sanitize_error(e)}",
                                     table=table.name, rows_read=0) from e
            yield self._iter_rows(cursor, table.name)
        finally:
            cursor.close()

    def _iter_rows(self, cursor, table_name: str) -> Iterator[Row]:
        rows_read = 0
        while True:
            try:
                batch = cursor.fetchmany(self.fetch_size)
            except Exception as e:
                raise RowCursorError(f"Failed reading {table_name} after {rows_read} rows: {_sanitize_error(e)}",
                                     table=table_name, rows_read=rows_read) from e
            if not batch:
                break
            rows_read += len(batch)
            yield from batch
