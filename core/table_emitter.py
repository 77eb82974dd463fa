"""
Table emission: one CREATE TABLE statement per table, optionally followed by
a single multi-row INSERT carrying the table's data.
"""

import logging
import warnings
from typing import Iterable, List, Optional, Tuple

from core.catalog import SourceCatalog
from core.dialect import MySQLDialect
from core.errors import ExportError, RowCursorError, UnmappedTypeWarning
from core.export_report import ExportReport
from core.schema_ir import TableIR
from core.type_mapper import FALLBACK_CLAUSE, TypeMapper
from core.value_formatter import ValueFormatter

logger = logging.getLogger(__name__)

class TableEmitter:
    """Builds the CREATE TABLE (+ INSERT) statement for a catalog table"""

    def __init__(self, catalog: SourceCatalog,
                 type_mapper: TypeMapper,
                 value_formatter: ValueFormatter,
                 dialect: Optional[MySQLDialect] = None,
                 excluded_data_tables: Iterable[str] = (),
                 report: Optional[ExportReport] = None):
        self.catalog = catalog
        self.type_mapper = type_mapper
        self.value_formatter = value_formatter
        self.dialect = dialect or MySQLDialect()
        self.excluded_data_tables = frozenset(excluded_data_tables)
        self.report = report

    def emit(self, table: TableIR, export_data: bool = False) -> str:
        self._check_column_types(table)

        statement = self.create_statement(table)
        rows_written = None

        if export_data and table.name in self.excluded_data_tables:
            logger.info(f"Skipping data for {table.name} (excluded from data export)")
        elif export_data:
            insert, rows_written = self.insert_statement(table)
            if insert:
                statement += "\n" + insert
            logger.info(f"  {table.name}: {rows_written} rows")

        if self.report:
            self.report.log_table(table.name, len(table.columns), rows_written)
        return statement

    def create_statement(self, table: TableIR) -> str:
        primary_key = table.primary_key_column()
        clauses = [
            f"{self.dialect.quote_identifier(col.name)} {self.type_mapper.map_column(col, primary_key)}"
            for col in table.columns
        ]
        return f"CREATE TABLE {self.dialect.plain_identifier(table.name)} ({', '.join(clauses)});"

    def insert_statement(self, table: TableIR) -> Tuple[Optional[str], int]:
        """Return (INSERT statement or None when the table is empty, row count)"""
        tuples = self._format_rows(table)
        if not tuples:
            return None, 0

        columns = ", ".join(self.dialect.plain_identifier(name) for name in table.column_names)
        header = f"INSERT INTO {self.dialect.plain_identifier(table.name)} ({columns}) VALUES\n"
        return header + ",\n".join(tuples) + ";", len(tuples)

    def _format_rows(self, table: TableIR) -> List[str]:
        tuples = []
        try:
            with self.catalog.open_rows(table) as rows:
                for row in rows:
                    if len(row) != len(table.columns):
                        raise RowCursorError(
                            f"Row of {table.name} has {len(row)} values, expected {len(table.columns)}",
                            table=table.name, rows_read=len(tuples))
                    values = [
                        self.value_formatter.format(value, col.source_type, col.name)
                        for value, col in zip(row, table.columns)
                    ]
                    tuples.append(f"({', '.join(values)})")
        except ExportError:
            raise
        except Exception as e:
            raise RowCursorError(f"Failed to read rows of {table.name}: {e}",
                                 table=table.name, rows_read=len(tuples)) from e
        return tuples

    def _check_column_types(self, table: TableIR):
        for col in table.columns:
            if col.is_auto_increment or self.type_mapper.is_mapped(col.source_type):
                continue
            msg = (f"{table.name}.{col.name}: unmapped type '{col.raw_type or col.source_type.name}' "
                   f"exported as {FALLBACK_CLAUSE}")
            warnings.warn(msg, UnmappedTypeWarning, stacklevel=2)
            if self.report:
                self.report.log_warning(msg)
