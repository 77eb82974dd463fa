"""
Column type mapping: Access field -> MySQL column clause.

The lookup is a dispatch table keyed by SourceType. UNKNOWN has its own
handler so the fallback can be exercised on its own; callers that want to
surface it use `is_mapped()`.
"""

from typing import Callable, Dict, Iterable, Optional

from core.schema_ir import ColumnIR, ColumnProperty
from core.type_registry import SourceType

AUTO_INCREMENT_CLAUSE = "INT(11) NOT NULL AUTO_INCREMENT"
FALLBACK_CLAUSE = "VARCHAR(255)"

class TypeMapper:
    """Maps catalog columns to MySQL column type clauses"""

    def __init__(self, date_only_columns: Iterable[str] = ()):
        self.date_only_columns = frozenset(date_only_columns)
        self._handlers: Dict[SourceType, Callable[[ColumnIR], str]] = {
            SourceType.BOOLEAN: lambda col: "BIT(1) DEFAULT 0",
            SourceType.INTEGER: lambda col: "INT(11) DEFAULT 0",
            SourceType.LONG: lambda col: "INT(11) DEFAULT 0",
            SourceType.CURRENCY: lambda col: "DOUBLE DEFAULT 0",
            SourceType.SINGLE: lambda col: "DOUBLE DEFAULT 0",
            SourceType.DOUBLE: lambda col: "DOUBLE DEFAULT 0",
            SourceType.DATE: self._map_date,
            SourceType.TEXT: self._map_text,
            SourceType.MEMO: lambda col: "LONGTEXT",
            SourceType.UNKNOWN: self._map_fallback,
        }

    def is_date_only(self, column_name: str) -> bool:
        return column_name in self.date_only_columns

    def is_mapped(self, source_type: SourceType) -> bool:
        return source_type is not SourceType.UNKNOWN and source_type in self._handlers

    def map_column(self, column: ColumnIR, primary_key: Optional[str] = None) -> str:
        """Build the type clause for one column (without the column name)"""
        handler = self._handlers.get(column.source_type, self._map_fallback)
        clause = handler(column)

        if column.is_auto_increment:
            clause = AUTO_INCREMENT_CLAUSE

        if primary_key is not None and column.name == primary_key:
            clause += " PRIMARY KEY"

        return clause

    def _map_date(self, column: ColumnIR) -> str:
        if self.is_date_only(column.name):
            return "DATE NULL DEFAULT NULL"
        return "DATETIME NULL DEFAULT NULL"

    def _map_text(self, column: ColumnIR) -> str:
        size = column.size or 255
        if column.has(ColumnProperty.ALLOW_ZERO_LENGTH):
            return f"VARCHAR({size}) NULL DEFAULT NULL"
        return f"VARCHAR({size}) NOT NULL"

    def _map_fallback(self, column: ColumnIR) -> str:
        return FALLBACK_CLAUSE
