"""
Row value formatting: Python value from the source cursor -> MySQL literal.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, Optional

from core.dialect import MySQLDialect
from core.type_registry import SourceType

class ValueFormatter:
    """Formats source values as literals for multi-row INSERT statements"""

    def __init__(self, dialect: Optional[MySQLDialect] = None,
                 date_only_columns: Iterable[str] = ()):
        self.dialect = dialect or MySQLDialect()
        self.date_only_columns = frozenset(date_only_columns)
        self._handlers: Dict[SourceType, Callable[[Any, str], str]] = {
            SourceType.BOOLEAN: self._format_boolean,
            SourceType.INTEGER: self._format_integer,
            SourceType.LONG: self._format_integer,
            SourceType.CURRENCY: self._format_float,
            SourceType.SINGLE: self._format_float,
            SourceType.DOUBLE: self._format_float,
            SourceType.DATE: self._format_date,
            SourceType.TEXT: self._format_text,
            SourceType.MEMO: self._format_text,
            SourceType.UNKNOWN: self._format_fallback,
        }

    def format(self, value: Any, source_type: SourceType, column_name: str = "") -> str:
        handler = self._handlers.get(source_type, self._format_fallback)
        return handler(value, column_name)

    def _format_boolean(self, value: Any, column_name: str) -> str:
        if value is None:
            return self.dialect.false_literal
        return str(value)

    def _format_integer(self, value: Any, column_name: str) -> str:
        if value is None:
            return "0"
        return str(value)

    def _format_float(self, value: Any, column_name: str) -> str:
        if value is None or value == "":
            return "0"
        return str(value).replace(",", ".")

    def _format_date(self, value: Any, column_name: str) -> str:
        if value is None:
            return self.dialect.null_literal
        date_only = column_name in self.date_only_columns
        if isinstance(value, (datetime, date)):
            fmt = self.dialect.date_format if date_only else self.dialect.datetime_format
            return self.dialect.quote_string(value.strftime(fmt))
        text = str(value)
        if date_only:
            # 'YYYY-MM-DD' prefix of an already-formatted timestamp
            text = text[:10]
        return self.dialect.quote_string(text)

    def _format_text(self, value: Any, column_name: str) -> str:
        if value is None:
            return self.dialect.null_literal
        return self.dialect.quote_string(str(value))

    def _format_fallback(self, value: Any, column_name: str) -> str:
        if value is None:
            return self.dialect.null_literal
        if isinstance(value, (bytes, bytearray, memoryview)):
            return self.dialect.hex_literal(value)
        return self.dialect.quote_string(str(value))
