from enum import Enum
from typing import Dict, Union

class SourceType(Enum):
    """Access field types, valued by their DAO type codes"""
    BOOLEAN = 1
    INTEGER = 3  # 16-bit
    LONG = 4  # 32-bit
    CURRENCY = 5
    SINGLE = 6
    DOUBLE = 7
    DATE = 8
    TEXT = 10
    MEMO = 12

    # Fallback
    UNKNOWN = 0

    @property
    def is_textual(self) -> bool:
        return self in (SourceType.TEXT, SourceType.MEMO)

class TypeRegistry:
    # ODBC TYPE_NAME (Microsoft Access driver) -> source type
    ODBC_TO_SOURCE: Dict[str, SourceType] = {
        'bit': SourceType.BOOLEAN,
        'smallint': SourceType.INTEGER,
        'integer': SourceType.LONG,
        'counter': SourceType.LONG,
        'currency': SourceType.CURRENCY,
        'real': SourceType.SINGLE,
        'double': SourceType.DOUBLE,
        'datetime': SourceType.DATE,
        'varchar': SourceType.TEXT,
        'char': SourceType.TEXT,
        'longchar': SourceType.MEMO,
    }

    # ODBC type names whose columns are auto-increment (and fixed width)
    AUTO_INCREMENT_TYPES = frozenset({'counter'})

    @staticmethod
    def from_code(code: Union[int, str, None]) -> SourceType:
        """Map a DAO numeric type code to a source type"""
        try:
            source_type = SourceType(int(code))
        except (TypeError, ValueError):
            return SourceType.UNKNOWN
        return source_type

    @staticmethod
    def from_type_name(type_name: str) -> SourceType:
        """Map an ODBC type name ('VARCHAR', 'COUNTER', ...) to a source type"""
        if not type_name:
            return SourceType.UNKNOWN
        return TypeRegistry.ODBC_TO_SOURCE.get(type_name.lower().strip(), SourceType.UNKNOWN)

    @staticmethod
    def is_auto_increment_type(type_name: str) -> bool:
        return bool(type_name) and type_name.lower().strip() in TypeRegistry.AUTO_INCREMENT_TYPES
