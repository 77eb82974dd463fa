from dataclasses import dataclass, field
from enum import Flag, auto
from typing import List, Optional, Tuple

from core.type_registry import SourceType

PRIMARY_KEY_INDEX = "PrimaryKey"

class ColumnProperty(Flag):
    """Access field attributes relevant to the export"""
    NONE = 0
    FIXED = auto()
    AUTO_INCREMENT = auto()
    ALLOW_ZERO_LENGTH = auto()
    REQUIRED = auto()

@dataclass(frozen=True)
class ColumnIR:
    """Column snapshot as read from the source catalog"""
    name: str
    source_type: SourceType
    size: Optional[int] = None
    properties: ColumnProperty = ColumnProperty.NONE
    raw_type: str = ""  # Type label reported by the catalog, kept for warnings

    def has(self, prop: ColumnProperty) -> bool:
        return (self.properties & prop) == prop

    @property
    def is_auto_increment(self) -> bool:
        return self.has(ColumnProperty.AUTO_INCREMENT | ColumnProperty.FIXED)

@dataclass(frozen=True)
class IndexIR:
    name: str
    columns: Tuple[str, ...] = ()

@dataclass
class TableIR:
    """Table snapshot as read from the source catalog"""
    name: str
    columns: List[ColumnIR] = field(default_factory=list)
    indexes: List[IndexIR] = field(default_factory=list)
    is_system: bool = False

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def primary_key_column(self) -> Optional[str]:
        """First column of the first index literally named 'PrimaryKey'"""
        for index in self.indexes:
            if index.name == PRIMARY_KEY_INDEX:
                return index.columns[0] if index.columns else None
        return None

@dataclass(frozen=True)
class RelationshipIR:
    """One-to-many relationship; column pairs are (primary column, foreign column)"""
    name: str
    primary_table: str
    foreign_table: str
    column_pairs: Tuple[Tuple[str, str], ...] = ()

    @property
    def is_self_referencing(self) -> bool:
        return self.primary_table == self.foreign_table

    @property
    def is_composite(self) -> bool:
        return len(self.column_pairs) > 1
