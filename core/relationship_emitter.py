import logging
from typing import Optional

from core.dialect import MySQLDialect
from core.export_report import ExportReport
from core.schema_ir import RelationshipIR

logger = logging.getLogger(__name__)

class RelationshipEmitter:
    """Turns a one-to-many relationship into an ALTER TABLE ... ADD FOREIGN KEY statement"""

    def __init__(self, dialect: Optional[MySQLDialect] = None,
                 report: Optional[ExportReport] = None):
        self.dialect = dialect or MySQLDialect()
        self.report = report

    def foreign_key_statement(self, primary_table: str, primary_column: str,
                              foreign_table: str, foreign_column: str) -> str:
        d = self.dialect
        return (f"ALTER TABLE {d.plain_identifier(foreign_table)} "
                f"ADD FOREIGN KEY ({d.quote_identifier(foreign_column)}) "
                f"REFERENCES {d.plain_identifier(primary_table)}({d.quote_identifier(primary_column)});")

    def emit(self, relationship: RelationshipIR) -> Optional[str]:
        """Statement for the relationship, or None when it has no column pairs.

        Composite keys are not supported: only the first column pair is used.
        """
        if not relationship.column_pairs:
            self._warn(f"Relationship {relationship.name} has no columns; skipped")
            return None

        if relationship.is_composite:
            self._warn(f"Relationship {relationship.name} spans {len(relationship.column_pairs)} columns; "
                       f"only the first pair is exported")

        primary_column, foreign_column = relationship.column_pairs[0]
        statement = self.foreign_key_statement(relationship.primary_table, primary_column,
                                               relationship.foreign_table, foreign_column)
        if self.report:
            self.report.log_relationship(
                f"{relationship.primary_table}.{primary_column} -> {relationship.foreign_table}.{foreign_column}")
        return statement

    def _warn(self, message: str):
        logger.warning(message)
        if self.report:
            self.report.log_warning(message)
