#!/usr/bin/env python3
"""
Source catalog interface.

The exporter only talks to the source database through this class:
table/relationship snapshots fetched once, and one scoped row cursor per
table. Connection and credential handling live in the concrete adapters
(see extensions/plugins/access_adapter.py).
"""

from contextlib import contextmanager
from typing import Any, Iterator, List, Sequence

from core.schema_ir import RelationshipIR, TableIR

Row = Sequence[Any]

class SourceCatalog:
    """Base class for source catalogs"""

    description = "unknown source"

    def get_tables(self) -> List[TableIR]:
        """Tables in catalog enumeration order - to be implemented by subclasses"""
        raise NotImplementedError("Subclasses must implement get_tables")

    def get_relationships(self) -> List[RelationshipIR]:
        """Relationships in catalog order - to be implemented by subclasses"""
        raise NotImplementedError("Subclasses must implement get_relationships")

    @contextmanager
    def open_rows(self, table: TableIR) -> Iterator[Iterator[Row]]:
        """Yield an iterator over the table's rows, columns in declared order.

        Implementations must release the underlying cursor when the block
        exits, including when iteration raises.
        """
        raise NotImplementedError("Subclasses must implement open_rows")
        yield  # pragma: no cover

    def close(self):
        """Close connections - to be implemented by subclasses"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
