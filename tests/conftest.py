#!/usr/bin/env python3
"""
mdb2sql Test Configuration - PyTest Configuration and Fixtures

Provides an in-memory source catalog and the sample schemas shared by the
emitter, exporter and CLI tests.
"""

import os
import sys
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.export_config import ExportConfig
from core.catalog import SourceCatalog
from core.schema_ir import ColumnIR, ColumnProperty, IndexIR, RelationshipIR, TableIR
from core.type_registry import SourceType


class InMemoryCatalog(SourceCatalog):
    """Catalog backed by plain Python lists; tracks cursor usage"""

    description = "memory://test"

    def __init__(self, tables: List[TableIR], rows: Optional[Dict[str, List[Sequence]]] = None,
                 relationships: Optional[List[RelationshipIR]] = None,
                 fail_after: Optional[Dict[str, int]] = None):
        self.tables = tables
        self.rows = rows or {}
        self.relationships = relationships or []
        self.fail_after = fail_after or {}
        self.open_cursors = 0
        self.cursors_opened = []
        self.closed = False

    def get_tables(self):
        return list(self.tables)

    def get_relationships(self):
        return list(self.relationships)

    @contextmanager
    def open_rows(self, table):
        assert self.open_cursors == 0, "only one cursor may be open at a time"
        self.open_cursors += 1
        self.cursors_opened.append(table.name)
        try:
            yield self._iterate(table.name)
        finally:
            self.open_cursors -= 1

    def _iterate(self, name):
        for i, row in enumerate(self.rows.get(name, [])):
            if name in self.fail_after and i >= self.fail_after[name]:
                raise IOError(f"disk error while reading {name}")
            yield row

    def close(self):
        self.closed = True


def person_table(name_size: int = 50) -> TableIR:
    return TableIR(
        name="Person",
        columns=[
            ColumnIR("id", SourceType.LONG,
                     properties=ColumnProperty.AUTO_INCREMENT | ColumnProperty.FIXED, raw_type="COUNTER"),
            ColumnIR("Name", SourceType.TEXT, size=name_size,
                     properties=ColumnProperty.ALLOW_ZERO_LENGTH, raw_type="VARCHAR"),
            ColumnIR("Active", SourceType.BOOLEAN, properties=ColumnProperty.FIXED, raw_type="BIT"),
        ],
        indexes=[IndexIR("PrimaryKey", ("id",))],
    )


@pytest.fixture
def person():
    return person_table()


@pytest.fixture
def config():
    return ExportConfig(
        excluded_data_tables=("AuditLog",),
        date_only_columns=("BirthDate",),
    )


@pytest.fixture
def order_schema():
    """Order / LineItem / Employee schema with a self-reference and a system table"""
    order = TableIR(
        name="Order",
        columns=[
            ColumnIR("id", SourceType.LONG,
                     properties=ColumnProperty.AUTO_INCREMENT | ColumnProperty.FIXED, raw_type="COUNTER"),
            ColumnIR("Placed", SourceType.DATE, raw_type="DATETIME"),
        ],
        indexes=[IndexIR("PrimaryKey", ("id",))],
    )
    line_item = TableIR(
        name="LineItem",
        columns=[
            ColumnIR("id", SourceType.LONG,
                     properties=ColumnProperty.AUTO_INCREMENT | ColumnProperty.FIXED, raw_type="COUNTER"),
            ColumnIR("order_id", SourceType.LONG, raw_type="INTEGER"),
            ColumnIR("Price", SourceType.CURRENCY, raw_type="CURRENCY"),
        ],
        indexes=[IndexIR("PrimaryKey", ("id",)), IndexIR("order_id", ("order_id",))],
    )
    employee = TableIR(
        name="Employee",
        columns=[
            ColumnIR("id", SourceType.LONG, raw_type="INTEGER"),
            ColumnIR("manager_id", SourceType.LONG, raw_type="INTEGER"),
            ColumnIR("BirthDate", SourceType.DATE, raw_type="DATETIME"),
        ],
        indexes=[IndexIR("PrimaryKey", ("id",))],
    )
    msys = TableIR(name="MSysObjects", columns=[ColumnIR("Id", SourceType.LONG)], is_system=True)
    relationships = [
        RelationshipIR("OrderLineItem", "Order", "LineItem", (("id", "order_id"),)),
        RelationshipIR("EmployeeManager", "Employee", "Employee", (("id", "manager_id"),)),
        RelationshipIR("MSysNavPaneLink", "MSysObjects", "Order", (("Id", "id"),)),
    ]
    rows = {
        "Order": [(1, datetime(2024, 3, 1, 9, 30, 0))],
        "LineItem": [(1, 1, "12,5"), (2, 1, 3.0)],
        "Employee": [],
    }
    return [order, line_item, employee, msys], rows, relationships


@pytest.fixture
def memory_catalog(order_schema):
    tables, rows, relationships = order_schema
    return InMemoryCatalog(tables, rows, relationships)
