#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
mdb2sql Core Package Initialization
Exports the export pipeline components for clean imports
"""

from .errors import (
    ErrorCode,
    ExportError,
    CatalogAccessError,
    RowCursorError,
    OutputError,
    ConfigError,
    UnmappedTypeWarning,
)
from .type_registry import SourceType, TypeRegistry
from .schema_ir import ColumnIR, ColumnProperty, IndexIR, RelationshipIR, TableIR
from .dialect import MySQLDialect
from .type_mapper import TypeMapper
from .value_formatter import ValueFormatter
from .catalog import SourceCatalog
from .statement_document import StatementDocument
from .export_report import ExportReport
from .table_emitter import TableEmitter
from .relationship_emitter import RelationshipEmitter

__all__ = [
    # Errors
    'ErrorCode',
    'ExportError',
    'CatalogAccessError',
    'RowCursorError',
    'OutputError',
    'ConfigError',
    'UnmappedTypeWarning',

    # Types and model
    'SourceType',
    'TypeRegistry',
    'ColumnIR',
    'ColumnProperty',
    'IndexIR',
    'RelationshipIR',
    'TableIR',

    # Components
    'MySQLDialect',
    'TypeMapper',
    'ValueFormatter',
    'SourceCatalog',
    'StatementDocument',
    'ExportReport',
    'TableEmitter',
    'RelationshipEmitter',
]

__version__ = '1.0.0'
