#!/usr/bin/env python3
"""
mdb2sql Error Hierarchy
Canonical exception classes for the export pipeline.
"""

from enum import Enum

class ErrorCode(Enum):
    UNKNOWN = "UNKNOWN_ERROR"
    CATALOG_ACCESS = "CATALOG_ACCESS_ERROR"
    ROW_CURSOR = "ROW_CURSOR_ERROR"
    OUTPUT = "OUTPUT_ERROR"
    CONFIG = "CONFIG_ERROR"

class ExportError(Exception):
    """Base class for all mdb2sql exceptions"""
    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

class CatalogAccessError(ExportError):
    """Raised when the source database cannot be opened or enumerated"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.CATALOG_ACCESS, details)

class RowCursorError(ExportError):
    """Raised when reading rows of a table fails mid-export"""
    def __init__(self, message: str, table: str = None, rows_read: int = None):
        details = {'table': table, 'rows_read': rows_read}
        super().__init__(message, ErrorCode.ROW_CURSOR, details)

class OutputError(ExportError):
    """Raised when the statement document cannot be written"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.OUTPUT, details)

class ConfigError(ExportError):
    """Raised for invalid configuration values"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.CONFIG, details)

class UnmappedTypeWarning(UserWarning):
    """A column type with no explicit mapping fell back to the default clause"""
