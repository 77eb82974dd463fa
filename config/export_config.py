#!/usr/bin/env python3
"""
Export Configuration for mdb2sql
Handles exclusion rules, dialect options, paths and secrets centrally.

Priority (highest to lowest):
1. Explicit arguments (CLI flags / keyword overrides)
2. Environment variables (MDB2SQL_*)
3. .env file (loaded into os.environ, never overriding exported vars)
4. JSON config file
5. ExportConfig dataclass defaults
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from core.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "MDB2SQL_"
DEFAULT_ODBC_DRIVER = "{Microsoft Access Driver (*.mdb, *.accdb)}"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TUPLE_FIELDS = ('excluded_prefixes', 'excluded_markers', 'excluded_names',
                 'excluded_data_tables', 'date_only_columns')

@dataclass
class ExportConfig:
    """mdb2sql configuration settings"""

    # Table exclusion rules (prefixes/markers compared case-insensitively)
    excluded_prefixes: Tuple[str, ...] = ("msys",)
    excluded_markers: Tuple[str, ...] = ("~",)
    excluded_names: Tuple[str, ...] = ("Name AutoCorrect Log",)

    # Tables whose rows are never exported (audit/log tables)
    excluded_data_tables: Tuple[str, ...] = ("AuditLog", "ChangeLog")

    # Date/time columns exported as DATE instead of DATETIME
    date_only_columns: Tuple[str, ...] = ("BirthDate", "DateOfBirth", "Birthday")

    # None means "ask the operator"
    export_data: Optional[bool] = None

    # Output
    output_dir: Path = Path("./export")
    output_file: Optional[str] = None
    write_report: bool = False

    # Source access
    odbc_driver: str = DEFAULT_ODBC_DRIVER
    password: Optional[str] = field(default=None, repr=False)
    fetch_size: int = 500

    # Runtime settings
    log_level: str = "INFO"

    def __post_init__(self):
        for name in _TUPLE_FIELDS:
            setattr(self, name, _as_tuple(getattr(self, name)))

        self.output_dir = Path(self.output_dir)
        self.log_level = str(self.log_level).upper()

        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {self.log_level}", {'allowed': LOG_LEVELS})
        try:
            fetch_size = int(self.fetch_size)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"fetch_size must be an integer, got {self.fetch_size!r}") from e
        if fetch_size <= 0:
            raise ConfigError(f"fetch_size must be positive, got {self.fetch_size}")
        self.fetch_size = fetch_size

    def output_path(self, source_path: str) -> Path:
        """Destination file: explicit name, else <source stem>.sql"""
        name = self.output_file or f"{Path(source_path).stem}.sql"
        return self.output_dir / name

    def get_safe_dict(self) -> Dict[str, Any]:
        """Configuration as dict without sensitive values"""
        return {
            'excluded_prefixes': list(self.excluded_prefixes),
            'excluded_markers': list(self.excluded_markers),
            'excluded_names': list(self.excluded_names),
            'excluded_data_tables': list(self.excluded_data_tables),
            'date_only_columns': list(self.date_only_columns),
            'export_data': self.export_data,
            'output_dir': str(self.output_dir),
            'output_file': self.output_file,
            'write_report': self.write_report,
            'odbc_driver': self.odbc_driver,
            'password_configured': bool(self.password),
            'fetch_size': self.fetch_size,
            'log_level': self.log_level,
        }

def _as_tuple(value) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(',') if part.strip())
    return tuple(value)

def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ('1', 'true', 'yes', 'y', 'on'):
        return True
    if lowered in ('0', 'false', 'no', 'n', 'off'):
        return False
    raise ConfigError(f"Invalid boolean value: {value!r}")

def _field_names():
    return {f.name for f in fields(ExportConfig)}

def read_json_config(config_file: Path) -> Dict[str, Any]:
    """Read settings from a JSON object file; unknown keys are rejected"""
    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read config file {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a JSON object")

    unknown = set(data) - _field_names()
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    return data

def load_env_file(env_file: Path):
    """Load environment variables from a .env file.

    Only sets values for keys not already in os.environ,
    ensuring exported env vars take precedence over .env file.
    """
    try:
        with open(env_file, 'r') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#'):
                    if '=' in line:
                        key, value = line.split('=', 1)
                        key = key.strip()
                        if key not in os.environ:
                            os.environ[key] = value.strip()
    except OSError as e:
        logger.warning(f"Could not load .env file: {e}")

def read_env() -> Dict[str, Any]:
    """Collect MDB2SQL_* variables into config values"""
    values: Dict[str, Any] = {}
    for name in _field_names():
        raw = os.environ.get(ENV_PREFIX + name.upper())
        if raw is None:
            continue
        if name in ('export_data', 'write_report'):
            values[name] = _parse_bool(raw)
        elif name == 'fetch_size':
            try:
                values[name] = int(raw)
            except ValueError as e:
                raise ConfigError(f"Invalid {ENV_PREFIX}FETCH_SIZE: {raw!r}") from e
        else:
            values[name] = raw
    return values

def load_config(config_file: Optional[Path] = None,
                env_file: Optional[Path] = None,
                **overrides) -> ExportConfig:
    """Build an ExportConfig from file, environment and explicit overrides.

    Overrides whose value is None are ignored so unset CLI flags fall
    through to the lower-priority sources.
    """
    values: Dict[str, Any] = {}

    if config_file is not None:
        values.update(read_json_config(Path(config_file)))

    env_file = Path(env_file) if env_file is not None else Path.cwd() / '.env'
    if env_file.exists():
        load_env_file(env_file)
    values.update(read_env())

    unknown = set(overrides) - _field_names()
    if unknown:
        raise ConfigError(f"Unknown config options: {', '.join(sorted(unknown))}")
    values.update({k: v for k, v in overrides.items() if v is not None})

    return ExportConfig(**values)
