"""
Destination dialect conventions: identifier quoting and literal escaping.

Only MySQL/MariaDB is targeted. String escaping is delegated to PyMySQL so
the generated literals match what the server-side client library would send.
"""

import re
from dataclasses import dataclass

from pymysql.converters import escape_string

_BARE_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_$]*$')

@dataclass(frozen=True)
class MySQLDialect:
    """MySQL identifier and literal conventions"""
    identifier_quote: str = '`'
    string_quote: str = "'"
    null_literal: str = 'NULL'
    false_literal: str = 'False'
    date_format: str = '%Y-%m-%d'
    datetime_format: str = '%Y-%m-%d %H:%M:%S'

    def quote_identifier(self, identifier: str) -> str:
        """Always quote, doubling any embedded quote character"""
        q = self.identifier_quote
        return f"{q}{identifier.replace(q, q + q)}{q}"

    def plain_identifier(self, identifier: str) -> str:
        """Leave simple names bare; quote names with spaces or punctuation"""
        if _BARE_IDENTIFIER.match(identifier):
            return identifier
        return self.quote_identifier(identifier)

    def quote_string(self, value: str) -> str:
        return f"{self.string_quote}{escape_string(value)}{self.string_quote}"

    def hex_literal(self, value: bytes) -> str:
        return f"X'{bytes(value).hex().upper()}'"
