import logging
from pathlib import Path
from typing import Iterator, List

from core.errors import OutputError

logger = logging.getLogger(__name__)

STATEMENT_SEPARATOR = "\n\n"

class StatementDocument:
    """Ordered buffer of emitted SQL statements, flushed once at the end of a run."""

    def __init__(self):
        self._statements: List[str] = []

    def append(self, statement: str):
        self._statements.append(statement)

    @property
    def statements(self) -> List[str]:
        return list(self._statements)

    def __len__(self) -> int:
        return len(self._statements)

    def __iter__(self) -> Iterator[str]:
        return iter(self._statements)

    def render(self) -> str:
        return STATEMENT_SEPARATOR.join(self._statements)

    def write(self, path: Path) -> Path:
        """Write the whole document in one go"""
        path = Path(path)
        try:
            path.write_text(self.render(), encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Failed to write {path}: {e}", {'path': str(path)}) from e
        logger.info(f"Wrote {len(self._statements)} statements to {path}")
        return path
