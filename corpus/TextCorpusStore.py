# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: TextCorpusStore
# -----------------------------------------------------------------------------
import asyncio
import logging
from pathlib import Path
from typing import Iterable, List

from errors.CompanionErrors import StorageError
from utility.logging_utils import get_class_logger


class TextCorpusStore:
    """
    Append-only observations document (one observation per line).

    Provides:
      - read_lines(): all raw lines of the document ([] if it does not exist)
      - candidate_lines(): non-empty trimmed lines, in document order
      - append(): add observations at the end, creating the file if needed
    """

    def __init__(self, path: str | Path, *, logger: logging.Logger | None = None):
        self.path = Path(path)
        self.logger = logger or get_class_logger(self.__class__)

    async def read_lines(self) -> List[str]:
        return await asyncio.to_thread(self._read_lines_sync)

    async def candidate_lines(self) -> List[str]:
        lines = await self.read_lines()
        candidates = [line.strip() for line in lines if line.strip()]
        self.logger.debug(
            "Corpus '%s': %d lines, %d candidates", self.path, len(lines), len(candidates)
        )
        return candidates

    async def append(self, observations: Iterable[str]) -> int:
        cleaned = [o.strip() for o in observations if o and o.strip()]
        if not cleaned:
            return 0
        await asyncio.to_thread(self._append_sync, cleaned)
        self.logger.info("Appended %d observation(s) to '%s'", len(cleaned), self.path)
        return len(cleaned)

    def _read_lines_sync(self) -> List[str]:
        if not self.path.exists():
            self.logger.info("Corpus document '%s' does not exist yet", self.path)
            return []
        try:
            return self.path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise StorageError(f"Failed to read corpus '{self.path}': {e}") from e

    def _append_sync(self, lines: List[str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            prefix = ""
            if self.path.exists() and self.path.stat().st_size > 0:
                with self.path.open("rb") as f:
                    f.seek(-1, 2)
                    if f.read(1) != b"\n":
                        # new observations always start on a new line
                        prefix = "\n"
            with self.path.open("a", encoding="utf-8") as f:
                f.write(prefix + "\n".join(lines) + "\n")
        except OSError as e:
            raise StorageError(f"Failed to append to corpus '{self.path}': {e}") from e
