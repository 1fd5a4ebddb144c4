# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Updated: 2026-03-09
# Description: EmbeddingIndex
# -----------------------------------------------------------------------------
from __future__ import annotations

import asyncio
import json
import logging
import math
import os
import tempfile
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from embedding.EmbeddingProvider import EmbeddingProvider
from errors.CompanionErrors import StorageError
from observation.Observation import IndexDocument, Observation, ObservationMetadata
from utility.logging_utils import get_class_logger


@dataclass
class RefreshResult:
    """Outcome of one rebuild of the index."""
    mode: str
    total: int = 0
    embedded: int = 0
    reused: int = 0
    failed: int = 0
    removed: int = 0
    failed_texts: List[str] = field(default_factory=list)
    finished_at: Optional[str] = None

    @property
    def stored(self) -> int:
        return self.embedded + self.reused

    def to_dict(self) -> dict:
        out = asdict(self)
        out["stored"] = self.stored
        return out


def unique_candidates(lines: Iterable[str]) -> List[str]:
    """Trimmed, non-empty, de-duplicated lines in first-appearance order."""
    return list(dict.fromkeys(line.strip() for line in lines if line and line.strip()))


class EmbeddingIndex:
    """
    Persisted mapping observation text -> embedding, stored as a single JSON
    array document.

    Owns:
      - load(): strict schema validation of the document
      - rebuild(): diff against the persisted text set, embed only new lines
        (or every line when incremental=False), then persist
      - persist(): atomic whole-document overwrite
    """

    def __init__(
            self,
            path: str | Path,
            provider: EmbeddingProvider,
            *,
            concurrency: int = 8,
            expected_dim: Optional[int] = None,
            call_timeout: Optional[float] = None,
            logger: logging.Logger | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.path = Path(path)
        self.provider = provider
        self.concurrency = concurrency
        self.expected_dim = expected_dim or None
        self.call_timeout = call_timeout
        self.logger = logger or get_class_logger(self.__class__)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------
    async def load(self) -> List[Observation]:
        raw = await asyncio.to_thread(self._read_bytes)
        if raw is None:
            self.logger.info("Index document '%s' not found; treating as empty", self.path)
            return []

        try:
            records = IndexDocument.validate_json(raw)
        except ValidationError as e:
            self.logger.error("Index document '%s' is malformed: %s", self.path, e)
            raise StorageError(f"Malformed index document '{self.path}': {e}") from e

        dims = {len(r.embedding) for r in records}
        if len(dims) > 1:
            raise StorageError(
                f"Malformed index document '{self.path}': mixed embedding dimensions {sorted(dims)}"
            )

        observations = [Observation.from_record(r) for r in records]
        self.logger.debug("Loaded %d observations from '%s'", len(observations), self.path)
        return observations

    def _read_bytes(self) -> Optional[bytes]:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read index document '{self.path}': {e}") from e

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------
    async def persist(self, observations: Sequence[Observation]) -> None:
        payload = self.serialize(observations)
        await asyncio.to_thread(self._atomic_write, payload)
        self.logger.info("Persisted %d observations to '%s'", len(observations), self.path)

    @staticmethod
    def serialize(observations: Sequence[Observation]) -> bytes:
        docs = [o.to_record().to_json_dict() for o in observations]
        return json.dumps(docs, indent=2, ensure_ascii=False).encode("utf-8")

    def _atomic_write(self, payload: bytes) -> None:
        tmp_path: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise StorageError(f"Failed to write index document '{self.path}': {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

    # ------------------------------------------------------------------
    # Rebuild
    # ------------------------------------------------------------------
    async def rebuild(
            self,
            lines: Iterable[str],
            metadata: Optional[Mapping[str, ObservationMetadata]] = None,
            *,
            incremental: bool = True,
    ) -> RefreshResult:
        """
        Reconcile the index with the given corpus lines and persist it.

        Incremental mode only calls the provider for text that is not
        already indexed. A line whose embedding fails is skipped and counted;
        everything that succeeded is still persisted.
        """
        texts = unique_candidates(lines)
        metadata = metadata or {}

        existing: Dict[str, Observation] = {}
        # provenance survives a full rebuild: only the vectors are recomputed
        previous_metadata: Dict[str, ObservationMetadata] = {}
        try:
            for obs in await self.load():
                existing[obs.text] = obs
                previous_metadata[obs.text] = obs.metadata
        except StorageError as e:
            if incremental:
                self.logger.warning("Incremental rebuild impossible (%s); falling back to full rebuild", e)
            incremental = False
        if not incremental:
            existing = {}

        result = RefreshResult(mode="incremental" if incremental else "full", total=len(texts))

        if self.expected_dim is not None:
            stale = [t for t, o in existing.items() if o.dimension != self.expected_dim]
            for t in stale:
                del existing[t]
            if stale:
                self.logger.info("Re-embedding %d observation(s) with a stale dimension", len(stale))

        wanted = set(texts)
        result.removed = sum(1 for t in existing if t not in wanted)

        to_embed = [t for t in texts if t not in existing]
        self.logger.info(
            "Rebuilding index (%s): %d candidates, %d to embed, %d unchanged",
            result.mode,
            len(texts),
            len(to_embed),
            len(texts) - len(to_embed),
        )

        vectors = await self._embed_all(to_embed)

        dim = self.expected_dim
        if dim is None:
            reused_dims = [existing[t].dimension for t in texts if t in existing]
            new_dims = [len(v) for v in vectors.values()]
            dim = (reused_dims or new_dims or [None])[0]

        observations: List[Observation] = []
        for text in texts:
            hint = metadata.get(text)
            if text in existing:
                observations.append(existing[text].with_metadata(hint))
                result.reused += 1
                continue

            vec = vectors.get(text)
            if vec is None:
                result.failed += 1
                result.failed_texts.append(text)
                continue
            if len(vec) != dim:
                self.logger.warning(
                    "Skipping '%s': embedding dimension %d does not match index dimension %s",
                    text[:80],
                    len(vec),
                    dim,
                )
                result.failed += 1
                result.failed_texts.append(text)
                continue

            metadata_for_text = hint or previous_metadata.get(text) or ObservationMetadata()
            observations.append(Observation(text=text, embedding=vec, metadata=metadata_for_text))
            result.embedded += 1

        # join before persist: every provider call above has resolved
        await self.persist(observations)

        result.finished_at = datetime.now(timezone.utc).isoformat()
        if result.failed:
            self.logger.warning(
                "Index rebuild finished with %d failure(s): stored=%d embedded=%d reused=%d removed=%d",
                result.failed,
                result.stored,
                result.embedded,
                result.reused,
                result.removed,
            )
        else:
            self.logger.info(
                "Index rebuild complete: stored=%d embedded=%d reused=%d removed=%d",
                result.stored,
                result.embedded,
                result.reused,
                result.removed,
            )
        return result

    async def _embed_all(self, texts: Sequence[str]) -> Dict[str, List[float]]:
        if not texts:
            return {}

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _one(text: str) -> Tuple[str, Optional[List[float]]]:
            async with semaphore:
                try:
                    if self.call_timeout is not None:
                        vec = await asyncio.wait_for(self.provider.embed(text), timeout=self.call_timeout)
                    else:
                        vec = await self.provider.embed(text)
                    vec = [float(x) for x in vec]
                    if not vec or not all(math.isfinite(x) for x in vec):
                        raise ValueError("provider returned an empty or non-finite vector")
                    return text, vec
                except asyncio.TimeoutError:
                    self.logger.warning("Embedding '%s' exceeded %.1fs; skipping", text[:80], self.call_timeout)
                except Exception as e:
                    # one failing line must not abort the batch
                    self.logger.warning("Embedding '%s' failed; skipping: %s", text[:80], e)
                return text, None

        pairs = await asyncio.gather(*(_one(t) for t in texts))
        return {t: v for t, v in pairs if v is not None}
