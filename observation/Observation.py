# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Updated: 2026-02-21
# Description: Observation
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field, replace
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, TypeAdapter, field_validator

FiniteFloat = Annotated[float, Field(strict=True, allow_inf_nan=False)]


@dataclass(frozen=True)
class ObservationMetadata:
    """Optional provenance carried by the richer observation schema."""
    date: Optional[str] = None
    source: Optional[str] = None
    source_quote: Optional[str] = None
    tags: Optional[List[str]] = None

    def is_empty(self) -> bool:
        return not (self.date or self.source or self.source_quote or self.tags)


@dataclass(frozen=True)
class Observation:
    """
    A short factual statement about the user plus its embedding.
    `text` is the identity key inside the index.
    """
    text: str
    embedding: List[float]
    metadata: ObservationMetadata = field(default_factory=ObservationMetadata)

    @property
    def dimension(self) -> int:
        return len(self.embedding)

    def with_metadata(self, metadata: Optional[ObservationMetadata]) -> "Observation":
        if metadata is None:
            return self
        return replace(self, metadata=metadata)

    def to_record(self) -> "ObservationRecord":
        return ObservationRecord(
            text=self.text,
            embedding=list(self.embedding),
            date=self.metadata.date,
            source=self.metadata.source,
            source_quote=self.metadata.source_quote,
            tags=list(self.metadata.tags) if self.metadata.tags is not None else None,
        )

    @classmethod
    def from_record(cls, record: "ObservationRecord") -> "Observation":
        return cls(
            text=record.text,
            embedding=list(record.embedding),
            metadata=ObservationMetadata(
                date=record.date,
                source=record.source,
                source_quote=record.source_quote,
                tags=list(record.tags) if record.tags is not None else None,
            ),
        )

    def short_preview(self, n: int = 80) -> str:
        """Return a compact text preview for logging/debugging."""
        return (self.text[:n] + "...") if len(self.text) > n else self.text


class ObservationRecord(BaseModel):
    """Strict on-disk schema of one entry of the index document."""
    model_config = ConfigDict(extra="forbid")

    text: StrictStr
    embedding: List[FiniteFloat] = Field(..., min_length=1)
    date: Optional[StrictStr] = None
    source: Optional[StrictStr] = None
    source_quote: Optional[StrictStr] = None
    tags: Optional[List[StrictStr]] = None

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("text must not be empty")
        return v

    def to_json_dict(self) -> Dict[str, Any]:
        # Baseline documents carry only text + embedding
        return self.model_dump(exclude_none=True)


IndexDocument = TypeAdapter(List[ObservationRecord])
