"""Shared dataclasses and type definitions for the aggregator."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

UNTITLED = "Sin título"
NO_SUMMARY = "Sin descripción disponible"


@dataclass(frozen=True)
class NewsItem:
    """Normalized news record produced from one feed entry."""

    id: str
    title: str
    summary: str
    source: str
    category: str
    url: str
    image: Optional[str]
    published: datetime
    verified: bool = True

    def to_dict(self) -> dict:
        data = asdict(self)
        data["published"] = self.published.isoformat()
        return data


@dataclass(frozen=True)
class AggregationResult:
    """Outcome of one fan-out, merge and sort pass over the registry."""

    items: Tuple[NewsItem, ...]
    breakdown: Dict[str, int]
    fetched_at: datetime
    source_count: int
    succeeded_count: int = 0
    elapsed_seconds: float = 0.0
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.items)

    def items_as_dicts(self) -> List[dict]:
        return [item.to_dict() for item in self.items]
