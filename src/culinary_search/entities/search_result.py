"""Search result domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SearchResult:
    """A single ranked search hit.

    Attributes:
        id: Identifier of the matched catalog entry
        name: Display name of the matched entry
        similarity: Cosine similarity as a percentage (0-100, one decimal)
        metadata: Display subset of the entry's metadata
    """

    id: str
    name: str
    similarity: float
    metadata: dict[str, Any] = field(default_factory=dict)
