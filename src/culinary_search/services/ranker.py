"""Similarity ranking over a loaded catalog.

Pure functions, no I/O: score every entry against a query vector with cosine
similarity, drop entries that fail the metadata filter, sort and truncate.

Ranking rules:
    - an entry with a zero-norm embedding (or a zero query vector) scores 0
    - exact score ties keep catalog order (stable sort)
    - no minimum score: the best ``limit`` entries are returned whatever
      their similarity
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np

from culinary_search.entities import CatalogEntry, Collection, SearchResult


def normalize_filter(filter: Mapping[str, Any] | None) -> dict[str, Any]:
    """Canonical form of a metadata filter.

    Unset (``None``) attributes are dropped and keys are sorted, so two
    logically identical filters compare and serialize identically.
    """
    if not filter:
        return {}
    return {key: filter[key] for key in sorted(filter) if filter[key] is not None}


def matches_filter(metadata: Mapping[str, Any], filter: Mapping[str, Any]) -> bool:
    """Check that every filter attribute is present in ``metadata`` with an equal value.

    Comparison is exact and case-sensitive.
    """
    for key, required in filter.items():
        if key not in metadata or metadata[key] != required:
            return False
    return True


def cosine_similarities(query: Sequence[float], vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """Cosine similarity of ``query`` against each row of ``vectors``.

    Args:
        query: Query embedding
        vectors: Catalog embeddings, all of the query's length

    Returns:
        1-D array of similarities in [-1, 1]; 0 where either norm is zero

    Raises:
        ValueError: If dimensions disagree
    """
    q = np.asarray(query, dtype=np.float64)
    matrix = np.asarray(vectors, dtype=np.float64)

    if matrix.size == 0:
        return np.zeros(0, dtype=np.float64)

    if matrix.ndim != 2 or q.ndim != 1 or matrix.shape[1] != q.shape[0]:
        raise ValueError(
            f"Query embedding has {q.shape[-1] if q.ndim else 0} dimensions, "
            f"catalog has {matrix.shape[-1]}"
        )

    dots = matrix @ q
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(q)
    return np.divide(dots, norms, out=np.zeros_like(dots), where=norms > 0)


def to_percentage(similarity: float) -> float:
    """Scale a cosine similarity to a 0-100 score with one decimal.

    Rounds half up (``floor(x * 1000 + 0.5) / 10``) so the same input always
    gives the same score; values outside [0, 100] are clamped.
    """
    score = math.floor(float(similarity) * 1000 + 0.5) / 10
    return min(100.0, max(0.0, score))


def project_metadata(metadata: Mapping[str, Any], fields: Sequence[str]) -> dict[str, Any]:
    """Pick the display fields present in ``metadata``."""
    return {key: metadata[key] for key in fields if key in metadata}


def rank(
    query_vector: Sequence[float],
    entries: Sequence[CatalogEntry],
    collection: Collection,
    limit: int,
    filter: Mapping[str, Any] | None = None,
) -> list[SearchResult]:
    """Rank catalog entries against a query vector.

    Args:
        query_vector: Embedding of the query text
        entries: The collection's entries, in catalog order
        collection: Collection description (display fields)
        limit: Maximum number of results
        filter: Optional exact-match metadata filter

    Returns:
        At most ``limit`` results, highest similarity first

    Raises:
        ValueError: If the query and catalog dimensions disagree
    """
    criteria = normalize_filter(filter)
    candidates = [entry for entry in entries if matches_filter(entry.metadata, criteria)]
    if not candidates or limit <= 0:
        return []

    scores = cosine_similarities(query_vector, [entry.embedding for entry in candidates])
    order = np.argsort(-scores, kind="stable")[:limit]

    return [
        SearchResult(
            id=candidates[i].id,
            name=candidates[i].name,
            similarity=to_percentage(scores[i]),
            metadata=project_metadata(candidates[i].metadata, collection.display_fields),
        )
        for i in order
    ]
