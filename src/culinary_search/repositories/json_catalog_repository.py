"""JSON document implementation of CatalogStore.

Each collection is one JSON document named ``<collection>.json``, an array of
objects shaped like::

    {"id": "11007", "metadata": {"name": "Margarita", ...}, "embedding": [0.12, ...]}

The location is either a local directory or an ``http(s)://`` base URL.
Parsing is strict: one malformed entry fails the whole load.
"""

import asyncio
import json
import logging
import math
from pathlib import Path
from typing import Any

import httpx

from culinary_search.config import settings
from culinary_search.entities import CatalogEntry
from culinary_search.exceptions import CatalogUnavailable

logger = logging.getLogger(__name__)


class JsonCatalogRepository:
    """Reads catalog collections from JSON documents.

    This class satisfies the CatalogStore protocol through structural
    typing - no explicit inheritance needed.

    Nothing is retained between calls: every ``load`` re-reads the source,
    so catalog updates made by the ingestion pipeline are picked up on the
    next uncached search.
    """

    def __init__(
        self,
        location: str | Path | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the catalog repository.

        Args:
            location: Directory or base URL holding the documents.
                     Defaults to settings.vector_db_path.
            timeout: Upper bound for one load, in seconds.
                    Defaults to settings.catalog_timeout.
            transport: Optional httpx transport for URL locations (used by tests).
        """
        self._location = str(location or settings.vector_db_path)
        self._timeout = timeout or settings.catalog_timeout
        self._transport = transport

    @classmethod
    def create(
        cls,
        location: str | Path | None = None,
        timeout: float | None = None,
    ) -> "JsonCatalogRepository":
        """Factory method to create JsonCatalogRepository with defaults.

        Args:
            location: Catalog location. If None, uses settings.
            timeout: Load timeout in seconds. If None, uses settings.

        Returns:
            Configured JsonCatalogRepository
        """
        return cls(location=location, timeout=timeout)

    @property
    def location(self) -> str:
        """Get the catalog location."""
        return self._location

    @property
    def is_remote(self) -> bool:
        """Whether the catalog is fetched over HTTP."""
        return self._location.startswith(("http://", "https://"))

    async def load(self, collection: str) -> list[CatalogEntry]:
        """Load every entry of a collection.

        Args:
            collection: Collection name

        Returns:
            All entries, in document order

        Raises:
            CatalogUnavailable: If the document cannot be read within the
                timeout, is not valid JSON, or has a malformed entry
        """
        try:
            document = await asyncio.wait_for(self._read(collection), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise CatalogUnavailable(
                f"Loading {collection} timed out after {self._timeout}s"
            ) from e
        except (OSError, httpx.HTTPError) as e:
            raise CatalogUnavailable(f"Failed to load {collection} database: {e}") from e
        except ValueError as e:
            # Invalid JSON or a document that is not UTF-8
            raise CatalogUnavailable(f"Failed to parse {collection} database: {e}") from e

        entries = parse_entries(collection, document)
        logger.debug("Loaded %d %s from %s", len(entries), collection, self._location)
        return entries

    async def _read(self, collection: str) -> Any:
        """Fetch and decode a collection document; decoding runs off the event loop."""
        if self.is_remote:
            url = f"{self._location.rstrip('/')}/{collection}.json"
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                content = response.content
            return await asyncio.to_thread(_decode, content)

        path = Path(self._location) / f"{collection}.json"
        return await asyncio.to_thread(_read_file, path)


def _decode(content: bytes) -> Any:
    return json.loads(content.decode("utf-8"))


def _read_file(path: Path) -> Any:
    return _decode(path.read_bytes())


def parse_entries(collection: str, document: Any) -> list[CatalogEntry]:
    """Convert a decoded catalog document into entries.

    Args:
        collection: Collection name (for error messages)
        document: Decoded JSON value

    Returns:
        Parsed entries, in document order

    Raises:
        CatalogUnavailable: If the document is not an array of well-formed
            entries sharing one embedding dimension
    """
    if not isinstance(document, list):
        raise CatalogUnavailable(f"{collection} database must be a JSON array")

    entries: list[CatalogEntry] = []
    seen_ids: set[str] = set()
    dimension: int | None = None

    for position, item in enumerate(document):
        entry = _parse_entry(collection, position, item)

        if entry.id in seen_ids:
            raise CatalogUnavailable(f"{collection}[{position}]: duplicate id {entry.id!r}")
        seen_ids.add(entry.id)

        if dimension is None:
            dimension = entry.dimension
        elif entry.dimension != dimension:
            raise CatalogUnavailable(
                f"{collection}[{position}]: embedding has {entry.dimension} dimensions, "
                f"expected {dimension}"
            )

        entries.append(entry)

    return entries


def _parse_entry(collection: str, position: int, item: Any) -> CatalogEntry:
    where = f"{collection}[{position}]"

    if not isinstance(item, dict):
        raise CatalogUnavailable(f"{where}: entry must be an object")

    entry_id = item.get("id")
    # bool is an int subclass
    if isinstance(entry_id, bool) or not isinstance(entry_id, (str, int)) or entry_id == "":
        raise CatalogUnavailable(f"{where}: missing or invalid 'id'")

    metadata = item.get("metadata")
    if not isinstance(metadata, dict):
        raise CatalogUnavailable(f"{where}: missing 'metadata' object")

    name = metadata.get("name")
    if not isinstance(name, str):
        raise CatalogUnavailable(f"{where}: metadata has no 'name'")

    embedding = item.get("embedding")
    if not isinstance(embedding, list) or not embedding:
        raise CatalogUnavailable(f"{where}: missing 'embedding' array")

    vector = []
    for value in embedding:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise CatalogUnavailable(f"{where}: embedding must contain only finite numbers")
        vector.append(float(value))

    return CatalogEntry(
        id=str(entry_id),
        name=name,
        embedding=tuple(vector),
        metadata=dict(metadata),
    )
