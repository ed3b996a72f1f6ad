"""
Multi-source data context of a session.

The store holds the named data sources a user has uploaded, keyed by name in
upload order, plus the running count of records ingested during the session.

Record accounting is additive: every ingestion adds its record count to the
running total, including re-ingestion of a name that is already loaded (the
content is replaced, the count is added again), and eviction never decrements
it. This mirrors the behavior users already see in the product and is kept as
is until product decides otherwise.
"""

import logging
from collections import OrderedDict
from typing import Dict, List

from shared.models import DataSource

logger = logging.getLogger(__name__)


class DataSourceNotFoundError(KeyError):
    """Raised by `DataContextStore.get` for a name that is not loaded."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Data source not found: {self.name}"


class DataContextStore:
    """
    Named data sources in insertion order with an additive record counter.

    Replacing an existing name keeps its original position in `list_names`.
    """

    def __init__(self) -> None:
        self._sources: "OrderedDict[str, DataSource]" = OrderedDict()
        self._records_ingested = 0

    @property
    def records_ingested(self) -> int:
        """Sum of every `record_count` ever passed to `ingest`."""
        return self._records_ingested

    def ingest(self, name: str, raw_content: str, record_count: int) -> bool:
        """
        Add or replace a data source.

        Args:
            name (str): Unique key of the source, typically the file name.
            raw_content (str): Opaque tabular text as uploaded.
            record_count (int): Number of records in `raw_content` as counted by
                the uploader. Added to the running total unconditionally.

        Returns:
            bool: True if an existing source was replaced.

        Raises:
            ValueError: If `name` is empty or `record_count` is negative.
        """
        if not name:
            raise ValueError("Data source name must not be empty")
        if isinstance(record_count, bool) or not isinstance(record_count, int) or record_count < 0:
            raise ValueError(f"record_count must be a non-negative integer, got {record_count!r}")

        replaced = name in self._sources
        self._sources[name] = DataSource(name=name, raw_content=raw_content, record_count=record_count)
        self._records_ingested += record_count

        logger.info(
            "Ingested data source %s (%d records, replaced=%s, total=%d)",
            name, record_count, replaced, self._records_ingested,
        )
        return replaced

    def evict(self, name: str) -> bool:
        """
        Remove a data source if present. Evicting an absent name is a no-op.

        Returns:
            bool: True if a source was removed.
        """
        removed = self._sources.pop(name, None) is not None
        if removed:
            logger.info("Evicted data source %s", name)
        else:
            logger.debug("Evict requested for absent data source %s", name)
        return removed

    def list_names(self) -> List[str]:
        return list(self._sources.keys())

    def get(self, name: str) -> str:
        """
        Return the raw content of a source.

        Raises:
            DataSourceNotFoundError: If `name` is not loaded.
        """
        try:
            return self._sources[name].raw_content
        except KeyError:
            raise DataSourceNotFoundError(name) from None

    def snapshot(self) -> Dict[str, str]:
        """
        Return a name -> raw content mapping of the current contents.

        A fresh dict is built on every call; callers hand it to the analysis
        engine at call time.
        """
        return {name: source.raw_content for name, source in self._sources.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def __len__(self) -> int:
        return len(self._sources)
