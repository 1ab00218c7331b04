"""Extraction providers: the source of candidate flight records.

The real provider (web search + LLM chain) lives outside this package. The
evaluation only needs something that turns a natural-language query into a
``FlightRecord``; this module defines that interface plus providers that
replay and record outputs through an ``ExtractionStore``.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping

from ..evaluation.types import FlightRecord
from ..exceptions import ExtractionProviderError
from .extraction_store import ExtractionStore

logger = logging.getLogger(__name__)


class ExtractionProvider(ABC):
    """Abstract base class for extraction providers."""

    name: str = "provider"

    @abstractmethod
    def extract(self, query: str) -> FlightRecord:
        """Produce a flight record for a query.

        Args:
            query: e.g. "Las Vegas to Albuquerque on 16-12-2025 with Southwest"

        Returns:
            FlightRecord, any field possibly None

        Raises:
            ExtractionProviderError: If no record can be produced
        """
        pass


class RecordedExtractionProvider(ExtractionProvider):
    """Replays previously stored extraction outputs."""

    name = "recorded"

    def __init__(self, store: ExtractionStore):
        self.store = store

    def extract(self, query: str) -> FlightRecord:
        record = self.store.load(query)
        if record is None:
            raise ExtractionProviderError(
                f"No recorded extraction for query: {query}",
                {"query": query, "store_dir": str(self.store.store_dir)},
            )
        return record


class StaticExtractionProvider(ExtractionProvider):
    """Serves records from an in-memory mapping of query -> record."""

    name = "static"

    def __init__(self, records: Mapping[str, FlightRecord | dict]):
        self.records = {
            query: FlightRecord.model_validate(record) for query, record in records.items()
        }

    def extract(self, query: str) -> FlightRecord:
        try:
            return self.records[query]
        except KeyError:
            raise ExtractionProviderError(
                f"No record for query: {query}", {"query": query}
            ) from None


class CallableExtractionProvider(ExtractionProvider):
    """Adapts any ``query -> record`` callable (e.g. an external chain client)."""

    name = "callable"

    def __init__(self, func: Callable[[str], FlightRecord | dict], name: str | None = None):
        self.func = func
        if name:
            self.name = name

    def extract(self, query: str) -> FlightRecord:
        try:
            result = self.func(query)
        except ExtractionProviderError:
            raise
        except Exception as e:
            raise ExtractionProviderError(
                f"Extraction failed: {e}", {"query": query, "provider": self.name}
            ) from e
        try:
            return FlightRecord.model_validate(result)
        except ValueError as e:
            raise ExtractionProviderError(
                f"Provider returned a malformed record: {e}",
                {"query": query, "provider": self.name},
            ) from e


class CachingExtractionProvider(ExtractionProvider):
    """Wraps a provider, serving stored outputs and storing fresh ones."""

    def __init__(self, provider: ExtractionProvider, store: ExtractionStore, force_refresh: bool = False):
        self.provider = provider
        self.store = store
        self.force_refresh = force_refresh
        self.name = f"cached-{provider.name}"

    def extract(self, query: str) -> FlightRecord:
        if not self.force_refresh:
            cached = self.store.load(query)
            if cached is not None:
                logger.info(f"Using stored extraction for {query!r}")
                return cached

        record = self.provider.extract(query)
        self.store.save(query, record, provider=self.provider.name)
        return record


def create_provider(kind: str = "recorded", **kwargs) -> ExtractionProvider:
    """Factory function to create an extraction provider.

    Args:
        kind: "recorded" (needs ``store``), "static" (needs ``records``) or
            "callable" (needs ``func``)
        **kwargs: Arguments passed to the provider constructor

    Returns:
        Configured ExtractionProvider

    Raises:
        ValueError: If kind is unsupported

    Examples:
        >>> provider = create_provider("recorded", store=ExtractionStore("outputs"))
    """
    kind = kind.lower()

    if kind == "recorded":
        return RecordedExtractionProvider(**kwargs)
    elif kind == "static":
        return StaticExtractionProvider(**kwargs)
    elif kind == "callable":
        return CallableExtractionProvider(**kwargs)
    else:
        raise ValueError(
            f"Unsupported provider: {kind}. "
            f"Supported providers: 'recorded', 'static', 'callable'"
        )
