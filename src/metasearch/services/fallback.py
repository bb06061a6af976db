"""Fallback chain tried when the parallel fan-out returns nothing.

The chain is an ordered list of strategies. Each strategy wraps one source;
the chain runs them one after another and stops at the first that returns
results.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from metasearch.config_schema import SearchConfig
from metasearch.core.models import RawResult
from metasearch.sources.base import SearchSource

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class FallbackStrategy(ABC):
    """One step of the fallback chain."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def run(self, query: str) -> List[RawResult]:
        """Return results for the query, or [] if this step found nothing."""
        pass


class SingleAttemptStrategy(FallbackStrategy):
    """Query a source exactly once."""

    def __init__(self, source: SearchSource):
        self.source = source

    @property
    def name(self) -> str:
        return self.source.name

    async def run(self, query: str) -> List[RawResult]:
        return await self.source.fetch(query)


class RetryingSourceStrategy(FallbackStrategy):
    """Query a source up to ``attempts`` times with linear backoff.

    Attempt n (1-based, n > 1) first waits ``n * base_delay`` seconds.
    """

    def __init__(
        self,
        source: SearchSource,
        attempts: int = 3,
        base_delay: float = 1.5,
        sleep: SleepFn = asyncio.sleep,
    ):
        if attempts < 1:
            raise ValueError(f"attempts must be at least 1, got {attempts}")
        self.source = source
        self.attempts = attempts
        self.base_delay = base_delay
        self._sleep = sleep

    @property
    def name(self) -> str:
        return f"{self.source.name} (x{self.attempts})"

    async def run(self, query: str) -> List[RawResult]:
        for attempt in range(1, self.attempts + 1):
            if attempt > 1:
                delay = attempt * self.base_delay
                logger.info(
                    f"{self.source.name} retry attempt {attempt} in {delay:.1f}s"
                )
                await self._sleep(delay)

            results = await self.source.fetch(query)
            if results:
                return results
        return []


class FallbackChain:
    """Ordered fallback strategies; stops at the first non-empty result."""

    def __init__(self, strategies: Sequence[FallbackStrategy]):
        self.strategies = list(strategies)

    async def run(self, query: str) -> Tuple[List[RawResult], Optional[str]]:
        """Run strategies in order.

        Returns:
            Tuple of (results, name of the strategy that produced them).
            ``([], None)`` when every strategy came back empty.
        """
        for strategy in self.strategies:
            logger.info(f"Fallback: trying {strategy.name} for {query!r}")
            try:
                results = await strategy.run(query)
            except Exception as e:
                logger.error(f"Fallback strategy {strategy.name} failed: {e}")
                continue
            if results:
                logger.info(
                    f"Fallback {strategy.name} returned {len(results)} results"
                )
                return results, strategy.name
        return [], None


def create_default_chain(
    sources: Sequence[SearchSource],
    config: Optional[SearchConfig] = None,
    sleep: SleepFn = asyncio.sleep,
) -> FallbackChain:
    """Retry the first source with backoff, then try the rest once each."""
    config = config or SearchConfig()
    if not sources:
        return FallbackChain([])

    primary, *rest = sources
    strategies: List[FallbackStrategy] = [
        RetryingSourceStrategy(
            primary,
            attempts=config.fallback_attempts,
            base_delay=config.fallback_base_delay,
            sleep=sleep,
        )
    ]
    strategies.extend(SingleAttemptStrategy(source) for source in rest)
    return FallbackChain(strategies)
