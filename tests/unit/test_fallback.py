"""Unit tests for the fallback chain."""

from unittest.mock import AsyncMock

import pytest

from metasearch.config_schema import SearchConfig
from metasearch.services.fallback import (
    FallbackChain,
    RetryingSourceStrategy,
    SingleAttemptStrategy,
    create_default_chain,
)


@pytest.mark.unit
class TestRetryingSourceStrategy:
    """Tests for RetryingSourceStrategy."""

    @pytest.mark.asyncio
    async def test_stops_at_first_non_empty_attempt(self, fake_source, raw, instant_sleep):
        hit = [raw("https://a.com/")]
        source = fake_source("duckduckgo", [[], hit, hit])
        strategy = RetryingSourceStrategy(source, attempts=3, sleep=instant_sleep)

        assert await strategy.run("q") == hit
        assert len(source.calls) == 2

    @pytest.mark.asyncio
    async def test_linear_backoff(self, fake_source):
        sleep = AsyncMock()
        source = fake_source("duckduckgo", [[]])
        strategy = RetryingSourceStrategy(source, attempts=3, base_delay=1.5, sleep=sleep)

        assert await strategy.run("q") == []
        assert len(source.calls) == 3
        assert [c.args[0] for c in sleep.await_args_list] == [3.0, 4.5]

    def test_invalid_attempts(self, fake_source):
        with pytest.raises(ValueError):
            RetryingSourceStrategy(fake_source("duckduckgo"), attempts=0)


@pytest.mark.unit
class TestFallbackChain:
    """Tests for FallbackChain."""

    @pytest.mark.asyncio
    async def test_returns_first_non_empty(self, fake_source, raw):
        first = fake_source("brave", [[]])
        second = fake_source("qwant", [[raw("https://q.com/", tag="qwant")]])
        third = fake_source("other", [[raw("https://o.com/")]])
        chain = FallbackChain(
            [SingleAttemptStrategy(s) for s in (first, second, third)]
        )

        results, name = await chain.run("q")
        assert [r.url for r in results] == ["https://q.com/"]
        assert name == "Fake-qwant"
        assert third.calls == []

    @pytest.mark.asyncio
    async def test_all_empty(self, fake_source):
        chain = FallbackChain([SingleAttemptStrategy(fake_source("brave", [[]]))])
        assert await chain.run("q") == ([], None)

    @pytest.mark.asyncio
    async def test_raising_strategy_is_skipped(self, fake_source, raw):
        broken = fake_source("brave", [RuntimeError("boom")])
        working = fake_source("qwant", [[raw("https://q.com/")]])
        chain = FallbackChain([SingleAttemptStrategy(broken), SingleAttemptStrategy(working)])

        results, name = await chain.run("q")
        assert len(results) == 1
        assert name == "Fake-qwant"

    @pytest.mark.asyncio
    async def test_empty_chain(self):
        assert await FallbackChain([]).run("q") == ([], None)


@pytest.mark.unit
class TestDefaultChain:
    """Tests for create_default_chain."""

    @pytest.mark.asyncio
    async def test_primary_retried_then_others_once(self, fake_source, instant_sleep):
        sources = [fake_source(tag, [[]]) for tag in ("duckduckgo", "brave", "qwant")]
        chain = create_default_chain(sources, SearchConfig(), sleep=instant_sleep)

        assert await chain.run("q") == ([], None)
        assert [len(s.calls) for s in sources] == [3, 1, 1]

    def test_attempts_from_config(self, fake_source):
        sources = [fake_source("duckduckgo")]
        chain = create_default_chain(sources, SearchConfig(fallback_attempts=5))
        assert chain.strategies[0].attempts == 5

    def test_no_sources(self):
        assert create_default_chain([]).strategies == []
