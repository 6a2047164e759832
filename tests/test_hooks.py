"""Tests for hook chains."""

import asyncio

import pytest

from persistkit.errors import InvalidArgumentError
from persistkit.hooks import ALL_MOMENTS, HookChain, When, parse_when


class Params:
    """Minimal parameter bag recording hook effects."""

    def __init__(self):
        self.log = []


def recorder(label):
    def hook(params):
        params.log.append(label)

    return hook


def async_recorder(label, delay=0.0):
    async def hook(params):
        await asyncio.sleep(delay)
        params.log.append(label)

    return hook


@pytest.fixture
def chain():
    return HookChain()


# =============================================================================
# parse_when
# =============================================================================


class TestParseWhen:
    def test_none_selects_both_in_order(self):
        assert parse_when(None) == (When.BEFORE, When.AFTER)
        assert ALL_MOMENTS == (When.BEFORE, When.AFTER)

    def test_accepts_strings_and_members(self):
        assert parse_when("before") == (When.BEFORE,)
        assert parse_when(When.AFTER) == (When.AFTER,)

    @pytest.mark.parametrize("when", ["sometimes", "", "BEFORE", 1, ["before"]])
    def test_rejects_invalid(self, when):
        with pytest.raises(InvalidArgumentError):
            parse_when(when)


# =============================================================================
# Adding
# =============================================================================


class TestAdd:
    def test_add_before(self, chain):
        hook = recorder("a")
        chain.add(hook, "before")
        assert chain.before == [hook]
        assert chain.after == []

    def test_add_after(self, chain):
        hook = recorder("a")
        chain.add(hook, When.AFTER)
        assert chain.before == []
        assert chain.after == [hook]

    def test_add_without_when_adds_to_both(self, chain):
        hook = recorder("a")
        chain.add(hook)
        assert chain.before == [hook]
        assert chain.after == [hook]
        assert len(chain) == 2

    def test_insertion_order_preserved(self, chain):
        hooks = [recorder(i) for i in range(5)]
        for hook in hooks:
            chain.add(hook, "before")
        assert chain.before == hooks

    @pytest.mark.parametrize("hook", [None, "hook", {"a": 1}, ["a"], 42])
    def test_rejects_non_callable(self, chain, hook):
        with pytest.raises(InvalidArgumentError, match="callable"):
            chain.add(hook, "before")

    def test_rejects_invalid_when(self, chain):
        with pytest.raises(InvalidArgumentError):
            chain.add(recorder("a"), "sometimes")
        assert len(chain) == 0


# =============================================================================
# Running
# =============================================================================


class TestRun:
    @pytest.mark.asyncio
    async def test_runs_in_insertion_order(self, chain):
        for i in range(8):
            chain.add(recorder(i), "before")
        params = Params()
        await chain.run(params, "before")
        assert params.log == list(range(8))

    @pytest.mark.asyncio
    async def test_order_holds_with_async_hooks(self, chain):
        # Slower hooks first: sequential execution still keeps the order
        chain.add(async_recorder(1, delay=0.03), "before")
        chain.add(recorder(2), "before")
        chain.add(async_recorder(3, delay=0.01), "before")
        chain.add(async_recorder(4), "before")
        params = Params()
        await chain.run(params, "before")
        assert params.log == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_fail_fast(self, chain):
        error = RuntimeError("hook 3 failed")

        def failing(params):
            params.log.append(3)
            raise error

        chain.add(recorder(1), "before")
        chain.add(recorder(2), "before")
        chain.add(failing, "before")
        chain.add(recorder(4), "before")
        chain.add(recorder(5), "before")

        params = Params()
        with pytest.raises(RuntimeError) as exc_info:
            await chain.run(params, "before")
        assert exc_info.value is error
        assert params.log == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_async_failure_propagates(self, chain):
        async def failing(params):
            raise ValueError("nope")

        chain.add(failing, "after")
        chain.add(recorder("never"), "after")
        params = Params()
        with pytest.raises(ValueError, match="nope"):
            await chain.run(params, "after")
        assert params.log == []

    @pytest.mark.asyncio
    async def test_selective_running(self, chain):
        chain.add(recorder("b1"), "before")
        chain.add(recorder("a1"), "after")
        chain.add(recorder("b2"), "before")

        params = Params()
        await chain.run(params, "before")
        assert params.log == ["b1", "b2"]

        params = Params()
        await chain.run(params, "after")
        assert params.log == ["a1"]

    @pytest.mark.asyncio
    async def test_run_without_when_runs_before_then_after(self, chain):
        chain.add(recorder("a1"), "after")
        chain.add(recorder("b1"), "before")
        chain.add(recorder("both"))
        params = Params()
        await chain.run(params)
        assert params.log == ["b1", "both", "a1", "both"]

    @pytest.mark.asyncio
    async def test_run_rejects_invalid_when(self, chain):
        chain.add(recorder("b1"), "before")
        params = Params()
        with pytest.raises(InvalidArgumentError):
            await chain.run(params, "during")
        assert params.log == []

    @pytest.mark.asyncio
    async def test_run_empty_chain(self, chain):
        params = Params()
        await chain.run(params)
        assert params.log == []

    @pytest.mark.asyncio
    async def test_hook_added_during_run_waits_for_next_run(self, chain):
        def adding(params):
            params.log.append("adding")
            chain.add(recorder("late"), "before")

        chain.add(adding, "before")
        params = Params()
        await chain.run(params, "before")
        assert params.log == ["adding"]
        assert len(chain.before) == 2

    @pytest.mark.asyncio
    async def test_concurrent_runs_use_their_own_params(self, chain):
        chain.add(async_recorder("x", delay=0.01), "before")
        chain.add(recorder("y"), "before")
        first, second = Params(), Params()
        await asyncio.gather(chain.run(first, "before"), chain.run(second, "before"))
        assert first.log == ["x", "y"]
        assert second.log == ["x", "y"]


# =============================================================================
# Flushing
# =============================================================================


class TestFlush:
    @pytest.fixture
    def full_chain(self, chain):
        chain.add(recorder("b"), "before")
        chain.add(recorder("a"), "after")
        chain.add(recorder("both"))
        return chain

    def test_flush_all(self, full_chain):
        full_chain.flush()
        assert full_chain.before == []
        assert full_chain.after == []

    def test_flush_before_only(self, full_chain):
        full_chain.flush("before")
        assert full_chain.before == []
        assert len(full_chain.after) == 2

    def test_flush_after_only(self, full_chain):
        full_chain.flush(When.AFTER)
        assert len(full_chain.before) == 2
        assert full_chain.after == []

    def test_flush_invalid_when(self, full_chain):
        with pytest.raises(InvalidArgumentError):
            full_chain.flush("never")
        assert len(full_chain) == 4

    def test_flush_empty_chain(self, chain):
        chain.flush()
        assert len(chain) == 0
