from __future__ import annotations

import asyncio

import pytest

from diprovide.pending import Pending, as_resolution, combine, join


async def _value(value: object) -> object:
    await asyncio.sleep(0)
    return value


async def _await(pending: Pending[str]) -> str:
    return await pending


class TestAsResolution:
    def test_plain_value_is_returned_unchanged(self) -> None:
        value = object()

        assert as_resolution(value) is value

    def test_pending_is_returned_unchanged(self) -> None:
        coroutine = _value(1)
        pending = Pending(coroutine)

        assert as_resolution(pending) is pending
        coroutine.close()

    def test_coroutine_is_wrapped(self) -> None:
        coroutine = _value(1)

        resolution = as_resolution(coroutine)

        assert isinstance(resolution, Pending)
        coroutine.close()


class TestPending:
    @pytest.mark.asyncio
    async def test_can_be_awaited_many_times(self) -> None:
        value = object()
        pending = Pending(_value(value))

        assert await pending is value
        assert await pending is value

    @pytest.mark.asyncio
    async def test_cancelled_awaiter_leaves_shared_task_running(self) -> None:
        release = asyncio.Event()

        async def wait_for_release() -> str:
            await release.wait()
            return "released"

        pending = Pending(wait_for_release())
        patient = asyncio.create_task(_await(pending))
        impatient = asyncio.create_task(_await(pending))
        await asyncio.sleep(0)

        impatient.cancel()
        with pytest.raises(asyncio.CancelledError):
            await impatient
        release.set()

        assert await patient == "released"
        assert await pending == "released"

    @pytest.mark.asyncio
    async def test_failure_is_raised_to_every_awaiter(self) -> None:
        async def broken() -> None:
            msg = "boom"
            raise RuntimeError(msg)

        pending = Pending(broken())

        for _ in range(2):
            with pytest.raises(RuntimeError, match="boom"):
                await pending

    @pytest.mark.asyncio
    async def test_wraps_futures(self) -> None:
        future: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        future.set_result("done")

        assert await Pending(future) == "done"

    @pytest.mark.asyncio
    async def test_repr_reflects_state(self) -> None:
        async def broken() -> None:
            msg = "boom"
            raise RuntimeError(msg)

        pending = Pending(_value("red"))
        failed = Pending(broken())

        assert repr(pending) == "Pending(<pending>)"
        await pending
        assert repr(pending) == "Pending('red')"
        with pytest.raises(RuntimeError):
            await failed
        assert repr(failed) == "Pending(<failed: RuntimeError('boom')>)"


class TestJoin:
    def test_sync_values_are_joined_synchronously(self) -> None:
        assert join([1, 2, 3]) == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_pending_values_are_joined_in_order(self) -> None:
        joined = join([Pending(_value(1)), 2, Pending(_value(3))])

        assert isinstance(joined, Pending)
        assert await joined == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_timed_out_join_does_not_cancel_its_entries(self) -> None:
        release = asyncio.Event()

        async def wait_for_release() -> str:
            await release.wait()
            return "released"

        shared = Pending(wait_for_release())

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(join([shared, "sync"]), timeout=0.01)
        release.set()

        assert await shared == "released"


class TestCombine:
    def test_sync_values_are_combined_synchronously(self) -> None:
        assert combine(1, 2, lambda left, right: left + right) == 3

    @pytest.mark.asyncio
    async def test_pending_side_makes_result_pending(self) -> None:
        combined = combine(Pending(_value(1)), 2, lambda left, right: left + right)

        assert isinstance(combined, Pending)
        assert await combined == 3
