"""Tests for model_panel/gate.py."""

import asyncio

import pytest

from model_panel.gate import ConcurrencyGate


def test_gate_rejects_non_positive_permits():
    with pytest.raises(ValueError):
        ConcurrencyGate(0)


async def test_acquire_below_limit_does_not_block():
    gate = ConcurrencyGate(2)
    await gate.acquire()
    await gate.acquire()
    assert gate.available == 0
    assert gate.in_use == 2
    gate.release()
    gate.release()
    assert gate.available == 2


@pytest.mark.parametrize("permits,tasks", [(1, 5), (2, 8), (3, 12), (5, 5)])
async def test_never_more_than_permits_inside(permits, tasks):
    gate = ConcurrencyGate(permits)
    active = 0
    peak = 0

    async def work() -> None:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1

    await asyncio.gather(*(gate.run(work) for _ in range(tasks)))

    assert peak == min(permits, tasks)
    assert gate.available == permits
    assert gate.waiting == 0


async def test_waiters_are_served_in_fifo_order():
    gate = ConcurrencyGate(1)
    await gate.acquire()
    order: list[int] = []

    async def waiter(i: int) -> None:
        async with gate.permit():
            order.append(i)

    tasks = []
    for i in range(5):
        tasks.append(asyncio.create_task(waiter(i)))
        await asyncio.sleep(0)  # let each task enqueue before the next
    assert gate.waiting == 5

    gate.release()
    await asyncio.gather(*tasks)

    assert order == [0, 1, 2, 3, 4]
    assert gate.available == 1


async def test_release_hands_permit_to_waiter_without_incrementing():
    gate = ConcurrencyGate(1)
    await gate.acquire()
    task = asyncio.create_task(gate.acquire())
    await asyncio.sleep(0)

    gate.release()
    await task

    # Permit moved straight to the waiter
    assert gate.available == 0
    gate.release()
    assert gate.available == 1


async def test_permit_released_when_guarded_function_raises():
    gate = ConcurrencyGate(2)

    async def boom() -> None:
        raise RuntimeError("boom")

    for _ in range(3):
        with pytest.raises(RuntimeError, match="boom"):
            await gate.run(boom)

    assert gate.available == 2


async def test_run_returns_function_result():
    gate = ConcurrencyGate(1)

    async def answer() -> int:
        return 42

    assert await gate.run(answer) == 42


async def test_cancelled_waiter_leaves_queue():
    gate = ConcurrencyGate(1)
    await gate.acquire()
    task = asyncio.create_task(gate.acquire())
    await asyncio.sleep(0)
    assert gate.waiting == 1

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert gate.waiting == 0
    gate.release()
    assert gate.available == 1


async def test_cancel_after_handoff_passes_permit_on():
    gate = ConcurrencyGate(1)
    await gate.acquire()
    task = asyncio.create_task(gate.acquire())
    await asyncio.sleep(0)

    gate.release()      # permit handed to the queued task
    task.cancel()       # ...which is cancelled before it resumes
    with pytest.raises(asyncio.CancelledError):
        await task

    assert gate.available == 1


async def test_permit_released_when_holder_is_cancelled():
    gate = ConcurrencyGate(1)
    started = asyncio.Event()

    async def slow() -> None:
        started.set()
        await asyncio.sleep(10)

    task = asyncio.create_task(gate.run(slow))
    await started.wait()
    assert gate.available == 0

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert gate.available == 1


def test_release_without_acquire_raises():
    gate = ConcurrencyGate(1)
    with pytest.raises(RuntimeError):
        gate.release()
