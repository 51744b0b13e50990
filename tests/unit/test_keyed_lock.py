import asyncio

import pytest

from src.application.keyed_lock import KeyedLock


@pytest.mark.asyncio
async def test_same_key_is_serialized():
    locks = KeyedLock()
    active = 0
    peak = 0

    async def worker():
        nonlocal active, peak
        async with locks.hold(("img", 100)):
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

    await asyncio.gather(*(worker() for _ in range(5)))
    assert peak == 1
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_different_keys_run_concurrently():
    locks = KeyedLock()
    inside = asyncio.Event()
    release = asyncio.Event()

    async def first():
        async with locks.hold("a"):
            inside.set()
            await release.wait()

    async def second():
        await inside.wait()
        async with locks.hold("b"):
            release.set()

    await asyncio.wait_for(asyncio.gather(first(), second()), timeout=1)
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_entry_released_after_exception():
    locks = KeyedLock()
    with pytest.raises(RuntimeError):
        async with locks.hold("k"):
            raise RuntimeError("boom")
    assert len(locks) == 0
