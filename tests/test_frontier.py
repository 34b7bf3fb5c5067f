# File: tests/test_frontier.py
import asyncio

import pytest

from webcrawler.crawler.frontier import Frontier
from webcrawler.crawler.models import FrontierEntry


@pytest.mark.asyncio()
async def test_push_pop_and_join():
    frontier = Frontier()
    entry = FrontierEntry("http://a.test/", 0)
    assert frontier.push(entry)
    assert len(frontier) == 1

    popped = await frontier.pop()
    assert popped == entry
    assert frontier.in_flight == 1

    join = asyncio.create_task(frontier.join())
    await asyncio.sleep(0)
    assert not join.done()
    frontier.task_done()
    await asyncio.wait_for(join, timeout=1.0)


@pytest.mark.asyncio()
async def test_pop_waits_for_push():
    frontier = Frontier()
    consumer = asyncio.create_task(frontier.pop())
    await asyncio.sleep(0.01)
    assert not consumer.done()

    frontier.push(FrontierEntry("http://a.test/", 1))
    entry = await asyncio.wait_for(consumer, timeout=1.0)
    assert entry.depth == 1


@pytest.mark.asyncio()
async def test_close_releases_every_consumer():
    frontier = Frontier()
    consumers = [asyncio.create_task(frontier.pop()) for _ in range(5)]
    await asyncio.sleep(0.01)

    frontier.close()
    results = await asyncio.wait_for(asyncio.gather(*consumers), timeout=1.0)
    assert results == [None] * 5
    assert await frontier.pop() is None


@pytest.mark.asyncio()
async def test_push_after_close_is_a_noop():
    frontier = Frontier()
    frontier.close()
    assert not frontier.push(FrontierEntry("http://a.test/", 0))
    assert len(frontier) == 0


@pytest.mark.asyncio()
async def test_close_abandons_pending_entries():
    frontier = Frontier()
    for i in range(3):
        frontier.push(FrontierEntry(f"http://a.test/{i}", 0))
    assert frontier.close() == 3
    assert frontier.close() == 0
    await asyncio.wait_for(frontier.join(), timeout=1.0)


@pytest.mark.asyncio()
async def test_join_waits_for_work_pushed_by_consumers():
    frontier = Frontier()
    frontier.push(FrontierEntry("http://a.test/", 0))

    parent = await frontier.pop()
    frontier.push(FrontierEntry("http://a.test/child", parent.depth + 1))
    frontier.task_done()

    join = asyncio.create_task(frontier.join())
    await asyncio.sleep(0.01)
    assert not join.done()

    await frontier.pop()
    frontier.task_done()
    await asyncio.wait_for(join, timeout=1.0)


@pytest.mark.asyncio()
async def test_cancelled_consumer_does_not_lose_entries():
    frontier = Frontier()
    victim = asyncio.create_task(frontier.pop())
    survivor = asyncio.create_task(frontier.pop())
    await asyncio.sleep(0.01)

    victim.cancel()
    frontier.push(FrontierEntry("http://a.test/", 0))
    entry = await asyncio.wait_for(survivor, timeout=1.0)
    assert entry.url == "http://a.test/"


def test_task_done_too_many_times():
    with pytest.raises(ValueError):
        Frontier().task_done()


def test_entry_rejects_negative_depth():
    with pytest.raises(ValueError):
        FrontierEntry("http://a.test/", -1)
