import asyncio

import pytest

from film_graph.path import TvShow
from film_graph.path.decomposer import PathDecomposer
from film_graph.path.enrichment import ShowEnricher

from graph_builders import (
    FakeExecutor, build_path, cast, episode_node, movie_node, person_node
)

SHOWS = {
    1399: {"tv_id": 1399, "name": "Game of Thrones", "poster_path": "/got.jpg"},
    1396: {"tv_id": 1396, "name": "Breaking Bad", "poster_path": "/bb.jpg"},
}


def triples_for(nodes):
    edges = [cast() for _ in range(len(nodes) - 1)]
    return PathDecomposer().decompose(build_path(nodes, edges))


@pytest.mark.asyncio
async def test_episode_gets_parent_show():
    executor = FakeExecutor(shows=SHOWS)
    triples = triples_for([person_node(1), episode_node("e1", show_id=1399), person_node(2)])

    await ShowEnricher(executor).enrich(triples)

    show = triples[0].project.parent_show
    assert isinstance(show, TvShow)
    assert show.properties["name"] == "Game of Thrones"
    assert executor.lookups == [1399]


@pytest.mark.asyncio
async def test_each_episode_is_looked_up_once():
    executor = FakeExecutor(shows=SHOWS)
    triples = triples_for([
        person_node(1), episode_node("e1", show_id=1399), person_node(2),
        episode_node("e2", show_id=1396), person_node(3)
    ])

    await ShowEnricher(executor).enrich(triples)

    assert sorted(executor.lookups) == [1396, 1399]
    assert triples[3].project.parent_show.properties["name"] == "Breaking Bad"


@pytest.mark.asyncio
async def test_movies_are_not_looked_up():
    executor = FakeExecutor(shows=SHOWS)
    triples = triples_for([person_node(1), movie_node(10), person_node(2)])

    await ShowEnricher(executor).enrich(triples)

    assert executor.lookups == []


@pytest.mark.asyncio
async def test_dangling_show_reference_attaches_none():
    executor = FakeExecutor(shows=SHOWS)
    triples = triples_for([
        person_node(1), episode_node("e1", show_id=404), person_node(2),
        episode_node("e2", show_id=1396), person_node(3)
    ])

    await ShowEnricher(executor).enrich(triples)

    assert triples[0].project.is_enriched
    assert triples[0].project.parent_show is None
    assert triples[2].project.parent_show is not None


@pytest.mark.asyncio
async def test_failed_lookup_degrades_to_none():
    executor = FakeExecutor(shows=SHOWS, failing_shows=[1399])
    triples = triples_for([
        person_node(1), episode_node("e1", show_id=1399), person_node(2),
        episode_node("e2", show_id=1396), person_node(3)
    ])

    await ShowEnricher(executor).enrich(triples)

    assert triples[0].project.parent_show is None
    assert triples[2].project.parent_show.properties["tv_id"] == 1396


@pytest.mark.asyncio
async def test_episode_without_show_reference_skips_lookup():
    executor = FakeExecutor(shows=SHOWS)
    triples = triples_for([person_node(1), episode_node("e1"), person_node(2)])

    await ShowEnricher(executor).enrich(triples)

    assert executor.lookups == []
    assert triples[0].project.is_enriched
    assert triples[0].project.to_dict()["parent_show"] is None


@pytest.mark.asyncio
async def test_legacy_show_reference_is_used():
    executor = FakeExecutor(shows=SHOWS)
    legacy = episode_node("e1", tv_show_id=1396)
    triples = triples_for([person_node(1), legacy, person_node(2)])

    await ShowEnricher(executor).enrich(triples)

    assert executor.lookups == [1396]


class SlowExecutor(FakeExecutor):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.active = 0
        self.max_active = 0

    async def execute_lookup(self, tv_id):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        await asyncio.sleep(0.01)
        self.active -= 1
        return await super().execute_lookup(tv_id)


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrency,expected", [(8, 2), (1, 1)])
async def test_lookups_run_concurrently_up_to_limit(concurrency, expected):
    executor = SlowExecutor(shows=SHOWS)
    triples = triples_for([
        person_node(1), episode_node("e1", show_id=1399), person_node(2),
        episode_node("e2", show_id=1396), person_node(3)
    ])

    await ShowEnricher(executor, concurrency=concurrency).enrich(triples)

    assert executor.max_active == expected
    assert all(t.project.is_enriched for t in triples)


class BrokenExecutor(FakeExecutor):
    """Fails one show with an unexpected error while another lookup is slow."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.finished = []

    async def execute_lookup(self, tv_id):
        if tv_id == 1399:
            raise RuntimeError("driver crashed")
        await asyncio.sleep(0.05)
        self.finished.append(tv_id)
        return await super().execute_lookup(tv_id)


@pytest.mark.asyncio
async def test_unexpected_error_waits_for_other_lookups():
    executor = BrokenExecutor(shows=SHOWS)
    triples = triples_for([
        person_node(1), episode_node("e1", show_id=1399), person_node(2),
        episode_node("e2", show_id=1396), person_node(3)
    ])

    with pytest.raises(RuntimeError):
        await ShowEnricher(executor).enrich(triples)

    assert executor.finished == [1396]
    assert triples[2].project.parent_show.properties["name"] == "Breaking Bad"
