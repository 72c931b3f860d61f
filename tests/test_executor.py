from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from neo4j.exceptions import Neo4jError, ServiceUnavailable

from film_graph.errors import LookupFailed, TraversalFailed
from film_graph.graph.executor import GraphExecutor, SHOW_LOOKUP_QUERY
from film_graph.query.builder import PathQueryBuilder


class FakeDate:
    """Mimics neo4j.time.Date."""

    def __init__(self, value):
        self.value = value

    def to_native(self):
        return self.value


class FakeEntity:
    def __init__(self, element_id, properties, labels=(), type=None):
        self.element_id = element_id
        self.labels = frozenset(labels)
        self.type = type
        self._properties = properties

    def items(self):
        return self._properties.items()


class FakePath:
    def __init__(self, nodes, relationships):
        self.nodes = nodes
        self.relationships = relationships


def make_driver(result=None, error=None):
    session = MagicMock()
    session.run = AsyncMock(return_value=result, side_effect=error)
    driver = MagicMock()
    driver.session.return_value.__aenter__.return_value = session
    driver.session.return_value.__aexit__.return_value = False
    return driver, session


def single_result(record):
    result = MagicMock()
    result.single = AsyncMock(return_value=record)
    return result


@pytest.fixture
def request_1_2():
    return PathQueryBuilder().build(1, 2, {"movie": {"budget_GT": 10}})


@pytest.mark.asyncio
async def test_traversal_converts_path_in_traversal_order(request_1_2):
    p1 = FakeEntity("4:p1", {"person_id": 1, "birthday": FakeDate(date(1958, 7, 8))}, ["Person"])
    m = FakeEntity("4:m", {"movie_id": 10}, ["Movie"])
    p2 = FakeEntity("4:p2", {"person_id": 2}, ["Person"])
    r1 = FakeEntity("5:r1", {"character": "Jack"}, type="CAST_FOR")
    r1.start_node, r1.end_node = p1, m
    r2 = FakeEntity("5:r2", {"character": "Rose"}, type="CAST_FOR")
    r2.start_node, r2.end_node = p2, m
    driver, session = make_driver(single_result({"p": FakePath([p1, m, p2], [r1, r2])}))

    path = await GraphExecutor(driver, timeout=5).execute_traversal(request_1_2)

    assert len(path) == 2
    first, second = path.segments
    assert first.start.properties["birthday"] == date(1958, 7, 8)
    assert first.start.labels == frozenset({"Person"})
    assert second.start.element_id == "4:m"
    assert second.relationship.start_element_id == "4:p2"
    assert second.relationship.end_element_id == "4:m"
    assert [n.element_id for n in path.nodes] == ["4:p1", "4:m", "4:p2"]

    query, params = session.run.call_args.args
    assert query.text == request_1_2.cypher
    assert query.timeout == 5
    assert params == request_1_2.parameters


@pytest.mark.asyncio
async def test_traversal_without_record_is_no_path(request_1_2):
    driver, _ = make_driver(single_result(None))

    assert await GraphExecutor(driver).execute_traversal(request_1_2) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [Neo4jError("syntax"), ServiceUnavailable("down")])
async def test_traversal_errors_are_wrapped_and_session_released(request_1_2, error):
    driver, _ = make_driver(error=error)

    with pytest.raises(TraversalFailed) as excinfo:
        await GraphExecutor(driver).execute_traversal(request_1_2)

    assert excinfo.value.__cause__ is error
    driver.session.return_value.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
async def test_lookup_returns_show_properties():
    show = FakeEntity("4:s", {"tv_id": "1399", "name": "Game of Thrones"}, ["TvShow"])
    driver, session = make_driver(single_result({"s": show}))

    record = await GraphExecutor(driver, database="films").execute_lookup(1399)

    assert record == {"tv_id": "1399", "name": "Game of Thrones"}
    query, params = session.run.call_args.args
    assert query.text == SHOW_LOOKUP_QUERY
    assert params == {"tv_id": 1399}
    driver.session.assert_called_once_with(database="films")


@pytest.mark.asyncio
async def test_missing_show_is_none():
    driver, _ = make_driver(single_result(None))

    assert await GraphExecutor(driver).execute_lookup(404) is None


@pytest.mark.asyncio
async def test_lookup_errors_are_wrapped():
    driver, _ = make_driver(error=ServiceUnavailable("down"))

    with pytest.raises(LookupFailed) as excinfo:
        await GraphExecutor(driver).execute_lookup(1399)
    assert excinfo.value.key == 1399


@pytest.mark.asyncio
async def test_suggest_names_returns_people():
    people = [
        {"p": FakeEntity("4:1", {"name": "Kevin Bacon", "popularity": 20.5}, ["Person"])},
        {"p": FakeEntity("4:2", {"name": "Kevin Costner", "popularity": 18.0}, ["Person"])},
    ]
    result = MagicMock()
    result.__aiter__.return_value = people
    driver, session = make_driver(result)

    names = await GraphExecutor(driver).suggest_names("kevin", limit=2)

    assert [p["name"] for p in names] == ["Kevin Bacon", "Kevin Costner"]
    assert session.run.call_args.args[1] == {"name": "kevin", "limit": 2}
