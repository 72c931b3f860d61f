"""Example script finding the shortest connection between two people."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from neo4j import AsyncGraphDatabase

# Add parent directory to path to import film_graph package
sys.path.append(str(Path(__file__).parent.parent))

from film_graph import config
from film_graph.errors import FilmGraphError
from film_graph.graph.executor import GraphExecutor
from film_graph.path.finder import PathFinder


def format_triple(index: int, triple) -> str:
    """Format one step of a connection for display.

    Args:
        index: Step number, starting at 1
        triple: PathTriple to format

    Returns:
        Formatted string representation
    """
    person = triple.person.properties.get("name", "Unknown")
    project = triple.project.properties.get("title", "Unknown")
    relationship = triple.relationship.properties
    role = relationship.get("character") or relationship.get("job") or "?"

    line = f"{index}. {person} ({role}) in {project}"
    show = getattr(triple.project, "parent_show", None)
    if show:
        line += f" [{show.properties.get('name', 'Unknown show')}]"
    return line


async def main(args):
    """Run one path query and print the result."""
    filters = json.loads(args.filters) if args.filters else None

    driver = AsyncGraphDatabase.driver(
        config.NEO4J_URI,
        auth=(config.NEO4J_USER, config.NEO4J_PASSWORD)
    )
    try:
        executor = GraphExecutor(
            driver,
            database=config.NEO4J_DATABASE,
            timeout=config.QUERY_TIMEOUT_SECONDS
        )
        finder = PathFinder(executor)
        triples = await finder.find_path(args.first, args.second, filters)
    except FilmGraphError as e:
        print(f"Error: {e}")
        return 1
    finally:
        await driver.close()

    if not triples:
        print("No connection found.")
        return 0

    for i, triple in enumerate(triples, 1):
        print(format_triple(i, triple))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("first", type=int, help="person_id to start from")
    parser.add_argument("second", type=int, help="person_id to reach")
    parser.add_argument(
        "--filters",
        help='JSON filters, e.g. \'{"movie": {"budget_GT": 1000000}}\''
    )
    config.configure_logging()
    sys.exit(asyncio.run(main(parser.parse_args())))
