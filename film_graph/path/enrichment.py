"""Attach parent-show metadata to episodes in a path result."""

import asyncio
import logging
from typing import List

from . import PathTriple, TvEpisode, TvShow
from ..errors import LookupFailed

logger = logging.getLogger(__name__)


class ShowEnricher:
    """Looks up the parent show of every episode, concurrently.

    A missing show or a failed lookup leaves `parent_show` as None for that
    episode only; the rest of the result is unaffected.
    """

    def __init__(self, executor, concurrency: int = 8):
        """Initialize the enricher.

        Args:
            executor: Object providing `async execute_lookup(tv_id)`
            concurrency: Maximum number of lookups in flight at once
        """
        self.executor = executor
        self.concurrency = max(1, concurrency)

    async def _attach(self, episode: TvEpisode, semaphore: asyncio.Semaphore):
        reference = episode.show_reference
        if reference is None:
            episode.parent_show = None
            return

        try:
            async with semaphore:
                record = await self.executor.execute_lookup(reference)
        except LookupFailed as e:
            logger.warning("Parent show lookup for episode %s failed: %s", episode.episode_id, e)
            episode.parent_show = None
            return

        if record is None:
            logger.warning(
                "Episode %s references missing show %s", episode.episode_id, reference
            )
            episode.parent_show = None
            return
        episode.parent_show = TvShow(record)

    async def enrich(self, triples: List[PathTriple]) -> List[PathTriple]:
        """Resolve `parent_show` for every distinct episode in the triples.

        Returns:
            The same triples, with all episodes enriched

        Raises:
            Any error other than LookupFailed, once every lookup has settled
        """
        episodes: List[TvEpisode] = []
        for triple in triples:
            project = triple.project
            if isinstance(project, TvEpisode) and not any(project is e for e in episodes):
                episodes.append(project)

        if episodes:
            semaphore = asyncio.Semaphore(self.concurrency)
            # Every lookup settles before an unexpected error propagates
            outcomes = await asyncio.gather(
                *(self._attach(e, semaphore) for e in episodes),
                return_exceptions=True
            )
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome
            logger.debug("Enriched %d episode(s)", len(episodes))
        return triples
