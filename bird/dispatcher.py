"""
The single funnel for every daemon query.

cache lookup -> rate limit admission -> birdc -> parser -> cache store

Failures are never cached, so the next call for the same command
retries naturally. Concurrent cold misses for one command are not
deduplicated; both may run birdc and the last store wins.
"""

import logging
from typing import Callable, Union

from bird.cache import QueryCache
from bird.errors import BirdUnreachableError
from bird.executor import BirdExecutor
from bird.parsed import QueryResult
from bird.ratelimit import RateLimiter

logger = logging.getLogger(__name__)

Parser = Callable[[Union[bytes, str]], dict]


class QueryDispatcher:
    """Runs and parses birdc queries through the shared cache and limiter."""

    def __init__(self, cache: QueryCache, rate_limiter: RateLimiter, executor: BirdExecutor):
        self.cache = cache
        self.rate_limiter = rate_limiter
        self.executor = executor

    def run_and_parse(self, cmd: str, parser: Parser) -> QueryResult:
        """
        Answer a query from cache or by running birdc.

        Args:
            cmd: query after `show`; also the cache key
            parser: raw output -> parsed dict

        Returns:
            QueryResult; from_cache is True only for cache hits
        """
        entry, found = self.cache.lookup(cmd)
        if found:
            return QueryResult.ok(entry, from_cache=True)

        if not self.rate_limiter.admit():
            return QueryResult.not_admitted()

        try:
            output = self.executor.run(cmd)
        except BirdUnreachableError as e:
            logger.debug(f"Query '{cmd}' failed, not caching: {e}")
            return QueryResult.unreachable()

        parsed = parser(output)
        self.cache.store(cmd, parsed)
        return QueryResult.ok(parsed, from_cache=False)
