"""
BIRD routing daemon query pipeline.

Queries run through one dispatcher:
- cache.py (time-bounded cache of parsed results)
- ratelimit.py (token bucket reset once per second)
- executor.py (birdc in restricted mode)
- queries.py (query builder, status shaping, route dump aggregation)
"""

from .cache import QueryCache
from .dispatcher import QueryDispatcher
from .errors import BirdError, BirdUnreachableError
from .executor import BirdExecutor
from .parsed import BIRD_ERROR, QueryResult, ResultState
from .queries import BirdClient, create_client
from .ratelimit import RateLimiter

__all__ = [
    # Pipeline
    "QueryCache",
    "QueryDispatcher",
    "BirdExecutor",
    "RateLimiter",
    # Queries
    "BirdClient",
    "create_client",
    # Results
    "QueryResult",
    "ResultState",
    "BIRD_ERROR",
    # Errors
    "BirdError",
    "BirdUnreachableError",
]
