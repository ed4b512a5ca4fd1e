"""Shared pytest fixtures for birdproxy tests."""
import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add project root to path
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)

from bird.cache import QueryCache
from bird.dispatcher import QueryDispatcher
from bird.errors import BirdUnreachableError
from bird.queries import BirdClient
from bird.ratelimit import RateLimiter
from config.settings import (
    AppSettings,
    BirdSettings,
    ParserSettings,
    RateLimitSettings,
    StatusSettings,
)


# =============================================================================
# Fakes
# =============================================================================

class FakeBirdc:
    """
    Stand-in for BirdExecutor.

    Maps query strings (after `show`) to raw output; unknown queries
    fail like an unreachable daemon. Every call is recorded.
    """

    def __init__(self, outputs=None):
        self.outputs = dict(outputs or {})
        self.calls = []

    def run(self, args: str) -> bytes:
        self.calls.append(args)
        output = self.outputs.get(args)
        if output is None:
            raise BirdUnreachableError(f"no fake output for {args!r}")
        if isinstance(output, Exception):
            raise output
        return output

    def count(self, args: str) -> int:
        return self.calls.count(args)


class FakeClock:
    """Controllable UTC clock for cache expiry tests."""

    def __init__(self, start: datetime = None):
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_settings():
    """Build AppSettings with explicit groups, ignoring the environment defaults where given."""

    def _make(per_peer_tables=False, ip_version="4", reconfig_source="bird",
              reconfig_match=r"# Created: (.*)", filter_fields=None,
              config_filename="/etc/bird/bird.conf", rate_limit_enabled=False,
              requests_per_second=10, cache_ttl=5):
        return AppSettings(
            ip_version=ip_version,
            bird=BirdSettings(cmd="birdc", cache_ttl=cache_ttl, config_filename=config_filename),
            parser=ParserSettings(
                per_peer_tables=per_peer_tables,
                peer_protocol_prefix="ID_",
                pipe_protocol_prefix="P_",
            ),
            status=StatusSettings(
                reconfig_timestamp_source=reconfig_source,
                reconfig_timestamp_match=reconfig_match,
                filter_fields=filter_fields or [],
            ),
            rate_limit=RateLimitSettings(
                enabled=rate_limit_enabled,
                requests_per_second=requests_per_second,
            ),
        )

    return _make


@pytest.fixture
def make_client(make_settings, clock):
    """
    Build a BirdClient over a FakeBirdc.

    Returns (client, fake) so tests can inspect executed queries.
    """

    def _make(outputs=None, **settings_kwargs):
        settings = make_settings(**settings_kwargs)
        fake = FakeBirdc(outputs)
        cache = QueryCache(ttl_minutes=settings.bird.cache_ttl_minutes, clock=clock)
        limiter = RateLimiter(
            enabled=settings.rate_limit.enabled,
            max_requests=settings.rate_limit.requests_per_second,
        )
        client = BirdClient(settings, QueryDispatcher(cache, limiter, fake))
        return client, fake

    return _make
