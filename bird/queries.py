"""
Daemon queries built on the dispatcher.

BirdClient owns the command strings sent to birdc, the version-aware
channel filter, status shaping and the route dump aggregation. Every
operation returns a QueryResult; special results (unreachable, not
admitted) are propagated unchanged and never field-accessed.

Usage:
    from bird.queries import create_client

    client = create_client(get_settings())
    client.rate_limiter.start()

    result = client.routes_dump()
    if not result.is_special:
        print(len(result.data["imported"]))
"""

import logging
from typing import Optional

from bird.cache import QueryCache
from bird.dispatcher import QueryDispatcher
from bird.executor import BirdExecutor
from bird.parsed import QueryResult, get_int, get_list, get_mapping, get_str
from bird.parsers import (
    parse_protocols,
    parse_routes,
    parse_routes_count,
    parse_status,
    parse_symbols,
)
from bird.ratelimit import RateLimiter
from bird.reconfig import last_reconfig_from_file_content, last_reconfig_from_file_stat
from config.settings import AppSettings

logger = logging.getLogger(__name__)

# Daemons from this major version on carry one channel per address family
MULTI_CHANNEL_MAJOR_VERSION = 2


class BirdClient:
    """High-level birdc queries sharing one dispatcher."""

    def __init__(self, settings: AppSettings, dispatcher: QueryDispatcher):
        self.settings = settings
        self.dispatcher = dispatcher

    @property
    def cache(self) -> QueryCache:
        return self.dispatcher.cache

    @property
    def rate_limiter(self) -> RateLimiter:
        return self.dispatcher.rate_limiter

    def _run(self, cmd: str, parser) -> QueryResult:
        return self.dispatcher.run_and_parse(cmd, parser)

    # =========================================================================
    # Status
    # =========================================================================

    def status(self) -> QueryResult:
        """
        Daemon status, shaped before caching.

        last_reconfig is rewritten according to reconfig_timestamp_source
        and filter_fields are nulled. Shaping runs inside the parser so
        cache hits return the already-shaped payload.
        """
        return self._run("status", self._parse_and_shape_status)

    def _parse_and_shape_status(self, raw) -> dict:
        parsed = parse_status(raw)
        status = get_mapping(parsed, "status")
        if status is None:
            return parsed

        conf = self.settings.status
        source = conf.reconfig_timestamp_source
        if source == "config_modified":
            status["last_reconfig"] = last_reconfig_from_file_stat(
                self.settings.bird.config_filename
            )
        elif source == "config_regex":
            status["last_reconfig"] = last_reconfig_from_file_content(
                self.settings.bird.config_filename,
                conf.reconfig_timestamp_match,
            )
        else:
            status["last_reconfig"] = get_str(status, "last_reconfig") or ""

        for field in conf.filter_fields:
            status[field] = None

        return parsed

    # =========================================================================
    # Query construction
    # =========================================================================

    def route_query_for_channel(self, cmd: str) -> str:
        """
        Append the address family filter for multi-channel daemons.

        Older (single-table) daemons, an unknown version or a failed
        status query leave the command untouched.
        """
        status = get_mapping(self.status().data, "status")
        version = get_str(status, "version")
        if not version or not version[0].isdecimal():
            return cmd

        if int(version[0]) < MULTI_CHANNEL_MAJOR_VERSION:
            return cmd

        return f"{cmd} where net.type = NET_IP{self.settings.ip_version}"

    def peer_protocol_to_pipe(self, protocol: str) -> str:
        """
        Map a peer session name to the pipe protocol holding its routes.

        Only applies with per-peer tables, where export-filtered routes
        live on the pipe between the peer table and the master table.
        """
        conf = self.settings.parser
        if conf.per_peer_tables and protocol.startswith(conf.peer_protocol_prefix):
            return conf.pipe_protocol_prefix + protocol[len(conf.peer_protocol_prefix):]
        return protocol

    # =========================================================================
    # Protocols and symbols
    # =========================================================================

    def protocols(self) -> QueryResult:
        return self._run("protocols all", parse_protocols)

    def protocols_bgp(self) -> QueryResult:
        """BGP sessions only, keeping the listing's cache bookkeeping."""
        protocols = self.protocols()
        if protocols.is_special:
            return protocols

        bgp_protocols = {
            name: protocol
            for name, protocol in (get_mapping(protocols.data, "protocols") or {}).items()
            if isinstance(protocol, dict) and protocol.get("bird_protocol") == "BGP"
        }

        return QueryResult.ok(
            {
                "protocols": bgp_protocols,
                "ttl": protocols.data.get("ttl"),
                "cached_at": protocols.data.get("cached_at"),
            },
            from_cache=protocols.from_cache,
        )

    def symbols(self) -> QueryResult:
        return self._run("symbols", parse_symbols)

    def _symbols_of_kind(self, kind: str, key: str) -> QueryResult:
        symbols = self.symbols()
        if symbols.is_special:
            return symbols

        names = get_list(get_mapping(symbols.data, "symbols"), kind) or []
        return QueryResult.ok(
            {
                key: names,
                "ttl": symbols.data.get("ttl"),
                "cached_at": symbols.data.get("cached_at"),
            },
            from_cache=symbols.from_cache,
        )

    def symbols_tables(self) -> QueryResult:
        return self._symbols_of_kind("routing table", "symbols")

    def symbols_protocols(self) -> QueryResult:
        return self._symbols_of_kind("protocol", "symbols")

    # =========================================================================
    # Routes
    # =========================================================================

    def routes_prefixed(self, prefix: str) -> QueryResult:
        cmd = self.route_query_for_channel("route " + prefix + " all")
        return self._run(cmd, parse_routes)

    def routes_proto(self, protocol: str) -> QueryResult:
        cmd = self.route_query_for_channel("route all protocol " + protocol)
        return self._run(cmd, parse_routes)

    def routes_proto_count(self, protocol: str) -> QueryResult:
        cmd = self.route_query_for_channel("route protocol " + protocol) + " count"
        return self._run(cmd, parse_routes_count)

    def routes_filtered(self, protocol: str) -> QueryResult:
        cmd = self.route_query_for_channel("route all filtered protocol " + protocol)
        return self._run(cmd, parse_routes)

    def routes_export(self, protocol: str) -> QueryResult:
        cmd = self.route_query_for_channel("route all export " + protocol)
        return self._run(cmd, parse_routes)

    def routes_noexport(self, protocol: str) -> QueryResult:
        protocol = self.peer_protocol_to_pipe(protocol)
        cmd = self.route_query_for_channel("route all noexport " + protocol)
        return self._run(cmd, parse_routes)

    def routes_export_count(self, protocol: str) -> QueryResult:
        cmd = self.route_query_for_channel("route export " + protocol) + " count"
        return self._run(cmd, parse_routes_count)

    def routes_table(self, table: str) -> QueryResult:
        return self._run("route table " + table + " all", parse_routes)

    def routes_table_count(self, table: str) -> QueryResult:
        return self._run("route table " + table + " count", parse_routes_count)

    def routes_lookup_table(self, net: str, table: str) -> QueryResult:
        return self._run("route for " + net + " table " + table + " all", parse_routes)

    def routes_lookup_protocol(self, net: str, protocol: str) -> QueryResult:
        return self._run("route for " + net + " protocol " + protocol + " all", parse_routes)

    def routes_peer(self, peer: str) -> QueryResult:
        cmd = self.route_query_for_channel("route export " + peer)
        return self._run(cmd, parse_routes)

    # =========================================================================
    # Route dump
    # =========================================================================

    def routes_dump(self) -> QueryResult:
        """All imported and filtered routes, using the configured table topology."""
        if self.settings.parser.per_peer_tables:
            return self.routes_dump_per_peer_table()
        return self.routes_dump_single_table()

    def routes_dump_single_table(self) -> QueryResult:
        """
        Master table imported and filtered routes.

        A special imported result is returned as is; a failed filtered
        query leaves `filtered` as None.
        """
        imported = self._run(self.route_query_for_channel("route all"), parse_routes)
        if imported.is_special:
            return imported
        filtered = self._run(self.route_query_for_channel("route all filtered"), parse_routes)

        return QueryResult.ok(
            {
                "imported": imported.get("routes"),
                "filtered": filtered.get("routes"),
            },
            from_cache=imported.from_cache,
        )

    def routes_dump_per_peer_table(self) -> QueryResult:
        """
        Imported routes from the master table plus the union of each
        BGP session's filtered routes.

        Per-peer tables have no global filtered view, so only sessions
        reporting a non-zero filtered counter are queried, in protocol
        name order.
        """
        imported = self._run(self.route_query_for_channel("route all"), parse_routes)
        if imported.is_special:
            return imported
        filtered: list[dict] = []

        protocols = self.protocols_bgp()
        for name, details in sorted((get_mapping(protocols.data, "protocols") or {}).items()):
            counters = get_mapping(details, "routes")
            if counters is None:
                continue
            if not get_int(counters, "filtered"):
                continue

            routes = get_list(self.routes_filtered(name).data, "routes")
            if routes is None:
                logger.debug(f"No filtered routes returned for {name}, skipping")
                continue
            filtered.extend(routes)

        return QueryResult.ok(
            {
                "imported": imported.get("routes"),
                "filtered": filtered,
            },
            from_cache=imported.from_cache,
        )


def create_client(settings: AppSettings, executor: Optional[BirdExecutor] = None) -> BirdClient:
    """
    Wire cache, rate limiter and executor from settings.

    The rate limiter's reset thread is not started here; the caller
    owns that lifecycle.
    """
    cache = QueryCache(ttl_minutes=settings.bird.cache_ttl_minutes)
    rate_limiter = RateLimiter(
        enabled=settings.rate_limit.enabled,
        max_requests=settings.rate_limit.requests_per_second,
    )
    if executor is None:
        executor = BirdExecutor(settings.bird.cmd, timeout=settings.bird.query_timeout)
    return BirdClient(settings, QueryDispatcher(cache, rate_limiter, executor))
