"""
Parsers for birdc `show` output.

Each parser turns raw birdc output (bytes or text) into a plain dict.
They are total: lines that do not match are skipped, so truncated or
unexpected output yields a partial result instead of an exception.
Both the BIRD 1.x and 2.x layouts are understood.

Usage:
    from bird.parsers import parse_protocols

    parsed = parse_protocols(executor.run("protocols all"))
    parsed["protocols"]["R1"]["routes"]["filtered"]
"""

import logging
import re
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

Raw = Union[bytes, str]

# "BIRD 2.0.9 ready." banner printed by birdc on connect
BANNER_RE = re.compile(r"^BIRD\s+\S+\s+ready\.\s*$")

# =============================================================================
# Status
# =============================================================================

STATUS_PATTERNS = [
    ("version", re.compile(r"^BIRD\s+(\S+)\s*$")),
    ("router_id", re.compile(r"^Router ID is\s+(\S+)")),
    ("hostname", re.compile(r"^Hostname is\s+(\S+)")),
    ("current_server", re.compile(r"^Current server time is\s+(.+?)\s*$")),
    ("last_reboot", re.compile(r"^Last reboot on\s+(.+?)\s*$")),
    ("last_reconfig", re.compile(r"^Last reconfiguration on\s+(.+?)\s*$")),
]

# =============================================================================
# Protocols
# =============================================================================

PROTOCOL_HEADER_RE = re.compile(r"^name\s+proto\s+table\s+state\s+since\s+info", re.IGNORECASE)
PROTOCOL_LINE_RE = re.compile(
    r"^(?P<name>\S+)\s+(?P<proto>\S+)\s+(?P<table>\S+)\s+(?P<state>\S+)\s+"
    r"(?P<since>\S+(?:\s+\d{1,2}:\d{2}:\d{2}(?:\.\d+)?)?)\s*(?P<info>.*?)\s*$"
)
PROTOCOL_ATTR_RE = re.compile(r"^\s+(?P<key>[A-Za-z][A-Za-z ]*?):\s+(?P<value>.*?)\s*$")
CHANNEL_RE = re.compile(r"^\s+Channel\s+(\S+)\s*$")
ROUTE_COUNTER_RE = re.compile(r"(\d+)\s+(imported|filtered|exported|preferred)")

PROTOCOL_ATTRS = {
    "Description": "description",
    "Preference": "preference",
    "Input filter": "input_filter",
    "Output filter": "output_filter",
    "Import limit": "import_limit",
    "BGP state": "bgp_state",
    "Neighbor address": "neighbor_address",
    "Neighbor AS": "neighbor_as",
    "Neighbor ID": "neighbor_id",
    "Local AS": "local_as",
    "Source address": "source_address",
    "Hold timer": "hold_timer",
    "Keepalive timer": "keepalive_timer",
    "Last error": "last_error",
    "Table": "table",
}
INT_PROTOCOL_ATTRS = {"preference", "neighbor_as", "local_as"}

# =============================================================================
# Routes
# =============================================================================

ROUTE_RE = re.compile(
    r"^(?P<network>\S+)?\s+(?P<kind>.*?)\s*"
    r"\[(?P<protocol>\S+)\s+(?P<age>[^\]]*?)(?:\s+from\s+(?P<learnt_from>\S+))?\]\s*"
    r"(?P<primary>\*)?\s*\((?P<pref>\d+)(?:/(?P<igp_metric>\d+|\?))?\)"
    r"(?:\s*\[(?P<origin_info>[^\]]*)\])?"
)
VIA_RE = re.compile(r"via\s+(?P<gateway>\S+)\s+on\s+(?P<interface>\S+)")
DEV_RE = re.compile(r"dev\s+(?P<interface>\S+)")
TABLE_RE = re.compile(r"^Table\s+(\S+):\s*$")
TYPE_RE = re.compile(r"^\s+Type:\s+(?P<type>.*?)\s*$")
BGP_ATTR_RE = re.compile(r"^\s+BGP\.(?P<key>\w+):\s*(?P<value>.*?)\s*$")
PAIR_RE = re.compile(r"\((\d+),\s*(\d+)\)")
TRIPLE_RE = re.compile(r"\((\d+),\s*(\d+),\s*(\d+)\)")

BGP_ATTR_NAMES = {
    "community": "communities",
    "large_community": "large_communities",
    "ext_community": "ext_communities",
}

# =============================================================================
# Counts and symbols
# =============================================================================

ROUTES_COUNT_RE = re.compile(r"^(\d+)\s+of\s+\d+\s+routes")
ROUTES_TOTAL_RE = re.compile(r"^(\d+)\s+routes")
SYMBOL_RE = re.compile(r"^(?P<name>\S+)\s+(?P<kind>\S.*?)\s*$")


def _lines(raw: Raw) -> list[str]:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    return [
        line.rstrip("\r")
        for line in raw.splitlines()
        if line.strip() and not BANNER_RE.match(line.strip())
    ]


def _to_int(value: str) -> Any:
    value = value.strip()
    return int(value) if value.isdigit() else value


def parse_status(raw: Raw) -> dict:
    """
    Parse `show status`.

    Returns:
        {"status": {"version", "router_id", "current_server",
                    "last_reboot", "last_reconfig", "message"}}
    """
    status: dict[str, Any] = {}

    for line in _lines(raw):
        stripped = line.strip()
        for key, pattern in STATUS_PATTERNS:
            match = pattern.match(stripped)
            if match:
                status[key] = match.group(1)
                break
        else:
            # Trailing free-form line, e.g. "Daemon is up and running"
            status["message"] = stripped

    return {"status": status}


def _parse_route_counters(value: str) -> dict:
    return {name: int(count) for count, name in ROUTE_COUNTER_RE.findall(value)}


def parse_protocols(raw: Raw) -> dict:
    """
    Parse `show protocols all`.

    Returns:
        {"protocols": {name: {"protocol", "bird_protocol", "table", "state",
                              "state_changed", "connection", "routes", ...}}}
    """
    protocols: dict[str, dict] = {}
    current: Optional[dict] = None

    for line in _lines(raw):
        if PROTOCOL_HEADER_RE.match(line):
            continue

        if not line[0].isspace():
            match = PROTOCOL_LINE_RE.match(line)
            if not match:
                current = None
                continue
            current = {
                "protocol": match.group("name"),
                "bird_protocol": match.group("proto"),
                "table": match.group("table"),
                "state": match.group("state"),
                "state_changed": match.group("since"),
                "connection": match.group("info"),
            }
            protocols[match.group("name")] = current
            continue

        if current is None:
            continue

        channel = CHANNEL_RE.match(line)
        if channel:
            current.setdefault("channels", []).append(channel.group(1))
            continue

        attr = PROTOCOL_ATTR_RE.match(line)
        if not attr:
            continue

        key, value = attr.group("key"), attr.group("value")
        if key == "Routes":
            counters = current.setdefault("routes", {})
            for name, count in _parse_route_counters(value).items():
                counters[name] = counters.get(name, 0) + count
            continue

        field = PROTOCOL_ATTRS.get(key)
        if field is None:
            continue
        if field == "table" and current.get("table") not in (None, "---"):
            continue
        current[field] = _to_int(value) if field in INT_PROTOCOL_ATTRS else value

    for protocol in protocols.values():
        counters = protocol.setdefault("routes", {})
        for name in ("imported", "filtered", "exported", "preferred"):
            counters.setdefault(name, 0)

    logger.debug(f"Parsed {len(protocols)} protocols")
    return {"protocols": protocols}


def _parse_bgp_value(key: str, value: str) -> Any:
    if key == "as_path":
        return value.split()
    if key in ("local_pref", "med"):
        return _to_int(value)
    if key == "communities":
        return [[int(a), int(b)] for a, b in PAIR_RE.findall(value)]
    if key == "large_communities":
        return [[int(a), int(b), int(c)] for a, b, c in TRIPLE_RE.findall(value)]
    return value


def parse_routes(raw: Raw) -> dict:
    """
    Parse `show route ... all`.

    Returns:
        {"routes": [{"network", "gateway", "interface", "from_protocol",
                     "age", "metric", "primary", "type", "bgp"}, ...]}
    """
    routes: list[dict] = []
    current: Optional[dict] = None
    table: Optional[str] = None

    for line in _lines(raw):
        table_match = TABLE_RE.match(line)
        if table_match:
            table = table_match.group(1)
            continue

        route_match = ROUTE_RE.match(line)
        if route_match:
            network = route_match.group("network")
            if network is None and current is not None:
                # Alternative path for the previous network
                network = current["network"]
            if network is None:
                continue

            kind = route_match.group("kind")
            via = VIA_RE.search(kind)
            dev = DEV_RE.search(kind)
            current = {
                "network": network,
                "gateway": via.group("gateway") if via else None,
                "interface": via.group("interface") if via else (dev.group("interface") if dev else None),
                "from_protocol": route_match.group("protocol"),
                "age": route_match.group("age"),
                "learnt_from": route_match.group("learnt_from"),
                "metric": int(route_match.group("pref")),
                "primary": route_match.group("primary") == "*",
                "type": [],
                "bgp": {},
            }
            if table is not None:
                current["table"] = table
            routes.append(current)
            continue

        if current is None:
            continue

        via = VIA_RE.search(line)
        if via and line[0].isspace() and current["gateway"] is None:
            current["gateway"] = via.group("gateway")
            current["interface"] = via.group("interface")
            continue

        type_match = TYPE_RE.match(line)
        if type_match:
            current["type"] = type_match.group("type").split()
            continue

        bgp_match = BGP_ATTR_RE.match(line)
        if bgp_match:
            key = BGP_ATTR_NAMES.get(bgp_match.group("key"), bgp_match.group("key"))
            current["bgp"][key] = _parse_bgp_value(key, bgp_match.group("value"))

    logger.debug(f"Parsed {len(routes)} routes")
    return {"routes": routes}


def parse_routes_count(raw: Raw) -> dict:
    """
    Parse `show route ... count`.

    Returns:
        {"routes": <int>}; 0 when no count line is present
    """
    for line in _lines(raw):
        stripped = line.strip()
        match = ROUTES_COUNT_RE.match(stripped) or ROUTES_TOTAL_RE.match(stripped)
        if match:
            return {"routes": int(match.group(1))}
    return {"routes": 0}


def parse_symbols(raw: Raw) -> dict:
    """
    Parse `show symbols`.

    Returns:
        {"symbols": {"routing table": [...], "protocol": [...], ...}}
    """
    symbols: dict[str, list[str]] = {}
    for line in _lines(raw):
        match = SYMBOL_RE.match(line.strip())
        if match:
            symbols.setdefault(match.group("kind"), []).append(match.group("name"))
    return {"symbols": symbols}
