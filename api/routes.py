"""
birdc query endpoints.

Every view calls one BirdClient operation and renders its QueryResult:
- OK -> payload plus an "api" block with cache information
- unreachable -> 503 with the fixed bird error mapping
- not admitted -> 429
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from api.errors import RateLimitError, ServiceUnavailableError, ValidationError
from bird.parsed import BIRD_ERROR, QueryResult, ResultState
from bird.queries import BirdClient
from bird.timestamps import to_iso

logger = logging.getLogger(__name__)

bird_bp = Blueprint('bird', __name__)

BOOKKEEPING_FIELDS = ('ttl', 'cached_at')


def get_client() -> BirdClient:
    """BirdClient attached to the running app by create_app()."""
    return current_app.extensions['bird_client']


def render(result: QueryResult):
    """Turn a QueryResult into a JSON response."""
    if result.state is ResultState.UNREACHABLE:
        raise ServiceUnavailableError("bird unreachable", body=BIRD_ERROR)
    if result.state is ResultState.NOT_ADMITTED:
        raise RateLimitError("rate limit exceeded")

    logger.debug(f"Serving {request.path}", extra={'from_cache': result.from_cache})

    payload = {k: v for k, v in result.data.items() if k not in BOOKKEEPING_FIELDS}
    payload['api'] = {
        'result_from_cache': result.from_cache,
        'cache_status': {
            'cached_at': to_iso(result.data.get('cached_at')),
            'ttl': to_iso(result.data.get('ttl')),
        },
    }
    return jsonify(payload)


def _required_arg(name: str) -> str:
    value = request.args.get(name, '').strip()
    if not value:
        raise ValidationError(f"Query parameter '{name}' is required")
    return value


# =============================================================================
# Status, protocols, symbols
# =============================================================================

@bird_bp.route('/status')
def status():
    return render(get_client().status())


@bird_bp.route('/protocols')
def protocols():
    return render(get_client().protocols())


@bird_bp.route('/protocols/bgp')
def protocols_bgp():
    return render(get_client().protocols_bgp())


@bird_bp.route('/symbols')
def symbols():
    return render(get_client().symbols())


@bird_bp.route('/symbols/tables')
def symbols_tables():
    return render(get_client().symbols_tables())


@bird_bp.route('/symbols/protocols')
def symbols_protocols():
    return render(get_client().symbols_protocols())


# =============================================================================
# Routes
# =============================================================================

@bird_bp.route('/routes/protocol/<protocol>')
def routes_protocol(protocol):
    return render(get_client().routes_proto(protocol))


@bird_bp.route('/routes/protocol/<protocol>/count')
def routes_protocol_count(protocol):
    return render(get_client().routes_proto_count(protocol))


@bird_bp.route('/routes/filtered/<protocol>')
def routes_filtered(protocol):
    return render(get_client().routes_filtered(protocol))


@bird_bp.route('/routes/export/<protocol>')
def routes_export(protocol):
    return render(get_client().routes_export(protocol))


@bird_bp.route('/routes/export/<protocol>/count')
def routes_export_count(protocol):
    return render(get_client().routes_export_count(protocol))


@bird_bp.route('/routes/noexport/<protocol>')
def routes_noexport(protocol):
    return render(get_client().routes_noexport(protocol))


@bird_bp.route('/routes/peer/<peer>')
def routes_peer(peer):
    return render(get_client().routes_peer(peer))


@bird_bp.route('/routes/table/<table>')
def routes_table(table):
    return render(get_client().routes_table(table))


@bird_bp.route('/routes/table/<table>/count')
def routes_table_count(table):
    return render(get_client().routes_table_count(table))


@bird_bp.route('/routes/prefix')
def routes_prefixed():
    return render(get_client().routes_prefixed(_required_arg('prefix')))


@bird_bp.route('/routes/lookup/table/<table>')
def routes_lookup_table(table):
    return render(get_client().routes_lookup_table(_required_arg('net'), table))


@bird_bp.route('/routes/lookup/protocol/<protocol>')
def routes_lookup_protocol(protocol):
    return render(get_client().routes_lookup_protocol(_required_arg('net'), protocol))


@bird_bp.route('/routes/dump')
def routes_dump():
    return render(get_client().routes_dump())


# =============================================================================
# Operational
# =============================================================================

@bird_bp.route('/api/cache/stats')
def cache_stats():
    """Query cache and rate limiter state."""
    client = get_client()
    limiter = client.rate_limiter
    return jsonify({
        'status': 'ok',
        'cache': client.cache.stats(),
        'rate_limit': {
            'enabled': limiter.enabled,
            'max_requests': limiter.max_requests,
            'remaining': limiter.remaining,
        },
    })


@bird_bp.route('/healthz')
def healthz():
    """Liveness probe; does not touch birdc."""
    return jsonify({'status': 'ok'})
