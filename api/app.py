"""
Flask Application Factory.

Creates the birdproxy app, wires the shared BirdClient (one cache and
one rate limiter per process) and starts the rate limit reset loop.
"""

import logging
import time
import uuid

from flask import Flask, g, request

from bird.queries import BirdClient, create_client
from config.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)


def create_app(config=None, settings: AppSettings = None, client: BirdClient = None):
    """Create and configure the Flask application.

    Args:
        config: Optional dict of Flask config overrides (e.g. {'TESTING': True}).
        settings: Application settings (default: get_settings()).
        client: Pre-built BirdClient, mainly for tests.

    Returns:
        Configured Flask app instance.
    """
    settings = settings or get_settings()

    app = Flask(__name__)
    if config:
        app.config.update(config)

    # Configure logging
    from api.logging_config import configure_logging
    configure_logging(app, settings)

    # Register custom error handlers for APIError hierarchy
    from api.errors import register_error_handlers
    register_error_handlers(app)

    if client is None:
        client = create_client(settings)
    app.extensions['bird_client'] = client

    if not app.config.get('TESTING'):
        client.rate_limiter.start()

    from api.routes import bird_bp
    app.register_blueprint(bird_bp)

    _register_middleware(app)

    logger.info(
        f"birdproxy ready (birdc={settings.bird.cmd}, "
        f"per_peer_tables={settings.parser.per_peer_tables}, ip_version={settings.ip_version})"
    )
    return app


def _register_middleware(app):
    """Request IDs and access logging."""

    @app.before_request
    def before_request_tracking():
        g.request_id = request.headers.get('X-Request-ID', str(uuid.uuid4())[:8])
        g.start_time = time.time()

    @app.after_request
    def after_request_tracking(response):
        duration_ms = 0
        if hasattr(g, 'start_time'):
            duration_ms = (time.time() - g.start_time) * 1000

        if hasattr(g, 'request_id'):
            response.headers['X-Request-ID'] = g.request_id

        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        if request.path == '/healthz':
            log_level = logging.DEBUG

        logger.log(
            log_level,
            f"{request.method} {request.path} -> {response.status_code} ({duration_ms:.1f}ms)",
            extra={
                'request_id': getattr(g, 'request_id', 'unknown'),
                'method': request.method,
                'endpoint': request.path,
                'status_code': response.status_code,
                'duration_ms': round(duration_ms, 2),
                'remote_addr': request.remote_addr,
            }
        )

        response.headers['X-Content-Type-Options'] = 'nosniff'
        return response
