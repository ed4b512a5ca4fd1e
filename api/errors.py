"""
Centralized error handling for the birdproxy API.

Error Hierarchy:
- APIError (4xx/503): Expected errors with messages safe to expose to clients
- Anything else (500): Unexpected errors - never expose internal details

Usage:
    from api.errors import ValidationError

    raise ValidationError("Query parameter 'net' is required")
"""

import logging
import uuid

from flask import jsonify

logger = logging.getLogger(__name__)


# =============================================================================
# Exception Classes
# =============================================================================

class APIError(Exception):
    """
    Base class for expected API errors.
    Messages are safe to expose to clients.
    """
    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class ValidationError(APIError):
    """Request validation failed (400)."""
    status_code = 400


class RateLimitError(APIError):
    """Rate limit exceeded (429)."""
    status_code = 429


class ServiceUnavailableError(APIError):
    """
    birdc unreachable (503).

    `body` replaces the generic error rendering when given.
    """
    status_code = 503

    def __init__(self, message: str, body: dict = None):
        super().__init__(message)
        self.body = body


# =============================================================================
# Flask registration
# =============================================================================

def register_error_handlers(app):
    """
    Register Flask error handlers for APIError exceptions.

    Call this in the app factory:
        from api.errors import register_error_handlers
        register_error_handlers(app)
    """

    @app.errorhandler(APIError)
    def handle_api_error(e):
        """Handle all APIError subclasses."""
        error_id = str(uuid.uuid4())[:8]
        logger.warning(f"API error: {e}", extra={'error_id': error_id})
        if getattr(e, 'body', None) is not None:
            return jsonify(e.body), e.status_code
        return jsonify({
            "error": str(e),
            "error_id": error_id
        }), e.status_code

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(500)
    def handle_internal_error(e):
        """Handle unexpected 500 errors."""
        error_id = str(uuid.uuid4())[:8]
        logger.exception("Internal server error", extra={'error_id': error_id})
        return jsonify({
            "error": "Internal server error",
            "error_id": error_id
        }), 500
