"""Error handlers for the application.

Every error leaves the API as the uniform ``{code, message, description}``
envelope, with ``traceId`` set from the ``X-Correlation-Id`` header when the
caller sent one.
"""
from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from workflow_api.core.errors import APIError, ErrorMessage, ErrorResponse


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(APIError)
    def handle_api_error(error: APIError):
        """Render service-layer errors with their own status."""
        return _render(error.error, error.status)

    @app.errorhandler(404)
    def not_found(error):
        """Handle unknown URLs."""
        return _render_catalogue(ErrorMessage.ERROR_CODE_RESOURCE_NOT_FOUND, 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle unsupported methods on known URLs."""
        return _render_catalogue(ErrorMessage.ERROR_CODE_METHOD_NOT_ALLOWED, 405)

    @app.errorhandler(413)
    def request_too_large(error):
        """Handle payload too large errors."""
        return _render_catalogue(ErrorMessage.ERROR_CODE_PAYLOAD_TOO_LARGE, 413)

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        # Pass through HTTP errors
        if isinstance(error, HTTPException):
            return error

        app.logger.error("Unhandled exception: %s", error, exc_info=True)
        return _render_catalogue(ErrorMessage.ERROR_CODE_UNEXPECTED, 500)


def _render_catalogue(error: ErrorMessage, status: int):
    return _render(ErrorResponse(error.code, error.message, error.description), status)


def _render(error: ErrorResponse, status: int):
    body = error.to_dict()
    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id and "traceId" not in body:
        body["traceId"] = correlation_id
    return jsonify(body), status
