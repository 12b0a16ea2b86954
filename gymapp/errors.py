"""
Error taxonomy for the gym API.

Services raise these; the handlers registered by ``register_error_handlers``
turn them into JSON responses with a stable ``kind`` and an HTTP status.
"""

from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException


class GymError(Exception):
    """Base class for errors surfaced to API callers."""
    kind = 'error'
    status_code = 500

    def __init__(self, message, *, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self):
        payload = {'success': False, 'kind': self.kind, 'error': self.message}
        if self.detail is not None:
            payload['detail'] = self.detail
        return payload


class ValidationError(GymError):
    """Bad enum value, missing or malformed field."""
    kind = 'validation'
    status_code = 400


class ConflictError(GymError):
    """State invariant would be violated (e.g. double check-in)."""
    kind = 'conflict'
    status_code = 409


class NotFoundError(GymError):
    kind = 'not_found'
    status_code = 404


class AuthError(GymError):
    kind = 'auth'
    status_code = 401


class InvalidStateError(GymError):
    """Illegal transition (e.g. upgrading from elite, checking out twice)."""
    kind = 'invalid_state'
    status_code = 400


class DependencyError(GymError):
    """Datastore unreachable or failed. Not retried here."""
    kind = 'dependency'
    status_code = 500


def register_error_handlers(app):
    """Render every error as JSON in the same shape."""

    @app.errorhandler(GymError)
    def handle_gym_error(error):
        if error.status_code >= 500:
            current_app.logger.exception(f"{error.kind} error: {error.message}")
        else:
            current_app.logger.warning(f"{error.kind} error: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_datastore_error(error):
        # Reads outside the service commit helpers end up here
        from gymapp import db
        db.session.rollback()
        current_app.logger.error(f"Datastore error: {error}")
        return jsonify(DependencyError('Datastore unavailable').to_dict()), DependencyError.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        kind = 'not_found' if error.code == 404 else 'http'
        return jsonify({
            'success': False,
            'kind': kind,
            'error': error.description,
        }), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        current_app.logger.exception(f"Unexpected error: {error}")
        return jsonify({
            'success': False,
            'kind': 'internal',
            'error': 'Unexpected server error',
        }), 500
