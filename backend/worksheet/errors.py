"""Error taxonomy for the worksheet API and its JSON error handlers."""

from datetime import datetime, timedelta

from flask import jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None, status_code=None, payload=None, headers=None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}
        self.headers = headers or {}

    def to_dict(self):
        body = dict(self.payload)
        body['error'] = self.message
        return body


class ValidationError(ApiError):
    status_code = 400
    message = 'Invalid request'


_DENIAL_MESSAGES = {
    403: 'Forbidden',
    404: 'Not Found - API endpoints available at /api/*',
    405: 'Method Not Allowed',
}


class AdmissionDenied(ApiError):
    """Gate rejection. ``reason`` is for the log only."""

    status_code = 403

    def __init__(self, status_code, reason, headers=None):
        super().__init__(_DENIAL_MESSAGES.get(status_code, 'Forbidden'), status_code=status_code, headers=headers)
        self.reason = reason


class QuotaExceeded(ApiError):
    status_code = 429
    message = 'Daily request limit reached'

    def __init__(self, limit, reset):
        super().__init__(
            payload={'limit': limit, 'reset': reset},
            headers={'Retry-After': str(_seconds_until_midnight())},
        )


class RateExceeded(ApiError):
    status_code = 429
    message = 'Too many requests, please slow down'

    def __init__(self, retry_after):
        retry_after = max(1, int(round(retry_after)))
        super().__init__(
            payload={'retryAfter': retry_after},
            headers={'Retry-After': str(retry_after)},
        )


class PersistenceFailure(Exception):
    """Snapshot write failed. Logged by the writer, never sent to clients."""


def _seconds_until_midnight():
    now = datetime.now()
    midnight = (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    return max(1, int((midnight - now).total_seconds()))


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        if isinstance(err, AdmissionDenied):
            app.logger.info(f"[gate-deny] status={err.status_code} reason={err.reason}")
        response = jsonify(err.to_dict())
        response.status_code = err.status_code
        for name, value in err.headers.items():
            response.headers[name] = value
        return response

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        response = jsonify({'error': err.name})
        response.status_code = err.code or 500
        return response

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        app.logger.exception(f"[error] unhandled {type(err).__name__}: {err}")
        return jsonify({'error': 'Internal server error'}), 500
