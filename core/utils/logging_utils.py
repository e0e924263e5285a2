"""
Structured logging with request correlation IDs.

- Request ID correlation across log entries
- One JSON object per log line
- Per-request timing
"""
import json
import logging
import time
import uuid
import threading

logger = logging.getLogger(__name__)

_request_context = threading.local()

_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info', 'thread', 'threadName',
    'exc_info', 'exc_text', 'message', 'taskName',
))


# ============================================================================
# REQUEST ID MANAGEMENT
# ============================================================================

def get_request_id() -> str:
    """Current request ID, or a fresh short id outside a request."""
    return getattr(_request_context, 'request_id', None) or str(uuid.uuid4())[:8]


def set_request_id(request_id: str):
    _request_context.request_id = request_id


def clear_request_context():
    if hasattr(_request_context, 'request_id'):
        delattr(_request_context, 'request_id')


# ============================================================================
# STRUCTURED LOG FORMATTER
# ============================================================================

class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in format:
    {"timestamp": "...", "level": "INFO", "request_id": "abc123", "message": "..."}
    """

    def format(self, record):
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'request_id': get_request_id(),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith('_'):
                continue
            log_data[key] = value

        return json.dumps(log_data, default=str)


# ============================================================================
# LOGGING UTILITIES
# ============================================================================

def log_with_context(level: str, message: str, **extra):
    """
    Log with current request context and extra fields.

    Usage:
        log_with_context('info', 'Task created', user_id=3, task_id='...')
    """
    log_func = getattr(logger, level.lower(), logger.info)
    log_func(message, extra=extra)


def log_api_request(request, response_status: int, duration_ms: float):
    user = getattr(request, 'user', None)
    log_with_context(
        'info',
        f'{request.method} {request.path}',
        method=request.method,
        path=request.path,
        status=response_status,
        duration_ms=round(duration_ms, 2),
        user_id=getattr(user, 'id', None),
        ip=request.META.get('REMOTE_ADDR')
    )


# ============================================================================
# MIDDLEWARE
# ============================================================================

class RequestIDMiddleware:
    """
    Assigns every request an X-Request-ID (reusing the incoming header),
    echoes it on the response and logs the request once it completes.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.META.get('HTTP_X_REQUEST_ID') or str(uuid.uuid4())[:8]
        set_request_id(request_id)

        start_time = time.time()

        try:
            response = self.get_response(request)
            response['X-Request-ID'] = request_id

            duration_ms = (time.time() - start_time) * 1000
            log_api_request(request, response.status_code, duration_ms)

            return response
        finally:
            clear_request_context()
