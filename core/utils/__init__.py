"""
Utilities package for Daily Priority.

- time_utils: Day boundaries and calendar arithmetic
- constants: Application constants
- response_helpers: UX-optimized API responses
- pagination_helpers: Offset pagination
- error_handlers: Exception to response mapping
- logging_utils: Structured logging and request IDs
"""
from .response_helpers import UXResponse
from .pagination_helpers import paginate, page_metadata
