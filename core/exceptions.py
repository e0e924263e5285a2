"""
Custom Exception Classes

Provides specific exception types for better error handling and user feedback.
"""


class PriorityException(Exception):
    """Base exception for all application errors"""
    pass


class ResourceNotFoundError(PriorityException):
    """Raised when a record does not exist or belongs to another user"""
    def __init__(self, resource: str, resource_id: str = ''):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class TaskNotFoundError(ResourceNotFoundError):
    """Raised when a task does not exist"""
    def __init__(self, task_id: str):
        super().__init__('Task', task_id)


class InvalidDateRangeError(PriorityException):
    """Raised when date range is invalid (e.g., start > end)"""
    def __init__(self, start_date, end_date):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(f"Invalid date range: {start_date} to {end_date}")


class ValidationError(PriorityException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Validation error for '{field}': {message}")


class DuplicateError(PriorityException):
    """Raised when trying to create a duplicate record"""
    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"Duplicate {resource_type}: '{identifier}' already exists")


class RateLimitError(PriorityException):
    """Raised when the user has hit a usage cap"""
    def __init__(self, message: str, suggestion: str = ''):
        self.suggestion = suggestion
        super().__init__(message)


class ExternalServiceError(PriorityException):
    """Raised when an upstream HTTP service fails or returns garbage"""
    def __init__(self, service: str, reason: str):
        self.service = service
        self.reason = reason
        super().__init__(f"{service} error: {reason}")


class ExternalServiceTimeout(ExternalServiceError):
    """Raised when an upstream HTTP service does not answer in time"""
    def __init__(self, service: str):
        super().__init__(service, 'request timed out')
