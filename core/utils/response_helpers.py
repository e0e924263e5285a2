"""
API Response Helpers for UX-Optimized Responses
Provides consistent response format with feedback metadata for the web dashboard.
"""
from django.http import JsonResponse
from django.core.serializers.json import DjangoJSONEncoder
from typing import Dict, Any, Optional
import random


class UXResponse:
    """Helper for creating UX-optimized API responses with feedback metadata."""

    @staticmethod
    def success(
        message: str = "Action completed",
        data: Optional[Any] = None,
        feedback: Optional[Dict] = None,
        stats_delta: Optional[Dict] = None,
        status: int = 200
    ) -> JsonResponse:
        """
        Success response with UX metadata.

        Args:
            message: User-friendly success message
            data: Response data
            feedback: Visual feedback configuration (toast, animation)
            stats_delta: Changed stats for optimistic updates
            status: HTTP status code

        Returns:
            JsonResponse with standardized success format
        """
        response = {
            'success': True,
            'message': message,
            'data': data if data is not None else {},
            'feedback': feedback or {
                'type': 'success',
                'toast': True,
                'message': message
            }
        }

        if stats_delta:
            response['stats_delta'] = stats_delta

        return JsonResponse(response, status=status, encoder=DjangoJSONEncoder)

    @staticmethod
    def error(
        message: str = "An error occurred",
        error_code: str = "GENERAL_ERROR",
        retry: bool = False,
        details: Optional[Dict] = None,
        status: int = 400
    ) -> JsonResponse:
        """
        Error response with helpful messaging.

        Args:
            message: Clear, actionable error message
            error_code: Error code for debugging
            retry: Whether user should retry
            details: Field errors or upstream context
            status: HTTP status code

        Returns:
            JsonResponse with standardized error format
        """
        response = {
            'success': False,
            'error': {
                'message': message,
                'code': error_code,
                'retry': retry
            },
            'feedback': {
                'type': 'error',
                'toast': True,
                'message': message
            }
        }

        if details:
            response['error']['details'] = details

        return JsonResponse(response, status=status)

    @staticmethod
    def celebration(
        achievement: str,
        animation: str = "confetti",
        sound: str = "celebration"
    ) -> Dict:
        """Celebration feedback for milestones."""
        return {
            'type': 'celebration',
            'message': achievement,
            'animation': animation,
            'sound': sound,
            'toast': True
        }


def get_completion_message(status: str) -> str:
    """
    Return celebratory or informational message based on task status.
    """
    messages = {
        'COMPLETED': [
            "Great job! 🎉",
            "Task completed! ✅",
            "You're on fire! 🔥",
            "Keep it up! 💪",
            "Well done! 👏"
        ],
        'TODO': "Task reopened",
        'IN_PROGRESS': "Task in progress",
        'CANCELLED': "Task cancelled",
    }

    if status == 'COMPLETED':
        return random.choice(messages['COMPLETED'])

    return messages.get(status, 'Task updated')
