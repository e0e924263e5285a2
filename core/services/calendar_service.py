"""
Calendar Service
"""
from typing import Dict, List

from core.models import CalendarEvent
from core.exceptions import ValidationError, InvalidDateRangeError
from core.serializers import CalendarEventSerializer, validate_or_raise
from core.utils.time_utils import parse_datetime


def serialize_event(event: CalendarEvent) -> Dict:
    return {
        'id': event.id,
        'title': event.title,
        'date': event.date.isoformat(),
        'event_type': event.event_type,
    }


class CalendarService:

    def list_events(self, user, start=None, end=None) -> List[Dict]:
        qs = CalendarEvent.objects.filter(user=user)

        start_dt = parse_datetime(start) if start else None
        end_dt = parse_datetime(end) if end else None
        if start and start_dt is None:
            raise ValidationError('start', 'Invalid start date')
        if end and end_dt is None:
            raise ValidationError('end', 'Invalid end date')
        if start_dt and end_dt and start_dt > end_dt:
            raise InvalidDateRangeError(start, end)

        if start_dt:
            qs = qs.filter(date__gte=start_dt)
        if end_dt:
            qs = qs.filter(date__lte=end_dt)

        return [serialize_event(e) for e in qs.order_by('date')]

    def create_event(self, user, data: Dict) -> Dict:
        validated = validate_or_raise(CalendarEventSerializer, data)
        event = CalendarEvent.objects.create(user=user, **validated)
        return serialize_event(event)
