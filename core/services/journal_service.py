"""
Journal Service

Entries store three fixed gratitude slots; clients see them as a list.
"""
from typing import Dict, List

from core.models import JournalEntry
from core.exceptions import ResourceNotFoundError
from core.serializers import JournalEntrySerializer, validate_or_raise
from core.utils.constants import DEFAULT_MOOD, GRATITUDE_SLOTS
from core.utils.logging_utils import log_with_context
from core.utils.time_utils import today as local_today


def serialize_entry(entry: JournalEntry) -> Dict:
    return {
        'id': entry.id,
        'date': entry.date.isoformat(),
        'gratitude': entry.gratitude,
        'reflection': entry.reflection or '',
        'mood': entry.mood or DEFAULT_MOOD,
        'achievements': [],
        'created_at': entry.created_at.isoformat() if entry.created_at else None,
    }


def gratitude_slots(items) -> List:
    """Map a validated list onto exactly three slots; blanks become None."""
    items = list(items or [])[:GRATITUDE_SLOTS]
    items += [None] * (GRATITUDE_SLOTS - len(items))
    return [item.strip() if item else None for item in items]


class JournalService:

    def _get_owned_entry(self, user, entry_id: str) -> JournalEntry:
        try:
            return JournalEntry.objects.get(id=entry_id, user=user)
        except JournalEntry.DoesNotExist:
            raise ResourceNotFoundError('Journal entry', entry_id)

    def list_entries(self, user) -> List[Dict]:
        entries = JournalEntry.objects.filter(user=user).order_by('-date', '-created_at')
        return [serialize_entry(e) for e in entries]

    def create_entry(self, user, data: Dict) -> Dict:
        """
        Raises:
            ValidationError: Malformed date, non-list gratitude, or a
                non-text reflection or mood
        """
        validated = validate_or_raise(JournalEntrySerializer, data)
        g1, g2, g3 = gratitude_slots(validated.get('gratitude'))

        entry = JournalEntry.objects.create(
            user=user,
            date=validated.get('date') or local_today(),
            gratitude1=g1,
            gratitude2=g2,
            gratitude3=g3,
            reflection=validated.get('reflection') or None,
            mood=validated.get('mood') or DEFAULT_MOOD,
        )

        log_with_context('info', 'Journal entry created', user_id=user.id,
                         entry_id=entry.id, date=entry.date.isoformat())
        return serialize_entry(entry)

    def update_entry(self, user, entry_id: str, data: Dict) -> Dict:
        entry = self._get_owned_entry(user, entry_id)
        validated = validate_or_raise(JournalEntrySerializer, data, partial=True)

        if 'gratitude' in validated:
            entry.gratitude1, entry.gratitude2, entry.gratitude3 = gratitude_slots(
                validated['gratitude']
            )
        if 'reflection' in validated:
            entry.reflection = validated['reflection'] or None
        if 'mood' in validated:
            entry.mood = validated['mood'] or DEFAULT_MOOD
        if validated.get('date'):
            entry.date = validated['date']

        entry.save()
        log_with_context('info', 'Journal entry updated', user_id=user.id,
                         entry_id=entry.id, fields=sorted(validated))
        return serialize_entry(entry)

    def delete_entry(self, user, entry_id: str) -> Dict:
        entry = self._get_owned_entry(user, entry_id)
        entry.delete()

        log_with_context('info', 'Journal entry deleted', user_id=user.id, entry_id=entry_id)
        return {'id': entry_id}
