"""
Preferences Service

Defaults are created on first read so every user always has a row.
"""
from typing import Dict

from core.models import UserPreferences
from core.exceptions import ValidationError
from core.serializers import PreferencesSerializer, validate_or_raise


def serialize_preferences(prefs: UserPreferences) -> Dict:
    return {
        'timezone': prefs.timezone,
        'location': prefs.location,
        'latitude': prefs.latitude,
        'longitude': prefs.longitude,
        'show_hijri_date': prefs.show_hijri_date,
        'prayer_reminder_minutes': prefs.prayer_reminder_minutes,
        'ramadan_mode': prefs.ramadan_mode,
        'language': prefs.language,
    }


class PreferencesService:

    @staticmethod
    def get_or_create(user) -> UserPreferences:
        prefs, _ = UserPreferences.objects.get_or_create(user=user)
        return prefs

    @staticmethod
    def get_preferences(user) -> Dict:
        return serialize_preferences(PreferencesService.get_or_create(user))

    @staticmethod
    def update_preferences(user, data: Dict) -> Dict:
        """
        Raises:
            ValidationError: If nothing recognizable was sent or a value is invalid
        """
        validated = validate_or_raise(PreferencesSerializer, data, partial=True)
        if not validated:
            raise ValidationError('settings', 'No settings provided')

        prefs = PreferencesService.get_or_create(user)
        for field, value in validated.items():
            setattr(prefs, field, value)
        prefs.save()

        return serialize_preferences(prefs)
