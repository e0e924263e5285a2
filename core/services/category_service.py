"""
Category Service

Task categories are per-user and unique by name.
"""
from typing import Dict, List

from django.db import IntegrityError, transaction

from core.models import Category
from core.exceptions import DuplicateError
from core.serializers import CategoryCreateSerializer, validate_or_raise
from core.services.task_service import serialize_category


class CategoryService:

    def list_categories(self, user) -> List[Dict]:
        return [serialize_category(c) for c in Category.objects.filter(user=user)]

    def create_category(self, user, data: Dict) -> Dict:
        """
        Raises:
            ValidationError: If name is missing or color is malformed
            DuplicateError: If the user already has a category with this name
        """
        validated = validate_or_raise(CategoryCreateSerializer, data)

        if Category.objects.filter(user=user, name__iexact=validated['name']).exists():
            raise DuplicateError('category', validated['name'])

        try:
            with transaction.atomic():
                category = Category.objects.create(user=user, **validated)
        except IntegrityError:
            raise DuplicateError('category', validated['name'])

        return serialize_category(category)
