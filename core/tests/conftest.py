"""
Pytest configuration and fixtures for Daily Priority API tests.

This module provides reusable fixtures for testing.
"""
import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken


@pytest.fixture(autouse=True)
def clear_cache():
    """LocMemCache outlives a test; start every test cold."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Returns an API client instance."""
    return APIClient()


@pytest.fixture
def user(db):
    """Creates and returns a test user."""
    User = get_user_model()
    return User.objects.create_user(
        username='testuser',
        email='test@example.com',
        password='testpass123',
        first_name='Test',
        last_name='User',
    )


@pytest.fixture
def other_user(db):
    """Creates and returns another test user for access control tests."""
    User = get_user_model()
    return User.objects.create_user(
        username='otheruser',
        email='other@example.com',
        password='otherpass123'
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Returns a session-authenticated API client."""
    api_client.force_login(user)
    return api_client


@pytest.fixture
def jwt_client(api_client, user):
    """Returns a client that authenticates with a Bearer access token."""
    token = RefreshToken.for_user(user).access_token
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return api_client
