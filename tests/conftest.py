"""
Test configuration for the shop server.
"""
import os
from decimal import Decimal

import django
import pytest


def pytest_configure():
    """Configure Django settings for testing."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'shop_server.settings')
    django.setup()


@pytest.fixture
def customer_info():
    return {
        'name': 'Rahim Uddin',
        'email': 'rahim@example.com',
        'phone': '+8801711000000',
        'address': '12 Lake Road, Dhaka',
    }


@pytest.fixture
def customer():
    from tests.factories import UserFactory
    return UserFactory()


@pytest.fixture
def staff_user():
    from tests.factories import StaffUserFactory
    return StaffUserFactory()


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def staff_client(api_client, staff_user):
    api_client.force_authenticate(user=staff_user)
    return api_client


@pytest.fixture
def sample_product():
    """Create a sample product for testing."""
    from tests.factories import ProductFactory
    return ProductFactory(price=Decimal('80.00'), inventory=50)
