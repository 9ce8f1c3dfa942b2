import pytest
import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

from events_service.config import settings

@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Настройка тестового окружения"""
    # settings уже создан при импорте, поэтому меняем сам объект, а не env
    monkeypatch.setattr(settings, "STORE_BACKEND", "memory")
    monkeypatch.setattr(settings, "SEED_DEMO_EVENTS", False)
    monkeypatch.setattr(settings, "ADMIN_EMAILS", "")
