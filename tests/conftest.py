from unittest.mock import Mock

import pytest
import requests
from fastapi.testclient import TestClient

from vidforge.app import VidForgeApp
from vidforge.utils.config import (
    AuthSettings,
    GenerationSettings,
    HistorySettings,
    LoggingSettings,
    Settings,
)

from .helpers import UPSTREAM_URL


@pytest.fixture
def settings():
    return Settings(
        logging=LoggingSettings(file_path=None),
        auth=AuthSettings(seed_demo_user=False),
        history=HistorySettings(seed_demo=False),
        generation=GenerationSettings(
            endpoint=UPSTREAM_URL,
            model="test-model",
            api_key="test-key",
            customer_id="cus_test",
        ),
    )


@pytest.fixture
def http_session():
    return Mock(spec=requests.Session)


@pytest.fixture
def vidforge(settings, http_session):
    instance = VidForgeApp(settings, http_session=http_session)
    instance.initialize(configure_logging=False)
    yield instance
    instance.shutdown()


@pytest.fixture
def client(vidforge):
    from web.main import create_app

    return TestClient(create_app(vidforge))
