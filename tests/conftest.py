"""
Shared test fixtures.

The IndiaMART API is never called for real: gateway tests use
httpx.MockTransport, queue tests use FakeGateway.
"""

import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from typing import Callable

import httpx
import pytest
import pytest_asyncio

from integrations.indiamart import IndiaMartGateway
from models.agent_settings import AgentSettings
from services.activity_log_service import ActivityLogService
from services.agent_settings_service import AgentSettingsService
from services.queue_runner_service import QueueRunnerService
from tests.factories import FakeGateway, RecordingTransport


# ===================
# QUEUE FIXTURES
# ===================

@pytest.fixture
def activity_log() -> ActivityLogService:
    """Fresh activity log with the default capacity."""
    return ActivityLogService(capacity=50)


@pytest.fixture
def agent_settings_service() -> AgentSettingsService:
    """Settings store with auto start disabled so tests control start()."""
    return AgentSettingsService(initial=AgentSettings(auto_start=False))


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest_asyncio.fixture
async def runner(fake_gateway, activity_log, agent_settings_service):
    """
    Queue runner wired to FakeGateway, no delay between items.

    Usage:
        async def test_something(runner, fake_gateway):
            await runner.enqueue(DraftFactory.create())
    """
    queue_runner = QueueRunnerService(
        gateway=fake_gateway,
        activity_log=activity_log,
        settings_provider=agent_settings_service.snapshot,
        inter_item_delay=0,
    )
    fake_gateway.runner = queue_runner
    queue_runner.start_actor()
    yield queue_runner
    await queue_runner.shutdown()


# ===================
# GATEWAY FIXTURES
# ===================

@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_gateway() -> Callable[[RecordingTransport], IndiaMartGateway]:
    """
    Build an IndiaMartGateway on top of a RecordingTransport.

    Usage:
        def test_something(make_gateway, recording_transport):
            gateway = make_gateway(recording_transport)
    """
    def _make(transport: RecordingTransport) -> IndiaMartGateway:
        return IndiaMartGateway(
            transport=httpx.MockTransport(transport),
            timeout_sec=5,
            default_url="https://catalog.test/product/add",
        )
    return _make


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client(recording_transport):
    """
    FastAPI test client with fresh in-memory services.

    The IndiaMART gateway answers through recording_transport and the
    runner has no delay between items.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/queue")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient

    import integrations.indiamart as indiamart
    import services.activity_log_service as activity_log_module
    import services.agent_settings_service as agent_settings_module
    import services.import_service as import_module
    import services.queue_runner_service as runner_module
    from main import app

    gateway = IndiaMartGateway(
        transport=httpx.MockTransport(recording_transport),
        timeout_sec=5,
        default_url="https://catalog.test/product/add",
    )
    log = ActivityLogService(capacity=50)
    agent_settings = AgentSettingsService(initial=AgentSettings(auto_start=False))
    queue_runner = QueueRunnerService(
        gateway=gateway,
        activity_log=log,
        settings_provider=agent_settings.snapshot,
        inter_item_delay=0,
    )

    indiamart._indiamart_gateway = gateway
    activity_log_module._activity_log_service = log
    agent_settings_module._agent_settings_service = agent_settings
    runner_module._queue_runner_service = queue_runner
    import_module._import_service = None

    with TestClient(app) as client:
        yield client

    indiamart._indiamart_gateway = None
    activity_log_module._activity_log_service = None
    agent_settings_module._agent_settings_service = None
    runner_module._queue_runner_service = None
    import_module._import_service = None
