from contextlib import asynccontextmanager
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from chatrelay.config import Settings
from chatrelay.conversation import ConversationConfig, ConversationService
from chatrelay.server.service_container import ServiceConfig, ServiceContainer
from chatrelay.storage import InMemoryMessageStore, MessageStore
from tests.mocks import FailingMessageStore, ScriptedCompletionClient

TEST_SYSTEM_PROMPT = "You are a test assistant."


def _create_test_client(container) -> TestClient:
    from chatrelay.server.api import dependencies
    from chatrelay.server.main import create_app

    @asynccontextmanager
    async def mock_lifespan(app: FastAPI):
        dependencies.set_service_container(container)
        yield
        dependencies.set_service_container(None)

    with patch("chatrelay.server.main.lifespan", mock_lifespan):
        app = create_app()
        return TestClient(app)


def _build_container(store: MessageStore, completion_client) -> ServiceContainer:
    settings = Settings(_env_file=None, store_backend="memory", system_prompt=TEST_SYSTEM_PROMPT)
    container = ServiceContainer(
        ServiceConfig.from_settings(settings),
        store=store,
        completion_client=completion_client,
    )
    container.conversation_service = ConversationService(
        store=store,
        completion_client=completion_client,
        config=container.config.conversation,
    )
    return container


@pytest.fixture
def conversation_config() -> ConversationConfig:
    return ConversationConfig(system_prompt=TEST_SYSTEM_PROMPT, model="test-model")


@pytest.fixture
def store() -> InMemoryMessageStore:
    return InMemoryMessageStore()


@pytest.fixture
def completion_client() -> ScriptedCompletionClient:
    return ScriptedCompletionClient(replies=["Hello!"])


@pytest.fixture
def service(store, completion_client, conversation_config) -> ConversationService:
    return ConversationService(
        store=store, completion_client=completion_client, config=conversation_config
    )


@pytest.fixture
def client(store, completion_client):
    with _create_test_client(_build_container(store, completion_client)) as test_client:
        yield test_client


@pytest.fixture
def client_failing_store():
    store = FailingMessageStore(fail_on=["select", "insert", "delete_all"])
    with _create_test_client(
        _build_container(store, ScriptedCompletionClient())
    ) as test_client:
        yield test_client


@pytest.fixture
def client_no_services():
    with _create_test_client(None) as test_client:
        yield test_client


@pytest.fixture
def client_failing_completion(store):
    from chatrelay.llm import ProviderAPIError

    error = ProviderAPIError(
        'Groq error 500: {"error":"internal"}',
        provider_id="groq",
        status_code=500,
        response_body='{"error":"internal"}',
    )
    completion_client = ScriptedCompletionClient(error=error)
    with _create_test_client(_build_container(store, completion_client)) as test_client:
        yield test_client
