import logging

import pytest

from chatrelay.conversation import ConversationService
from chatrelay.storage import PostgresMessageStore
from chatrelay.utils.logging import log_event, set_correlation_id, track
from chatrelay.utils.logging.smart_logger import _sanitize_value
from tests.mocks import MockPool, ScriptedCompletionClient, make_record


@pytest.fixture
def events(caplog):
    """Structured events emitted on the chatrelay logger during a test."""
    logger = logging.getLogger("chatrelay")
    previous_level, previous_propagate = logger.level, logger.propagate
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addHandler(caplog.handler)
    try:
        yield lambda: [
            record.structured_data
            for record in caplog.records
            if hasattr(record, "structured_data")
        ]
    finally:
        logger.removeHandler(caplog.handler)
        logger.setLevel(previous_level)
        logger.propagate = previous_propagate


def _find(events, event_name: str, operation: str):
    return [
        data
        for data in events
        if data["event"] == event_name and data.get("operation") == operation
    ]


class TestLogEvent:
    def test_event_carries_name_data_and_correlation_id(self, events):
        set_correlation_id("req-123")

        log_event("history_cleared", {"owner": "u1"})

        data = events()[-1]
        assert data["event"] == "history_cleared"
        assert data["owner"] == "u1"
        assert data["correlation_id"] == "req-123"


class TestTrack:
    @pytest.mark.asyncio
    async def test_chat_text_is_logged_as_length(self, events, service):
        await service.chat(owner="u1", text="secret words")

        started = _find(events(), "operation_started", "chat_turn")
        assert started
        assert started[0]["arg_owner"] == "u1"
        assert started[0]["arg_text"] == "<12 chars>"

        for data in events():
            assert all("secret words" not in str(value) for value in data.values())

    @pytest.mark.asyncio
    async def test_store_calls_log_owner_and_role(self, events, conversation_config):
        pool = MockPool()
        pool.connection.fetchrow.return_value = make_record(
            "u1", "user", "hello", None, id=1
        )
        store = PostgresMessageStore(db_pool=pool, auto_migrate=False)
        service = ConversationService(
            store, ScriptedCompletionClient(replies=["hi"]), conversation_config
        )

        await service.chat(owner="u1", text="hello")

        inserts = _find(events(), "operation_started", "store_insert")
        assert [(data["arg_owner"], data["arg_role"]) for data in inserts] == [
            ("u1", "user"),
            ("u1", "assistant"),
        ]
        assert all("arg_content" not in data for data in inserts)

    @pytest.mark.asyncio
    async def test_failure_is_logged_and_reraised(self, events):
        @track(operation="failing_insert")
        async def failing_insert():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await failing_insert()

        failed = _find(events(), "operation_failed", "failing_insert")
        assert failed[0]["error_type"] == "RuntimeError"
        assert failed[0]["error_message"] == "boom"
        assert failed[0]["success"] is False

    @pytest.mark.asyncio
    async def test_sensitive_arguments_are_redacted(self, events):
        @track(operation="initialize_client")
        async def initialize_client(api_key: str, base_url: str):
            return True

        await initialize_client(api_key="gsk-live-key", base_url="https://api.groq.com")

        started = _find(events(), "operation_started", "initialize_client")[0]
        assert started["arg_api_key"] == "[REDACTED]"
        assert started["arg_base_url"] == "https://api.groq.com"

    def test_sync_functions_are_rejected(self):
        with pytest.raises(TypeError):

            @track()
            def not_async():
                return None


class TestSanitizeValue:
    @pytest.mark.parametrize("key", ["api_key", "token", "auth_header", "password"])
    def test_sensitive_keys(self, key):
        assert _sanitize_value(key, "value") == "[REDACTED]"

    def test_message_bodies_logged_by_size(self):
        assert _sanitize_value("content", "hello") == "<5 chars>"
        assert _sanitize_value("messages", [1, 2, 3]) == "<3 items>"

    def test_long_strings_truncated(self):
        value = _sanitize_value("owner", "x" * 150)

        assert value == "x" * 100 + "..."

    def test_non_scalar_values(self):
        assert _sanitize_value("config", object()) == "<object>"
