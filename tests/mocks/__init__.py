from tests.mocks.llm import ScriptedCompletionClient
from tests.mocks.storage import (
    FailingMessageStore,
    MockConnection,
    MockHTTPSession,
    MockPool,
    MockResponse,
    make_record,
)

__all__ = [
    "FailingMessageStore",
    "MockConnection",
    "MockHTTPSession",
    "MockPool",
    "MockResponse",
    "ScriptedCompletionClient",
    "make_record",
]
