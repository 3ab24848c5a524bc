"""
Unit tests for the request logging middleware.
"""

import pytest
from starlette.requests import Request
from starlette.responses import Response

from app.core import middleware
from app.core.middleware import RequestLoggingMiddleware


class RecordingLogger:
    def __init__(self):
        self.calls = []

    def info(self, event, **kw):
        self.calls.append(("info", event, kw))

    def error(self, event, **kw):
        self.calls.append(("error", event, kw))

    def exception(self, event, **kw):
        self.calls.append(("exception", event, kw))


def make_request() -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/api/boom",
            "headers": [],
            "query_string": b"",
            "client": ("127.0.0.1", 5000),
            "server": ("test", 80),
            "scheme": "http",
        }
    )


@pytest.fixture
def recorder(monkeypatch):
    recorder = RecordingLogger()
    monkeypatch.setattr(middleware, "logger", recorder)
    return recorder


async def test_failed_request_is_logged_once_without_traceback(recorder):
    async def call_next(request):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await RequestLoggingMiddleware(app=None).dispatch(make_request(), call_next)

    levels = [level for level, _, _ in recorder.calls]
    assert "exception" not in levels
    [(_, event, fields)] = [call for call in recorder.calls if call[0] == "error"]
    assert event == "Request failed"
    assert fields["path"] == "/api/boom"
    assert "boom" in fields["error"]


async def test_completed_request_logs_status(recorder):
    async def call_next(request):
        return Response(status_code=204)

    response = await RequestLoggingMiddleware(app=None).dispatch(make_request(), call_next)

    assert response.status_code == 204
    _, event, fields = recorder.calls[-1]
    assert event == "Request completed"
    assert fields["status_code"] == 204
