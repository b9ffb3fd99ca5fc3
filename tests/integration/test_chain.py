import json

import httpx
import pytest

from httpchain_sessions import ExecuteParams, InputError, RequestError
from httpchain_sessions.constants import LogEntryType, SessionStatus
from httpchain_sessions.models import ChainLogEntry, ChainResult, RequestLogEntry, SingleResult

BASE_URL = "http://api.test"


def execute(runner, **params):
    return runner.execute(ExecuteParams.model_validate(params))


@pytest.fixture
def todo_api(mock_api):
    mock_api.add("GET", "/todos/1", {"status_code": 200, "json": {"userId": 1, "id": 1, "title": "delectus", "completed": False}})
    return mock_api


@pytest.fixture
def auth_api(mock_api):
    def me(request: httpx.Request) -> httpx.Response:
        if request.headers.get("authorization") != "Bearer abc123":
            return httpx.Response(401, json={"error": "unauthorized"})
        return httpx.Response(200, json={"id": 7, "name": "John"})

    def echo(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"received": request.content.decode()})

    mock_api.add("POST", "/login", {"status_code": 200, "json": {"token": "abc123", "user": {"id": 7}}})
    mock_api.add("GET", "/me", me)
    mock_api.add("GET", "/users/7", {"status_code": 200, "json": {"id": 7, "name": "John"}})
    mock_api.add("POST", "/echo", echo)
    return mock_api


class TestSingleRequest:
    def test_body_match(self, runner, todo_api):
        result = execute(runner, url=f"{BASE_URL}/todos/1", expect={"status": 200, "contentType": "application/json", "body": {"userId": 1, "id": 1}})

        assert isinstance(result, SingleResult)
        assert result.ok is True
        assert result.status == 200
        assert result.status_text == "OK"
        assert result.body_validation.matched is True
        assert result.body_validation.reason == "Partial/exact body match succeeded."

    def test_body_mismatch(self, runner, todo_api):
        result = execute(runner, url=f"{BASE_URL}/todos/1", expect={"body": {"userId": 999}})

        assert result.ok is False
        assert result.body_validation.matched is False
        assert result.body_validation.reason == "Partial/exact body match failed."

    def test_logged_as_single(self, runner, store, todo_api):
        result = execute(runner, sessionId="single-session", method="GET", url=f"{BASE_URL}/todos/1", expect={"status": 200})

        session = store.get("single-session")
        assert result.session_id == "single-session"
        assert session.status == SessionStatus.RUNNING
        assert len(session.logs) == 1

        logged = session.logs[0]
        assert isinstance(logged, RequestLogEntry)
        assert logged.type == LogEntryType.SINGLE
        assert logged.request.url == f"{BASE_URL}/todos/1"
        assert logged.response.body["title"] == "delectus"
        assert logged.expectations.status == 200
        assert logged.validation.status is True

    def test_generated_session_id(self, runner, store, todo_api):
        first = execute(runner, url=f"{BASE_URL}/todos/1")
        second = execute(runner, url=f"{BASE_URL}/todos/1")

        assert first.session_id
        assert first.session_id != second.session_id
        assert store.get(first.session_id) is not None

    def test_sessions_accumulate(self, runner, store, todo_api):
        for _ in range(3):
            execute(runner, sessionId="s", url=f"{BASE_URL}/todos/1")

        logs = store.get("s").logs
        assert len(logs) == 3
        assert [entry.timestamp for entry in logs] == sorted(entry.timestamp for entry in logs)

    def test_missing_url(self, runner, store, mock_api):
        with pytest.raises(InputError, match="'url' is required"):
            execute(runner, sessionId="no-url", method="GET")

        assert store.get("no-url") is None
        assert mock_api.requests == []

    def test_transport_error(self, runner, store, mock_api):
        mock_api.add("GET", "/down", httpx.ConnectError("Connection refused"))

        with pytest.raises(RequestError):
            execute(runner, sessionId="down", url=f"{BASE_URL}/down")

        assert store.get("down").logs == []


class TestChain:
    def test_login_then_authorized_request(self, runner, auth_api):
        result = execute(
            runner,
            chain=[
                {"name": "login", "method": "POST", "url": f"{BASE_URL}/login", "data": {"username": "test"}, "extract": {"token": "token"}},
                {"name": "getUser", "url": f"{BASE_URL}/me", "headers": {"Authorization": "Bearer {{login.token}}"}, "expect": {"status": 200}},
            ],
        )

        assert isinstance(result, ChainResult)
        assert [step.name for step in result.results] == ["login", "getUser"]
        assert result.results[0].extracted == {"token": "abc123"}
        assert result.results[1].status == 200
        assert result.results[1].validation.status is True
        assert auth_api.requests[1].headers["authorization"] == "Bearer abc123"

    def test_flat_extracted_names(self, runner, auth_api):
        execute(
            runner,
            chain=[
                {"name": "login", "method": "POST", "url": f"{BASE_URL}/login", "extract": {"token": "token", "userId": "user.id"}},
                {"name": "me", "url": f"{BASE_URL}/me", "headers": {"Authorization": "Bearer {{ token }}"}},
                {"name": "user", "url": f"{BASE_URL}/users/{{{{userId}}}}"},
            ],
        )

        assert auth_api.requests[1].headers["authorization"] == "Bearer abc123"
        assert auth_api.requests[2].url.path == "/users/7"

    def test_step_bundle_addressing(self, runner, auth_api):
        execute(
            runner,
            chain=[
                {"name": "login", "method": "POST", "url": f"{BASE_URL}/login"},
                {"name": "user", "url": f"{BASE_URL}/users/{{{{login.body.user.id}}}}"},
                {"name": "echo", "method": "POST", "url": f"{BASE_URL}/echo", "data": "{{user.status}} {{user.statusText}} {{user.contentType}}"},
            ],
        )

        assert auth_api.requests[1].url.path == "/users/7"
        assert auth_api.requests[2].content.decode() == "200 OK application/json"

    def test_structured_data_not_templated(self, runner, auth_api):
        execute(
            runner,
            chain=[
                {"name": "login", "method": "POST", "url": f"{BASE_URL}/login", "extract": {"token": "token"}},
                {"name": "echo", "method": "POST", "url": f"{BASE_URL}/echo", "data": {"token": "{{token}}"}},
            ],
        )

        assert json.loads(auth_api.requests[1].content) == {"token": "{{token}}"}

    def test_logs_steps_then_chain(self, runner, store, auth_api):
        result = execute(
            runner,
            sessionId="chain-session",
            chain=[
                {"name": "login", "method": "POST", "url": f"{BASE_URL}/login", "extract": {"token": "token", "missing": "nope.nothing"}},
                {"name": "me", "url": f"{BASE_URL}/me", "headers": {"Authorization": "Bearer {{login.token}}"}},
            ],
        )

        session = store.get("chain-session")
        assert result.session_id == "chain-session"
        assert [entry.type for entry in session.logs] == ["request", "request", "chain"]
        assert [entry.name for entry in session.logs[:2]] == ["login", "me"]
        assert session.logs[0].extracted == {"token": "abc123"}
        assert session.logs[1].request.headers == {"Authorization": "Bearer abc123"}

        chain_entry = session.logs[2]
        assert isinstance(chain_entry, ChainLogEntry)
        assert chain_entry.steps == result.results

        assert session.status == SessionStatus.COMPLETED
        assert session.end_time is not None
        assert session.execution_time_ms >= 0
        timestamps = [entry.timestamp for entry in session.logs]
        assert timestamps == sorted(timestamps)

    def test_default_expectation(self, runner, auth_api):
        result = execute(
            runner,
            chain=[
                {"name": "login", "method": "POST", "url": f"{BASE_URL}/login"},
                {"name": "me", "url": f"{BASE_URL}/me"},
                {"name": "me-again", "url": f"{BASE_URL}/me", "expect": {"status": 401}},
            ],
            expect={"status": 200, "contentType": "application/json"},
        )

        assert [step.validation.status for step in result.results] == [True, False, True]

    def test_transport_error_aborts(self, runner, store, mock_api):
        mock_api.add("GET", "/first", {"status_code": 200, "json": {"ok": True}})
        mock_api.add("GET", "/second", httpx.ConnectError("Connection refused"))
        mock_api.add("GET", "/third", {"status_code": 200, "json": {}})

        with pytest.raises(RequestError, match="connection error"):
            execute(
                runner,
                sessionId="broken",
                chain=[
                    {"name": "first", "url": f"{BASE_URL}/first"},
                    {"name": "second", "url": f"{BASE_URL}/second"},
                    {"name": "third", "url": f"{BASE_URL}/third"},
                ],
            )

        session = store.get("broken")
        assert [entry.type for entry in session.logs] == ["request"]
        assert session.logs[0].name == "first"
        assert session.status == SessionStatus.FAILED
        assert [request.url.path for request in mock_api.requests] == ["/first", "/second"]

    def test_validation_failure_does_not_abort(self, runner, auth_api):
        result = execute(
            runner,
            chain=[
                {"name": "me", "url": f"{BASE_URL}/me", "expect": {"status": 200}},
                {"name": "login", "method": "POST", "url": f"{BASE_URL}/login", "expect": {"bodyRegex": "abc123"}},
            ],
        )

        assert result.results[0].validation.status is False
        assert result.results[1].body_validation.matched is True

    def test_duplicate_step_names_last_write_wins(self, runner, mock_api):
        mock_api.add("GET", "/a", {"status_code": 200, "json": {"v": "first"}})
        mock_api.add("GET", "/b", {"status_code": 200, "json": {"v": "second"}})
        mock_api.add("POST", "/echo", lambda request: httpx.Response(200, text=request.content.decode()))

        result = execute(
            runner,
            chain=[
                {"name": "same", "url": f"{BASE_URL}/a"},
                {"name": "same", "url": f"{BASE_URL}/b"},
                {"name": "echo", "method": "POST", "url": f"{BASE_URL}/echo", "data": "{{same.body.v}}"},
            ],
        )

        assert result.results[2].body == "second"

    def test_step_name_overrides_extracted_name(self, runner, auth_api):
        result = execute(
            runner,
            chain=[
                {"name": "token", "method": "POST", "url": f"{BASE_URL}/login", "extract": {"token": "token"}},
                {"name": "echo", "method": "POST", "url": f"{BASE_URL}/echo", "data": "{{token.status}}|{{token.token}}"},
            ],
        )

        assert result.results[1].body == {"received": "200|abc123"}

    def test_empty_chain(self, runner, store):
        with pytest.raises(InputError):
            execute(runner, sessionId="empty", chain=[])

        assert store.get("empty") is None
