# tests/unit/test_execution.py
# Ретрансляция запусков в Judge0 через подмененный транспорт

import json
from typing import Callable, List

import httpx
import pytest

from coderoom.domains.execution.services import (
    FAILURE_MESSAGE, MISSING_KEY_MESSAGE, NO_OUTPUT_MESSAGE, TIMEOUT_MESSAGE,
    ExecutionService, select_output
)

JUDGE0_URL = "https://judge0.test/submissions"


def status(status_id: int, description: str) -> dict:
    return {"id": status_id, "description": description}


class FakeJudge0:
    """Judge0: выдает токен и по очереди отдает заданные ответы опроса"""

    def __init__(self, polls: List[dict], submit_status: int = 201):
        self.polls = list(polls)
        self.submit_status = submit_status
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            return httpx.Response(self.submit_status, json={"token": "tok-1"})
        body = self.polls.pop(0) if len(self.polls) > 1 else self.polls[0]
        return httpx.Response(200, json=body)

    @property
    def poll_count(self) -> int:
        return sum(1 for request in self.requests if request.method == "GET")


@pytest.fixture
def execution_settings(settings):
    return settings.model_copy(update={"rapidapi_key": "test-key", "judge0_url": JUDGE0_URL})


@pytest.fixture
def make_service(execution_settings):
    def _make(handler: Callable[[httpx.Request], httpx.Response], settings=None) -> ExecutionService:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ExecutionService(settings or execution_settings, client)

    return _make


class TestSelectOutput:
    """Приоритет текста результата"""

    @pytest.mark.parametrize("submission, expected", [
        ({"stdout": "1\n", "stderr": "warn", "compile_output": "diag"}, "1\n"),
        ({"stdout": "", "stderr": "Traceback", "compile_output": "diag"}, "Traceback"),
        ({"stdout": None, "stderr": None, "compile_output": "error: ';' expected"}, "error: ';' expected"),
        ({"stdout": None, "stderr": "", "compile_output": None}, NO_OUTPUT_MESSAGE),
        ({}, NO_OUTPUT_MESSAGE),
    ])
    def test_priority(self, submission, expected):
        assert select_output(submission) == expected


class TestExecutionService:

    @pytest.mark.asyncio
    async def test_missing_key_skips_network(self, settings, make_service):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        service = make_service(handler, settings=settings)
        result = await service.run("print(1)", 71)

        assert result.output == MISSING_KEY_MESSAGE
        assert result.to_payload() == {"output": MISSING_KEY_MESSAGE}
        assert calls == []

    @pytest.mark.asyncio
    async def test_polls_until_processed(self, make_service):
        judge0 = FakeJudge0([
            {"status": status(1, "In Queue")},
            {"status": status(2, "Processing")},
            {"status": status(3, "Accepted"), "stdout": "1\n", "stderr": None, "compile_output": None},
        ])
        service = make_service(judge0)

        result = await service.run("print(1)", 71)

        assert result.output == "1\n"
        assert result.status == "Accepted"
        assert judge0.poll_count == 3

    @pytest.mark.asyncio
    async def test_submission_request_shape(self, make_service):
        judge0 = FakeJudge0([{"status": status(3, "Accepted"), "stdout": "ok"}])
        service = make_service(judge0)

        await service.run("console.log('ok')", 63)

        submit, poll = judge0.requests
        assert submit.method == "POST"
        assert submit.url.params["base64_encoded"] == "false"
        assert submit.url.params["fields"] == "*"
        assert submit.headers["X-RapidAPI-Key"] == "test-key"
        assert submit.headers["X-RapidAPI-Host"] == "judge0-ce.p.rapidapi.com"
        assert json.loads(submit.content) == {
            "language_id": 63, "source_code": "console.log('ok')", "stdin": ""
        }
        assert poll.url.path == "/submissions/tok-1"
        assert poll.headers["X-RapidAPI-Key"] == "test-key"

    @pytest.mark.asyncio
    async def test_error_status_reports_stderr(self, make_service):
        judge0 = FakeJudge0([{
            "status": status(11, "Runtime Error (NZEC)"),
            "stdout": None,
            "stderr": "ZeroDivisionError: division by zero",
        }])
        service = make_service(judge0)

        result = await service.run("1/0", 71)

        assert result.output == "ZeroDivisionError: division by zero"
        assert result.status == "Runtime Error (NZEC)"

    @pytest.mark.asyncio
    async def test_gives_up_after_max_polls(self, make_service, execution_settings):
        judge0 = FakeJudge0([{"status": status(2, "Processing")}])
        service = make_service(judge0, settings=execution_settings.model_copy(update={"execution_max_polls": 3}))

        result = await service.run("while True: pass", 71)

        assert result.output == TIMEOUT_MESSAGE
        assert result.status == "Timeout"
        assert judge0.poll_count == 3

    @pytest.mark.asyncio
    async def test_provider_http_error(self, make_service):
        judge0 = FakeJudge0([], submit_status=503)
        service = make_service(judge0)

        result = await service.run("print(1)", 71)

        assert result.output == FAILURE_MESSAGE
        assert judge0.poll_count == 0

    @pytest.mark.asyncio
    async def test_provider_unreachable(self, make_service):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = await make_service(handler).run("print(1)", 71)

        assert result.output == FAILURE_MESSAGE

    @pytest.mark.asyncio
    async def test_malformed_submit_response(self, make_service):
        def handler(request):
            return httpx.Response(201, json={"error": "bad language"})

        result = await make_service(handler).run("print(1)", 9999)

        assert result.output == FAILURE_MESSAGE
