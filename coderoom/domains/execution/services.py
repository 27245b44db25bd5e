from typing import Any, Dict, Optional
import asyncio
import logging

import httpx

from coderoom.core.config import Settings
from coderoom.domains.execution.entities import ExecutionResult

logger = logging.getLogger(__name__)

# Статусы Judge0: 1 - In Queue, 2 - Processing, 3 и выше - обработано
STATUS_ACCEPTED = 3

MISSING_KEY_MESSAGE = "Error: Compiler API key is missing."
FAILURE_MESSAGE = "Error running code. Please check your code or server logs."
TIMEOUT_MESSAGE = "Error: Execution timed out."
NO_OUTPUT_MESSAGE = "No output."


def select_output(submission: Dict[str, Any]) -> str:
    """Выбор текста результата: stdout, затем stderr, затем ошибки компиляции"""
    for field in ("stdout", "stderr", "compile_output"):
        value = submission.get(field)
        if value:
            return value
    return NO_OUTPUT_MESSAGE


class ExecutionService:
    """Запуск кода через внешний сервис Judge0 (submit, затем опрос)"""

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "content-type": "application/json",
            "X-RapidAPI-Key": self.settings.rapidapi_key or "",
            "X-RapidAPI-Host": self.settings.rapidapi_host,
        }

    @property
    def params(self) -> Dict[str, str]:
        return {"base64_encoded": "false", "fields": "*"}

    async def run(self, code: str, language_id: int) -> ExecutionResult:
        if not self.settings.rapidapi_key:
            logger.error("RAPIDAPI_KEY is not set in the environment.")
            return ExecutionResult(output=MISSING_KEY_MESSAGE)

        try:
            token = await self._submit(code, language_id)
            submission = await self._poll(token)
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.exception(f"Error running code with Judge0: {e}")
            return ExecutionResult(output=FAILURE_MESSAGE)

        if submission is None:
            logger.warning(f"Judge0 submission did not finish after {self.settings.execution_max_polls} polls")
            return ExecutionResult(output=TIMEOUT_MESSAGE, status="Timeout")

        return ExecutionResult(
            output=select_output(submission),
            status=submission["status"].get("description")
        )

    async def _submit(self, code: str, language_id: int) -> str:
        response = await self.client.post(
            self.settings.judge0_url,
            params=self.params,
            headers=self.headers,
            json={"language_id": language_id, "source_code": code, "stdin": ""}
        )
        response.raise_for_status()
        token = response.json()["token"]
        if not token:
            raise ValueError("Judge0 returned an empty submission token")
        return token

    async def _poll(self, token: str) -> Optional[Dict[str, Any]]:
        """Опрос статуса до завершения; None, если лимит опросов исчерпан"""
        url = f"{self.settings.judge0_url.rstrip('/')}/{token}"
        for attempt in range(self.settings.execution_max_polls):
            if attempt:
                await asyncio.sleep(self.settings.execution_poll_interval)

            response = await self.client.get(url, params=self.params, headers=self.headers)
            response.raise_for_status()
            submission = response.json()
            if submission["status"]["id"] >= STATUS_ACCEPTED:
                return submission
        return None
