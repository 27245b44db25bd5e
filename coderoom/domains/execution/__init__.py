from coderoom.domains.execution.entities import ExecutionResult
from coderoom.domains.execution.schemas import RunCodePayload

__all__ = ["ExecutionResult", "RunCodePayload"]
