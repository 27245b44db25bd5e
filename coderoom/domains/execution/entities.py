from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ExecutionResult:
    output: str
    status: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"output": self.output}
        if self.status is not None:
            payload["status"] = self.status
        return payload
