from pydantic import Field

from coderoom.domains.rooms.schemas import EventPayload


class RunCodePayload(EventPayload):
    code: str
    language_id: int = Field(..., alias="languageId")
