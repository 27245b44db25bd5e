from sqlalchemy import Column, String, Text

from coderoom.db.base import BaseModel


class Snapshot(BaseModel):
    __tablename__ = "snapshots"

    room_id = Column(String(255), index=True, nullable=False)
    content = Column(Text, nullable=False)
    author = Column(String(255), nullable=False)
