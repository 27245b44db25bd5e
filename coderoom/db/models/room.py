from sqlalchemy import Column, String

from coderoom.db.base import BaseModel


class Room(BaseModel):
    __tablename__ = "rooms"

    room_id = Column(String(255), unique=True, index=True, nullable=False)
