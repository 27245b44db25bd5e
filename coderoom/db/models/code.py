from sqlalchemy import Column, String, Text

from coderoom.db.base import BaseModel


class CodeDocument(BaseModel):
    """Текущее содержимое редактора комнаты, одна запись на room_id"""
    __tablename__ = "code_documents"

    room_id = Column(String(255), unique=True, index=True, nullable=False)
    content = Column(Text, nullable=False, default="")
    language = Column(String(64), nullable=False, default="javascript")
