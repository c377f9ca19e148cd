from datetime import datetime
from typing import Any
from sqlalchemy import JSON, String, DateTime
from sqlalchemy.orm import declarative_base, Mapped, mapped_column

from actioncues.config import get_settings


settings = get_settings()

Base = declarative_base()


class TaskDocumentModel(Base):
    __tablename__ = settings.TASK_COLLECTION

    id: Mapped[str] = mapped_column(String, primary_key=True)
    fields: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __init__(self, id: str, fields: dict[str, Any], inserted_at: datetime):
        self.id = id
        self.fields = fields
        self.inserted_at = inserted_at
