from typing import Any
from pydantic import BaseModel


class StoredDocument(BaseModel):
    id: str
    fields: dict[str, Any]
