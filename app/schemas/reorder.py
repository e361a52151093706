import uuid

from pydantic import BaseModel


class ReorderRequest(BaseModel):
    ids: list[uuid.UUID]
