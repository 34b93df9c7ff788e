from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str
