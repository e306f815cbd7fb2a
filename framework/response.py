from typing import Any, Optional
from pydantic import BaseModel
from fastapi.encoders import jsonable_encoder

class ResponseModel(BaseModel):
    """Uniform response envelope: {code, message, data}."""
    code: int = 200
    message: str = "success"
    data: Optional[Any] = None

    @staticmethod
    def success(data: Any = None):
        return {"code": 200, "message": "success", "data": data}

    @staticmethod
    def paged(items: list, count: int):
        """Envelope for one page of results plus the total matching count."""
        return {"code": 200, "message": "success", "data": {"items": jsonable_encoder(items), "count": count}}

    @staticmethod
    def fail(code: int = 400, message: str = "error", data: Any = None):
        return {"code": code, "message": message, "data": data}
