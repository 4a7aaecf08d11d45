# backend/pixelforge/schemas/base.py
from datetime import datetime
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")

class BaseSchema(BaseModel):
    """Snake case in Python, camelCase on the wire"""
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True
    )

class TimestampMixin(BaseSchema):
    created_at: datetime
    updated_at: Optional[datetime] = None

class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint"""
    success: bool = True
    message: Optional[str] = None
    count: Optional[int] = None
    data: Optional[T] = None
