# app/transport/schemas.py
from pydantic import BaseModel, Field


class EnhanceImageIn(BaseModel):
    url: str | None = Field(default=None, max_length=4096)


class EnhanceImageOut(BaseModel):
    original_url: str | None = None
    image_data: str
    image_size: str


class ErrorOut(BaseModel):
    error: str
    message: str


class HealthOut(BaseModel):
    status: str
    message: str
    timestamp: str
