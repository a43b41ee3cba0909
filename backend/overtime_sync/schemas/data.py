"""Schemas for the overtime dataset endpoints."""
from __future__ import annotations

from pydantic import BaseModel


class DataResponse(BaseModel):
    data: dict[str, dict[str, str]]
