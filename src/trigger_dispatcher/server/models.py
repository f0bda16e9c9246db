"""Pydantic models for the recording endpoint stub."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class TriggerPayload(BaseModel):
    trigger_value: int


class BatchPayload(BaseModel):
    trigger_values: list[int] = Field(min_length=1)


class ReceivedTrigger(BaseModel):
    value: int
    received_at: datetime
    source: Literal["single", "batch"] = "single"


class AckResponse(BaseModel):
    status: Literal["ok"] = "ok"
    received: list[int]
