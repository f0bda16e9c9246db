"""FastAPI app factory for the recording endpoint stub."""

from __future__ import annotations

import logging
from collections import deque
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trigger_dispatcher import __version__
from trigger_dispatcher.dispatch.engine import BATCH_PATH, SINGLE_PATH
from trigger_dispatcher.server.config import ServerSettings
from trigger_dispatcher.server.models import (
    AckResponse,
    BatchPayload,
    ReceivedTrigger,
    TriggerPayload,
)

logger = logging.getLogger(__name__)


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    settings = settings or ServerSettings()

    app = FastAPI(
        title="Trigger Recording Endpoint (stub)",
        version=__version__,
        description="Records trigger codes posted by the trigger dispatcher.",
    )
    app.state.settings = settings

    received: deque[ReceivedTrigger] = deque(maxlen=settings.max_records)
    app.state.received = received

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(SINGLE_PATH, response_model=AckResponse)
    def set_data(payload: TriggerPayload) -> AckResponse:
        received.append(
            ReceivedTrigger(value=payload.trigger_value, received_at=datetime.now(UTC))
        )
        logger.info("Trigger received", extra={"value": payload.trigger_value})
        return AckResponse(received=[payload.trigger_value])

    @app.post(BATCH_PATH, response_model=AckResponse)
    def set_data_batch(payload: BatchPayload) -> AckResponse:
        now = datetime.now(UTC)
        for value in payload.trigger_values:
            received.append(ReceivedTrigger(value=value, received_at=now, source="batch"))
        logger.info("Trigger batch received", extra={"values": payload.trigger_values})
        return AckResponse(received=payload.trigger_values)

    @app.get("/received", response_model=list[ReceivedTrigger])
    def list_received() -> list[ReceivedTrigger]:
        return list(received)

    return app
