from __future__ import annotations

import logging

from fastapi import APIRouter

from app.chat.contracts import CopilotRequest, CopilotResponse
from app.chat.router import route_message
from app.domain.capabilities import ACTION_REGISTRY

router = APIRouter(prefix="/chat", tags=["chat"])
logger = logging.getLogger(__name__)


@router.post("/route", response_model=CopilotResponse)
def chat_route(req: CopilotRequest) -> CopilotResponse:
    resp = route_message(req)
    logger.info("chat routed kind=%s", resp.kind.value)
    return resp


@router.get("/capabilities")
def chat_capabilities() -> dict:
    return {
        "capabilities": [cap.model_dump(mode="json") for cap in ACTION_REGISTRY.values()],
    }
