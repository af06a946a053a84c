"""GET /api/health and /api/ai/status — service and language-model backend status."""
import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_llm_client
from integrations.llm_client import LLMClient

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check(llm: LLMClient = Depends(get_llm_client)):
    return {
        "status": "ok",
        "services": {
            "llm": _check_llm(llm),
        },
    }


@router.get("/ai/status")
def ai_status(llm: LLMClient = Depends(get_llm_client)):
    return {"data": {"enabled": llm.enabled}}


def _check_llm(llm: LLMClient) -> dict:
    if not llm.enabled:
        return {"status": "disabled"}
    ok, detail = llm.is_healthy()
    if ok:
        return {"status": "up", "model": detail, "url": llm.base_url}
    return {"status": "down", "error": detail}
