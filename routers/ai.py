from typing import Any, Dict, Optional
import httpx
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core.config import Settings, get_settings, logger
from core.http import get_http_client
from utils.fallback import generate_with_fallback
from utils.providers import AZURE, GEMINI, OPENROUTER, provider_status
from utils import prompts
from utils.sanitize import extract_fenced_block, looks_like_document, parse_json_payload, strip_code_fences

router = APIRouter(prefix="/api", tags=["ai"])


class ChatRequest(BaseModel):
    message: Optional[str] = None
    provider: Optional[Any] = None


class ExtractRequest(BaseModel):
    prompt: Optional[str] = None


class EditRequest(BaseModel):
    html: Optional[str] = None
    prompt: Optional[str] = None


class EnhanceRequest(BaseModel):
    html: Optional[str] = None
    designPrompt: Optional[str] = None


class LegacyGenerateRequest(BaseModel):
    prompt: Optional[str] = None


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=400)


@router.get("/ai-status")
async def ai_status(cfg: Settings = Depends(get_settings)):
    return provider_status(cfg)


@router.get("/config")
async def frontend_config(cfg: Settings = Depends(get_settings)):
    return {
        "azureSpeechKey": cfg.azure_speech_key or None,
        "azureSpeechRegion": cfg.azure_speech_region,
    }


@router.post("/ai/chat")
async def ai_chat(
    body: ChatRequest,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not body.message:
        return _bad_request("Message is required")

    result = await generate_with_fallback(
        client, cfg, body.provider or AZURE, body.message,
        system=prompts.CHAT_SYSTEM, max_tokens=2000,
    )
    return {
        "success": True,
        "response": result.text,
        "fallbackInfo": result.fallback_info,
        "provider": result.provider,
    }


@router.post("/extract-data")
async def extract_data(
    body: ExtractRequest,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    result = await generate_with_fallback(
        client, cfg, GEMINI, prompts.extract_prompt(body.prompt or ""),
        system=prompts.EXTRACT_SYSTEM,
    )
    try:
        data = parse_json_payload(result.text)
    except ValueError:
        logger.warning(f"[ai.extract] unparseable JSON from {result.provider}")
        return {"success": False, "error": "Failed to parse extracted data"}
    return {"success": True, "data": data}


@router.post("/generate-portfolio")
async def generate_portfolio(
    payload: Dict[str, Any] = Body(...),
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    result = await generate_with_fallback(
        client, cfg, payload.get("provider") or OPENROUTER, prompts.portfolio_prompt(payload),
        system=prompts.DESIGNER_SYSTEM, max_tokens=8000,
    )
    return {"success": True, "html": strip_code_fences(result.text), "fallbackInfo": result.fallback_info}


@router.post("/edit-portfolio")
async def edit_portfolio(
    body: EditRequest,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not body.html or not body.prompt:
        return _bad_request("HTML and prompt are required")

    result = await generate_with_fallback(
        client, cfg, GEMINI, prompts.edit_prompt(body.html, body.prompt),
        system=prompts.EDIT_SYSTEM,
    )
    html = extract_fenced_block(result.text)
    if not looks_like_document(html):
        # forwarded unchanged; the caller may end up saving a fragment
        logger.warning(f"[ai.edit] {result.provider} returned HTML without a document marker")
    return {"success": True, "html": html}


@router.post("/enhance-portfolio")
async def enhance_portfolio(
    body: EnhanceRequest,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not body.html:
        return _bad_request("HTML code is required")

    result = await generate_with_fallback(
        client, cfg, GEMINI, prompts.enhance_prompt(body.html, body.designPrompt),
        system=prompts.DESIGNER_SYSTEM,
    )
    return {"success": True, "html": strip_code_fences(result.text)}


@router.post("/generate")
async def legacy_generate(
    body: LegacyGenerateRequest,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Older frontend builds expect an OpenAI-style envelope."""
    result = await generate_with_fallback(
        client, cfg, GEMINI, prompts.legacy_prompt(body.prompt),
        system=prompts.LEGACY_SYSTEM,
    )
    return {"choices": [{"message": {"content": strip_code_fences(result.text)}}]}
