"""
Text-generation providers: Azure OpenAI, OpenRouter and Google Gemini.

Each call is exactly one HTTP request. Failures surface as NotConfigured,
UpstreamHTTPError or MalformedResponse; moving to another provider is the
caller's job (see utils.fallback).
"""
from typing import Any, Dict, Optional
import httpx

from core.config import Settings
from core.errors import NotConfigured, UpstreamHTTPError, MalformedResponse
from core.http import error_message

AZURE = "azure"
OPENROUTER = "openrouter"
GEMINI = "gemini"

# Fixed fallback precedence
PROVIDERS = (AZURE, OPENROUTER, GEMINI)

PROVIDER_LABELS = {
    AZURE: "Azure AI",
    OPENROUTER: "OpenRouter",
    GEMINI: "Gemini",
}

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."
OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


def is_configured(cfg: Settings, provider: str) -> bool:
    if provider == AZURE:
        return cfg.azure_configured
    if provider == OPENROUTER:
        return cfg.openrouter_configured
    if provider == GEMINI:
        return cfg.gemini_configured
    return False


def provider_status(cfg: Settings) -> Dict[str, Any]:
    return {
        "gemini": cfg.gemini_configured,
        "azure": cfg.azure_configured,
        "openrouter": cfg.openrouter_configured,
        "models": {
            "gemini": f"Gemini ({cfg.gemini_model})",
            "azure": f"Azure OpenAI ({cfg.azure_deployment})",
            "openrouter": f"OpenRouter ({cfg.openrouter_model})",
        },
    }


async def _post_json(client: httpx.AsyncClient, provider: str, url: str, headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
    try:
        resp = await client.post(url, headers=headers, json=payload)
    except httpx.HTTPError as ex:
        raise UpstreamHTTPError(provider, None, f"{provider} request failed: {ex}") from ex

    if resp.status_code < 200 or resp.status_code >= 300:
        raise UpstreamHTTPError(provider, resp.status_code, error_message(resp) or None)

    try:
        data = resp.json()
    except ValueError as ex:
        raise MalformedResponse(provider, f"{provider} returned a non-JSON body") from ex
    if not isinstance(data, dict):
        raise MalformedResponse(provider)
    return data


def _first_choice_text(provider: str, data: Dict[str, Any]) -> str:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise MalformedResponse(provider, error_message_from(data) or None)
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content or ""


def error_message_from(data: Dict[str, Any]) -> str:
    err = data.get("error")
    if isinstance(err, dict):
        return str(err.get("message") or "")
    return ""


async def call_azure(client: httpx.AsyncClient, cfg: Settings, prompt: str, system: str,
                     max_tokens: int = 2000, temperature: float = 0.7) -> str:
    if not cfg.azure_configured:
        raise NotConfigured(AZURE)
    url = (
        f"{cfg.azure_endpoint.rstrip('/')}/openai/deployments/{cfg.azure_deployment}"
        f"/chat/completions?api-version={cfg.azure_api_version}"
    )
    headers = {"Content-Type": "application/json", "api-key": cfg.azure_api_key}
    payload = {
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    data = await _post_json(client, AZURE, url, headers, payload)
    return _first_choice_text(AZURE, data)


async def call_openrouter(client: httpx.AsyncClient, cfg: Settings, prompt: str, system: str,
                          max_tokens: int = 2000, temperature: float = 0.7) -> str:
    if not cfg.openrouter_configured:
        raise NotConfigured(OPENROUTER)
    headers = {
        "Authorization": f"Bearer {cfg.openrouter_api_key}",
        "HTTP-Referer": cfg.openrouter_referer,
        "X-Title": "AI Portfolio Generator",
        "Content-Type": "application/json",
    }
    payload = {
        "model": cfg.openrouter_model,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    data = await _post_json(client, OPENROUTER, OPENROUTER_URL, headers, payload)
    return _first_choice_text(OPENROUTER, data)


async def call_gemini(client: httpx.AsyncClient, cfg: Settings, prompt: str, system: str,
                      max_tokens: int = 20480, temperature: float = 0.2) -> str:
    if not cfg.gemini_configured:
        raise NotConfigured(GEMINI)
    headers = {"Content-Type": "application/json", "x-goog-api-key": cfg.gemini_api_key}
    payload = {
        "system_instruction": {"parts": [{"text": system}]},
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            # low temperature keeps generated code consistent
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        },
    }
    data = await _post_json(client, GEMINI, GEMINI_URL.format(model=cfg.gemini_model), headers, payload)
    try:
        return data["candidates"][0]["content"]["parts"][0].get("text") or ""
    except (KeyError, IndexError, TypeError, AttributeError):
        raise MalformedResponse(GEMINI, error_message_from(data) or None)


_CALLERS = {
    AZURE: call_azure,
    OPENROUTER: call_openrouter,
    GEMINI: call_gemini,
}


async def call_provider(client: httpx.AsyncClient, cfg: Settings, provider: str, prompt: str,
                        system: Optional[str] = None, max_tokens: Optional[int] = None,
                        temperature: Optional[float] = None) -> str:
    """
    Uniform entry point. max_tokens/temperature tune the chat-completion
    providers only; Gemini keeps its own generation config (0.2, 20480 tokens).
    """
    caller = _CALLERS.get(provider)
    if caller is None:
        raise ValueError(f"unknown provider: {provider}")
    if provider == GEMINI:
        return await caller(client, cfg, prompt, system or DEFAULT_SYSTEM_PROMPT)
    kwargs: Dict[str, Any] = {}
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    if temperature is not None:
        kwargs["temperature"] = temperature
    return await caller(client, cfg, prompt, system or DEFAULT_SYSTEM_PROMPT, **kwargs)
