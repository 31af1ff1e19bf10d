"""
Outbound HTTP client for AI providers, Supabase Auth and the portfolios table
"""
from typing import AsyncIterator
import httpx
from fastapi import Depends

from core.config import Settings, get_settings


async def get_http_client(cfg: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    """
    Dependency for FastAPI routes to get an outbound client
    Usage:
        @router.post("/items")
        async def create(client: httpx.AsyncClient = Depends(get_http_client)):
            ...
    """
    async with httpx.AsyncClient(timeout=cfg.http_timeout) as client:
        yield client


def error_message(resp: httpx.Response) -> str:
    """Best-effort message from an upstream JSON error body."""
    try:
        data = resp.json()
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""
    err = data.get("error")
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    for key in ("message", "msg", "error_description"):
        if data.get(key):
            return str(data[key])
    if isinstance(err, str):
        return err
    return ""
