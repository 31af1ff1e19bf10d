from typing import Any, Dict, Optional
import httpx
from fastapi import Request

from core.config import Settings, logger
from core.errors import AuthError, StoreNotConfigured
from core.http import error_message


def bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("authorization") or request.headers.get("Authorization")
    if not auth_header:
        return None
    if auth_header.lower().startswith("bearer "):
        token = auth_header.split(" ", 1)[1].strip()
    else:
        token = auth_header.strip()
    return token or None


def _auth_url(cfg: Settings, path: str) -> str:
    if not cfg.store_configured:
        raise StoreNotConfigured()
    return f"{cfg.supabase_url}/auth/v1/{path.lstrip('/')}"


def _headers(cfg: Settings, access_token: Optional[str] = None) -> Dict[str, str]:
    return {
        "apikey": cfg.supabase_anon_key,
        "Authorization": f"Bearer {access_token or cfg.supabase_anon_key}",
        "Content-Type": "application/json",
    }


def _raise_for_auth(resp: httpx.Response, status_code: int) -> None:
    if resp.status_code >= 400:
        raise AuthError(error_message(resp) or f"Auth error: {resp.status_code}", status_code)


async def sign_up(client: httpx.AsyncClient, cfg: Settings, email: str, password: str, full_name: str = "") -> Dict[str, Any]:
    resp = await client.post(
        _auth_url(cfg, "signup"),
        headers=_headers(cfg),
        json={"email": email, "password": password, "data": {"full_name": full_name or ""}},
    )
    _raise_for_auth(resp, 400)
    data = resp.json() or {}
    # With email confirmation on, GoTrue returns the bare user; otherwise a session.
    if "access_token" in data:
        return {"user": data.get("user"), "session": data}
    return {"user": data, "session": None}


async def sign_in(client: httpx.AsyncClient, cfg: Settings, email: str, password: str) -> Dict[str, Any]:
    resp = await client.post(
        _auth_url(cfg, "token"),
        params={"grant_type": "password"},
        headers=_headers(cfg),
        json={"email": email, "password": password},
    )
    _raise_for_auth(resp, 401)
    data = resp.json() or {}
    return {"user": data.get("user"), "session": data}


async def sign_out(client: httpx.AsyncClient, cfg: Settings, access_token: Optional[str]) -> None:
    if not access_token:
        return
    resp = await client.post(_auth_url(cfg, "logout"), headers=_headers(cfg, access_token))
    _raise_for_auth(resp, 400)


async def get_user(client: httpx.AsyncClient, cfg: Settings, access_token: str) -> Dict[str, Any]:
    resp = await client.get(_auth_url(cfg, "user"), headers=_headers(cfg, access_token))
    _raise_for_auth(resp, 401)
    try:
        user = resp.json()
    except ValueError:
        raise AuthError("Invalid response from auth service", 401)
    if not isinstance(user, dict):
        raise AuthError("Invalid response from auth service", 401)
    return user


async def try_get_user_id(client: httpx.AsyncClient, cfg: Settings, access_token: str) -> Optional[str]:
    """Resolve the acting user for a bearer token; None when expired or unreachable."""
    try:
        user = await get_user(client, cfg, access_token)
    except AuthError as ex:
        logger.info(f"[auth] token rejected: {ex.message}")
        return None
    except httpx.HTTPError as ex:
        logger.warning(f"[auth] user lookup failed: {ex}")
        return None
    uid = user.get("id") if isinstance(user, dict) else None
    return str(uid) if uid else None
