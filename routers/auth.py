from typing import Optional
import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core.auth import bearer_token, get_user, sign_in, sign_out, sign_up
from core.config import Settings, get_settings, logger
from core.http import get_http_client

router = APIRouter(prefix="/api/auth", tags=["auth"])


class Credentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    fullName: Optional[str] = None


def _missing_credentials() -> JSONResponse:
    return JSONResponse({"success": False, "error": "Email and password are required"}, status_code=400)


@router.post("/signup")
async def signup(
    body: Credentials,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not body.email or not body.password:
        return _missing_credentials()
    data = await sign_up(client, cfg, body.email, body.password, body.fullName or "")
    logger.info(f"[auth.signup] account created for {body.email}")
    return {
        "success": True,
        "message": "Account created successfully! Please check your email to verify your account.",
        "user": data["user"],
        "session": data["session"],
    }


@router.post("/login")
async def login(
    body: Credentials,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not body.email or not body.password:
        return _missing_credentials()
    data = await sign_in(client, cfg, body.email, body.password)
    return {"success": True, "message": "Login successful!", "user": data["user"], "session": data["session"]}


@router.post("/logout")
async def logout(
    request: Request,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    await sign_out(client, cfg, bearer_token(request))
    return {"success": True, "message": "Logged out successfully"}


@router.get("/user")
async def current_user(
    request: Request,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    token = bearer_token(request)
    if not token:
        return JSONResponse({"success": False, "error": "No authorization header"}, status_code=401)
    user = await get_user(client, cfg, token)
    return {"success": True, "user": user}
