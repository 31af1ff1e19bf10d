from typing import Any, Optional
import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from core.auth import bearer_token
from core.config import Settings, get_settings, logger
from core.errors import NotFound
from core.http import get_http_client
from utils.store import PortfolioStore, anonymous_context, resolve_context

router = APIRouter(tags=["portfolios"])

VIEW_NOT_FOUND = "الموقع غير موجود"


class PublishRequest(BaseModel):
    html: Optional[str] = None
    userId: Optional[str] = None
    slug: Optional[str] = None


class RenameRequest(BaseModel):
    newSlug: Optional[Any] = None


@router.post("/api/publish")
async def publish(
    body: PublishRequest,
    request: Request,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not body.html:
        return JSONResponse({"success": False, "error": "No HTML provided"}, status_code=400)

    ctx = await resolve_context(client, cfg, bearer_token(request), body.userId)
    result = await PortfolioStore(client, cfg).publish(ctx, body.html, body.slug)

    out = {"success": True, "slug": result.slug}
    if result.updated:
        out["updated"] = True
    if result.is_guest:
        out["isGuest"] = True
    return out


@router.get("/api/portfolio/{slug}")
async def get_portfolio(
    slug: str,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    portfolio = await PortfolioStore(client, cfg).fetch(anonymous_context(cfg), slug)
    return {"success": True, "portfolio": portfolio}


@router.delete("/api/portfolio/{slug}")
async def delete_portfolio(
    slug: str,
    request: Request,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    ctx = await resolve_context(client, cfg, bearer_token(request))
    await PortfolioStore(client, cfg).delete(ctx, slug)
    return {"success": True, "message": "تم حذف البورتوفوليو بنجاح"}


@router.put("/api/portfolio/{old_slug}/rename")
async def rename_portfolio(
    old_slug: str,
    body: RenameRequest,
    request: Request,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    ctx = await resolve_context(client, cfg, bearer_token(request))
    new_slug = await PortfolioStore(client, cfg).rename(ctx, old_slug, body.newSlug)
    return {"success": True, "message": "Portfolio renamed successfully", "newSlug": new_slug}


@router.get("/api/user-portfolios/{user_id}")
async def user_portfolios(
    user_id: str,
    request: Request,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    ctx = await resolve_context(client, cfg, bearer_token(request))
    portfolios = await PortfolioStore(client, cfg).list_by_owner(ctx, user_id)
    return {"success": True, "portfolios": portfolios}


@router.get("/v/{slug}")
async def view_portfolio(
    slug: str,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Serve the stored page itself, not JSON."""
    try:
        html = await PortfolioStore(client, cfg).fetch_html(anonymous_context(cfg), slug)
    except NotFound:
        return Response(content=VIEW_NOT_FOUND, media_type="text/plain; charset=utf-8", status_code=404)
    except Exception as ex:
        logger.exception(f"[portfolios.view] {slug}: {ex}")
        return Response(content="خطأ في السيرفر", media_type="text/plain; charset=utf-8", status_code=500)
    return Response(content=html, media_type="text/html")
