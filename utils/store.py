"""
Portfolios table gateway (Supabase PostgREST).

Every request resolves one StoreContext (service role, bearer-derived user,
or anonymous) and then runs a single statement against `portfolios`.
No operation spans more than one statement except rename's pre-flight
existence check and the guest retry after a policy rejection on insert.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional
import httpx

from core.auth import try_get_user_id
from core.config import Settings, logger
from core.errors import Conflict, NotFound, StoreError, StoreNotConfigured, ValidationError
from core.http import error_message
from models.portfolio import slug_error

TABLE = "portfolios"

# Postgres insufficient_privilege, returned when a row-level policy rejects a write
POLICY_DENIED = "42501"


class StoreRole(str, Enum):
    SERVICE = "service"
    USER = "user"
    ANON = "anon"


@dataclass(frozen=True)
class StoreContext:
    role: StoreRole
    api_key: str
    access_token: Optional[str] = None
    user_id: Optional[str] = None

    def headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }


@dataclass
class PublishResult:
    slug: str
    updated: bool = False
    is_guest: bool = False


def anonymous_context(cfg: Settings, user_id: Optional[str] = None) -> StoreContext:
    if not cfg.store_configured:
        raise StoreNotConfigured()
    return StoreContext(StoreRole.ANON, cfg.supabase_anon_key, user_id=user_id)


async def resolve_context(client: httpx.AsyncClient, cfg: Settings, access_token: Optional[str] = None,
                          claimed_user_id: Optional[str] = None) -> StoreContext:
    """
    1. service role when configured (bypasses row-level policies)
    2. a valid bearer token -> that user's context, owner = token's user
    3. anonymous, owner = caller-supplied id (unverified)
    """
    if not cfg.store_configured:
        raise StoreNotConfigured()
    claimed = claimed_user_id or None
    if cfg.service_role_configured:
        return StoreContext(StoreRole.SERVICE, cfg.supabase_service_role_key, user_id=claimed)

    if access_token:
        uid = await try_get_user_id(client, cfg, access_token)
        if uid:
            return StoreContext(StoreRole.USER, cfg.supabase_anon_key, access_token=access_token, user_id=uid)
        logger.info("[store] token expired or invalid, using provided userId")

    return anonymous_context(cfg, claimed)


class PortfolioStore:
    def __init__(self, client: httpx.AsyncClient, cfg: Settings):
        if not cfg.store_configured:
            raise StoreNotConfigured()
        self.client = client
        self.cfg = cfg
        self.url = f"{cfg.supabase_url}/rest/v1/{TABLE}"

    async def _request(self, ctx: StoreContext, method: str, params: Optional[Dict[str, str]] = None,
                       payload: Any = None) -> List[Dict[str, Any]]:
        resp = await self.client.request(method, self.url, params=params, headers=ctx.headers(), json=payload)
        if resp.status_code >= 400:
            code = None
            try:
                body = resp.json()
                if isinstance(body, dict):
                    code = body.get("code")
            except ValueError:
                pass
            raise StoreError(resp.status_code, code, error_message(resp) or f"Store error: {resp.status_code}")
        if not resp.content:
            return []
        data = resp.json()
        return data if isinstance(data, list) else [data]

    # ---- writes ----

    async def create(self, ctx: StoreContext, html: str) -> PublishResult:
        payload: Dict[str, Any] = {"html": html}
        if ctx.user_id:
            payload["user_id"] = ctx.user_id
        logger.info(f"[store] Inserting new portfolio for user: {ctx.user_id}")
        try:
            rows = await self._request(ctx, "POST", payload=[payload])
        except StoreError as ex:
            if ex.code != POLICY_DENIED:
                raise
            # one guest retry: anonymous, no owner
            logger.warning(f"[store] insert denied by policy ({ex.message}), retrying as guest")
            rows = await self._request(anonymous_context(self.cfg), "POST", payload=[{"html": html}])
            return PublishResult(slug=self._slug_of(rows), is_guest=True)
        return PublishResult(slug=self._slug_of(rows))

    async def update(self, ctx: StoreContext, slug: str, html: str) -> PublishResult:
        payload: Dict[str, Any] = {"html": html}
        if ctx.user_id:
            payload["user_id"] = ctx.user_id
        logger.info(f"[store] Updating portfolio: {slug} for user: {ctx.user_id}")
        rows = await self._request(ctx, "PATCH", params={"slug": f"eq.{slug}"}, payload=payload)
        if not rows:
            raise NotFound("Portfolio not found")
        return PublishResult(slug=self._slug_of(rows), updated=True)

    async def publish(self, ctx: StoreContext, html: str, slug: Optional[str] = None) -> PublishResult:
        if slug:
            return await self.update(ctx, slug, html)
        return await self.create(ctx, html)

    async def delete(self, ctx: StoreContext, slug: str) -> None:
        logger.info(f"[store] Deleting portfolio: {slug}")
        rows = await self._request(ctx, "DELETE", params={"slug": f"eq.{slug}"})
        if not rows:
            raise NotFound("البورتوفوليو غير موجود")

    async def rename(self, ctx: StoreContext, old_slug: str, new_slug: Any) -> str:
        problem = slug_error(new_slug)
        if problem:
            raise ValidationError(problem)

        existing = await self._request(ctx, "GET", params={"select": "id", "slug": f"eq.{new_slug}"})
        if existing:
            raise Conflict("This URL name is already taken. Please choose another one.")

        logger.info(f"[store] Renaming portfolio from {old_slug} to {new_slug}")
        rows = await self._request(ctx, "PATCH", params={"slug": f"eq.{old_slug}"}, payload={"slug": new_slug})
        if not rows:
            raise NotFound("Portfolio not found")
        return new_slug

    # ---- reads ----

    async def fetch(self, ctx: StoreContext, slug: str) -> Dict[str, Any]:
        rows = await self._request(ctx, "GET", params={"select": "id,html,slug,user_id", "slug": f"eq.{slug}"})
        if not rows:
            raise NotFound("الموقع غير موجود")
        return rows[0]

    async def fetch_html(self, ctx: StoreContext, slug: str) -> str:
        rows = await self._request(ctx, "GET", params={"select": "html", "slug": f"eq.{slug}"})
        if not rows:
            raise NotFound("الموقع غير موجود")
        return rows[0].get("html") or ""

    async def list_by_owner(self, ctx: StoreContext, user_id: str) -> List[Dict[str, Any]]:
        return await self._request(ctx, "GET", params={
            "select": "id,slug,created_at",
            "user_id": f"eq.{user_id}",
            "order": "created_at.desc",
        })

    async def recent_slugs(self, ctx: StoreContext, limit: int = 5) -> List[str]:
        rows = await self._request(ctx, "GET", params={
            "select": "slug",
            "order": "created_at.desc",
            "limit": str(limit),
        })
        return [r.get("slug") for r in rows]

    @staticmethod
    def _slug_of(rows: List[Dict[str, Any]]) -> str:
        if not rows or not rows[0].get("slug"):
            raise StoreError(None, None, "Store did not return the saved portfolio")
        return rows[0]["slug"]
