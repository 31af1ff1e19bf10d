"""
Portfolio store gateway against a scripted PostgREST / GoTrue.
"""
import httpx
import pytest

from conftest import body_of, make_settings
from core.errors import Conflict, NotFound, StoreError, StoreNotConfigured, ValidationError
from utils.store import PortfolioStore, StoreContext, StoreRole, anonymous_context, resolve_context

TABLE_PATH = "/rest/v1/portfolios"
USER_PATH = "/auth/v1/user"


def rows(*items):
    return httpx.Response(200, json=list(items))


class TestResolveContext:

    async def test_service_role_preferred(self, upstream, http):
        cfg = make_settings(supabase_service_role_key="service-key")
        ctx = await resolve_context(http, cfg, "user-token", "claimed-id")

        assert ctx.role is StoreRole.SERVICE
        assert ctx.api_key == "service-key"
        assert ctx.user_id == "claimed-id"
        # no identity lookup when the service role is available
        assert upstream.requests == []

    async def test_valid_bearer_becomes_owner(self, upstream, http, settings):
        upstream.on(f"GET {USER_PATH}", httpx.Response(200, json={"id": "user-123"}))
        ctx = await resolve_context(http, settings, "good-token", "someone-else")

        assert ctx.role is StoreRole.USER
        assert ctx.user_id == "user-123"
        assert ctx.headers()["Authorization"] == "Bearer good-token"
        assert upstream.requests[0].headers["authorization"] == "Bearer good-token"

    async def test_expired_bearer_falls_back_to_claimed_id(self, upstream, http, settings):
        upstream.on(f"GET {USER_PATH}", httpx.Response(401, json={"msg": "JWT expired"}))
        ctx = await resolve_context(http, settings, "old-token", "claimed-id")

        assert ctx.role is StoreRole.ANON
        assert ctx.user_id == "claimed-id"
        assert ctx.headers()["Authorization"] == "Bearer anon-key"

    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="<html>gateway</html>"),
        httpx.Response(200, json=["not", "a", "user"]),
    ])
    async def test_unreadable_user_lookup_falls_back(self, upstream, http, settings, response):
        upstream.on(f"GET {USER_PATH}", response)
        ctx = await resolve_context(http, settings, "tok", "claimed-id")

        assert ctx.role is StoreRole.ANON
        assert ctx.user_id == "claimed-id"

    async def test_no_token(self, upstream, http, settings):
        ctx = await resolve_context(http, settings, None, None)
        assert ctx.role is StoreRole.ANON
        assert ctx.user_id is None
        assert upstream.requests == []

    async def test_store_not_configured(self, http):
        with pytest.raises(StoreNotConfigured):
            await resolve_context(http, make_settings(supabase_url=""), None)


class TestPublish:

    async def test_create_returns_store_slug(self, upstream, http, settings):
        upstream.on(f"POST {TABLE_PATH}", rows({"id": 1, "slug": "k3x9ab2q", "html": "<html></html>"}))
        store = PortfolioStore(http, settings)
        result = await store.publish(anonymous_context(settings, "u1"), "<html></html>")

        assert result.slug == "k3x9ab2q"
        assert not result.updated and not result.is_guest
        req = upstream.requests[0]
        assert body_of(req) == [{"html": "<html></html>", "user_id": "u1"}]
        assert req.headers["prefer"] == "return=representation"

    async def test_policy_denial_retries_once_as_guest(self, upstream, http, settings):
        calls = []

        def insert(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(403, json={
                    "code": "42501",
                    "message": 'new row violates row-level security policy for table "portfolios"',
                })
            return rows({"id": 2, "slug": "guest-slug"})

        upstream.on(f"POST {TABLE_PATH}", insert)
        ctx = StoreContext(StoreRole.USER, "anon-key", access_token="tok", user_id="u1")
        result = await PortfolioStore(http, settings).create(ctx, "<html></html>")

        assert result.is_guest
        assert result.slug == "guest-slug"
        assert len(calls) == 2
        assert body_of(calls[1]) == [{"html": "<html></html>"}]
        assert calls[1].headers["authorization"] == "Bearer anon-key"

    async def test_other_insert_errors_surface(self, upstream, http, settings):
        upstream.on(f"POST {TABLE_PATH}", httpx.Response(400, json={"code": "23502", "message": "null value"}))
        with pytest.raises(StoreError) as info:
            await PortfolioStore(http, settings).create(anonymous_context(settings), "<p>")
        assert info.value.code == "23502"
        assert len(upstream.requests) == 1

    async def test_guest_retry_failure_surfaces(self, upstream, http, settings):
        upstream.on(f"POST {TABLE_PATH}", httpx.Response(403, json={"code": "42501", "message": "denied"}))
        with pytest.raises(StoreError):
            await PortfolioStore(http, settings).create(anonymous_context(settings), "<p>")
        assert len(upstream.requests) == 2

    async def test_update_existing_slug(self, upstream, http, settings):
        upstream.on(f"PATCH {TABLE_PATH}", rows({"id": 1, "slug": "my-site"}))
        result = await PortfolioStore(http, settings).publish(anonymous_context(settings), "<html>2</html>", "my-site")

        assert result.updated and result.slug == "my-site"
        req = upstream.requests[0]
        assert req.url.params["slug"] == "eq.my-site"
        assert body_of(req) == {"html": "<html>2</html>"}

    async def test_update_missing_slug(self, upstream, http, settings):
        upstream.on(f"PATCH {TABLE_PATH}", rows())
        with pytest.raises(NotFound):
            await PortfolioStore(http, settings).update(anonymous_context(settings), "ghost", "<p>")


class TestRename:

    @pytest.mark.parametrize("new_slug", ["a b", "ab", "UPPER", "x" * 51, "", None, 42, "under_score"])
    async def test_invalid_slug_rejected_before_io(self, upstream, http, settings, new_slug):
        with pytest.raises(ValidationError):
            await PortfolioStore(http, settings).rename(anonymous_context(settings), "a", new_slug)
        assert upstream.requests == []

    async def test_taken_slug_conflicts(self, upstream, http, settings):
        upstream.on(f"GET {TABLE_PATH}", rows({"id": 7}))
        with pytest.raises(Conflict):
            await PortfolioStore(http, settings).rename(anonymous_context(settings), "old-one", "taken")
        assert upstream.calls_to(f"PATCH {TABLE_PATH}") == []

    async def test_missing_old_slug(self, upstream, http, settings):
        upstream.on(f"GET {TABLE_PATH}", rows()).on(f"PATCH {TABLE_PATH}", rows())
        with pytest.raises(NotFound):
            await PortfolioStore(http, settings).rename(anonymous_context(settings), "ghost", "fresh-name")

    async def test_rename_updates_slug(self, upstream, http, settings):
        upstream.on(f"GET {TABLE_PATH}", rows()).on(f"PATCH {TABLE_PATH}", rows({"id": 1, "slug": "fresh-name"}))
        new_slug = await PortfolioStore(http, settings).rename(anonymous_context(settings), "old-one", "fresh-name")

        assert new_slug == "fresh-name"
        patch = upstream.calls_to(f"PATCH {TABLE_PATH}")[0]
        assert patch.url.params["slug"] == "eq.old-one"
        assert body_of(patch) == {"slug": "fresh-name"}


class TestReadsAndDelete:

    async def test_fetch(self, upstream, http, settings):
        upstream.on(f"GET {TABLE_PATH}", rows({"id": 1, "slug": "s1", "html": "<p>", "user_id": None}))
        portfolio = await PortfolioStore(http, settings).fetch(anonymous_context(settings), "s1")
        assert portfolio["slug"] == "s1"
        assert upstream.requests[0].url.params["select"] == "id,html,slug,user_id"

    async def test_fetch_missing(self, upstream, http, settings):
        upstream.on(f"GET {TABLE_PATH}", rows())
        with pytest.raises(NotFound):
            await PortfolioStore(http, settings).fetch(anonymous_context(settings), "nope")

    async def test_delete_missing(self, upstream, http, settings):
        upstream.on(f"DELETE {TABLE_PATH}", rows())
        with pytest.raises(NotFound):
            await PortfolioStore(http, settings).delete(anonymous_context(settings), "nope")

    async def test_list_by_owner_newest_first(self, upstream, http, settings):
        upstream.on(f"GET {TABLE_PATH}", rows({"id": 2, "slug": "b"}, {"id": 1, "slug": "a"}))
        items = await PortfolioStore(http, settings).list_by_owner(anonymous_context(settings), "u1")

        assert [i["slug"] for i in items] == ["b", "a"]
        params = upstream.requests[0].url.params
        assert params["user_id"] == "eq.u1"
        assert params["order"] == "created_at.desc"
