import os

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import logger, settings, log_startup_summary
from core.errors import RelayError

# Routers
from routers import ai, auth, portfolios

app = FastAPI(title="Portopia")

# ---- CORS setup ----
_origins = list(settings.allowed_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials="*" not in _origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- Request logging ----
@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"{request.method} {request.url.path}")
    return await call_next(request)


# ---- Error rendering ----
@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    if exc.status_code >= 500:
        logger.error(f"[{request.method} {request.url.path}] {exc.message}")
    else:
        logger.info(f"[{request.method} {request.url.path}] {exc.status_code} {exc.message}")
    return JSONResponse({"success": False, "error": exc.message}, status_code=exc.status_code)


PAGE_NOT_FOUND = "صفحة غير موجودة"


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    # unknown pages outside /api get the frontend's plain-text 404
    if exc.status_code == 404 and not request.url.path.startswith("/api"):
        return PlainTextResponse(PAGE_NOT_FOUND, status_code=404)
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"[{request.method} {request.url.path}] unhandled error: {exc}")
    return JSONResponse({"success": False, "error": str(exc)}, status_code=500)


@app.on_event("startup")
async def _startup_summary():
    log_startup_summary(settings)


# ---- Include routers ----
app.include_router(ai.router)
app.include_router(auth.router)
app.include_router(portfolios.router)


@app.get("/")
async def root():
    return RedirectResponse(url="/index.html")


# ---- Static mount (frontend build) ----
if os.path.isdir(settings.public_dir):
    app.mount("/", StaticFiles(directory=settings.public_dir), name="public")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
