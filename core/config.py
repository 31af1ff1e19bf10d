import os
import logging
from dataclasses import dataclass
from typing import List
from dotenv import load_dotenv

# Load .env from project root
try:
    load_dotenv(dotenv_path=os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".env")))
except Exception:
    try:
        load_dotenv()
    except Exception:
        pass

# Logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger("portopia")

PROJECT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _env(*names: str, default: str = "") -> str:
    """First non-empty value among several env names (legacy VITE_* names included)."""
    for name in names:
        val = (os.getenv(name) or "").strip().strip('"').strip("'")
        if val:
            return val
    return default


@dataclass(frozen=True)
class Settings:
    # AI providers
    gemini_api_key: str = ""
    gemini_model: str = "gemini-3-flash-preview"
    openrouter_api_key: str = ""
    openrouter_model: str = "google/gemini-2.0-flash-exp:free"
    openrouter_referer: str = "http://localhost:3000"
    azure_endpoint: str = "https://portopiaai.openai.azure.com/"
    azure_api_key: str = ""
    azure_deployment: str = "gpt-4"
    azure_api_version: str = "2024-02-15-preview"

    # Supabase (auth + portfolios table)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""

    # Speech (frontend only)
    azure_speech_key: str = ""
    azure_speech_region: str = "uaenorth"

    http_timeout: float = 120.0
    allowed_origins: tuple = ("*",)
    public_dir: str = os.path.join(PROJECT_DIR, "public")

    @classmethod
    def from_env(cls) -> "Settings":
        origins = _env("ALLOWED_ORIGINS", default="*")
        try:
            timeout = float(_env("HTTP_TIMEOUT_SEC", default="120"))
        except ValueError:
            timeout = 120.0
        return cls(
            gemini_api_key=_env("GEMINI_API_KEY", "VITE_GEMINI_API_KEY"),
            gemini_model=_env("GEMINI_MODEL", default=cls.gemini_model),
            openrouter_api_key=_env("OPENROUTER_API_KEY", "VITE_OPENROUTER_API_KEY"),
            openrouter_model=_env("OPENROUTER_MODEL", "VITE_OPENROUTER_MODEL", default=cls.openrouter_model),
            openrouter_referer=_env("OPENROUTER_REFERER", default=cls.openrouter_referer),
            azure_endpoint=_env("AZURE_OPENAI_ENDPOINT", default=cls.azure_endpoint),
            azure_api_key=_env("AZURE_OPENAI_API_KEY"),
            azure_deployment=_env("AZURE_OPENAI_DEPLOYMENT", default=cls.azure_deployment),
            azure_api_version=_env("AZURE_OPENAI_API_VERSION", default=cls.azure_api_version),
            supabase_url=_env("SUPABASE_URL", "VITE_SUPABASE_URL").rstrip("/"),
            supabase_anon_key=_env("SUPABASE_ANON_KEY", "VITE_SUPABASE_PUBLISHABLE_KEY"),
            supabase_service_role_key=_env("SUPABASE_SERVICE_ROLE_KEY"),
            azure_speech_key=_env("VITE_AZURE_SPEECH_KEY"),
            azure_speech_region=_env("VITE_AZURE_SPEECH_REGION", default=cls.azure_speech_region),
            http_timeout=timeout,
            allowed_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
            public_dir=_env("PUBLIC_DIR", default=os.path.join(PROJECT_DIR, "public")),
        )

    @property
    def azure_configured(self) -> bool:
        return bool(self.azure_endpoint and self.azure_api_key)

    @property
    def openrouter_configured(self) -> bool:
        return bool(self.openrouter_api_key)

    @property
    def gemini_configured(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def service_role_configured(self) -> bool:
        return self.store_configured and bool(self.supabase_service_role_key)

    def missing_store_settings(self) -> List[str]:
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL or VITE_SUPABASE_URL")
        if not self.supabase_anon_key:
            missing.append("SUPABASE_ANON_KEY or VITE_SUPABASE_PUBLISHABLE_KEY")
        return missing


settings = Settings.from_env()


def get_settings() -> Settings:
    """FastAPI dependency; overridden in tests."""
    return settings


def log_startup_summary(cfg: Settings) -> None:
    if cfg.store_configured:
        logger.info("Supabase configured")
        if cfg.service_role_configured:
            logger.info("Supabase service role configured (row-level policies bypassed)")
    else:
        logger.warning("Supabase not configured, missing: " + ", ".join(cfg.missing_store_settings()))

    if cfg.azure_configured:
        logger.info(f"Azure OpenAI configured (deployment={cfg.azure_deployment})")
    else:
        logger.warning("Azure OpenAI credentials not found")
    if cfg.openrouter_configured:
        logger.info(f"OpenRouter configured (model={cfg.openrouter_model})")
    else:
        logger.warning("OpenRouter API key missing")
    if cfg.gemini_configured:
        logger.info(f"Gemini configured (model={cfg.gemini_model})")
    else:
        logger.warning("Gemini API key missing")
