"""
Provider fallback chain.

The preferred provider (Gemini when unrecognized) is tried first, then the others in the fixed
azure -> openrouter -> gemini order. Unconfigured providers are skipped
without a request; any failure (or empty text) moves to the next one.
The first non-empty text wins.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional
import httpx

from core.config import Settings, logger
from core.errors import AllProvidersExhausted, ProviderError
from utils.providers import GEMINI, PROVIDERS, PROVIDER_LABELS, call_provider, is_configured

EXHAUSTED_MESSAGE = "جميع محركات الذكاء الاصطناعي مشغولة حالياً، يرجى المحاولة بعد دقيقة واحدة."
NOTICE_JOINER = " و "


@dataclass
class GenerationResult:
    text: str
    provider: str
    fallback_info: Optional[str] = None
    attempted: List[str] = field(default_factory=list)


def normalize_provider(preferred: Any) -> str:
    """Unrecognized or empty identifiers are treated as Gemini."""
    name = str(preferred or "").strip().lower()
    return name if name in PROVIDERS else GEMINI


def attempt_order(preferred: Any) -> List[str]:
    preferred = normalize_provider(preferred)
    return [preferred] + [p for p in PROVIDERS if p != preferred]


def switch_notice(failed: str, replacement: str) -> str:
    return (
        f"{PROVIDER_LABELS[failed]} لم يعمل حالياً، "
        f"تم التحويل تلقائياً إلى {PROVIDER_LABELS[replacement]} لضمان استمرارية الخدمة."
    )


def build_notice(failed: List[str], winner: str) -> Optional[str]:
    if not failed:
        return None
    hops = failed + [winner]
    return NOTICE_JOINER.join(switch_notice(hops[i], hops[i + 1]) for i in range(len(failed)))


async def generate_with_fallback(
    client: httpx.AsyncClient,
    cfg: Settings,
    preferred: Any,
    prompt: str,
    system: Optional[str] = None,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
) -> GenerationResult:
    order = attempt_order(preferred)
    failed: List[str] = []
    attempted: List[str] = []

    for provider in order:
        if not is_configured(cfg, provider):
            logger.info(f"[ai.fallback] {provider} not configured, skipping")
            failed.append(provider)
            continue

        attempted.append(provider)
        try:
            text = await call_provider(
                client, cfg, provider, prompt,
                system=system, max_tokens=max_tokens, temperature=temperature,
            )
        except ProviderError as ex:
            logger.warning(f"[ai.fallback] {provider} failed: {ex.message}")
            failed.append(provider)
            continue

        if not (text or "").strip():
            logger.warning(f"[ai.fallback] {provider} returned empty text")
            failed.append(provider)
            continue

        return GenerationResult(
            text=text,
            provider=provider,
            fallback_info=build_notice(failed, provider),
            attempted=attempted,
        )

    logger.error(f"[ai.fallback] all providers failed (attempted={attempted or 'none'})")
    raise AllProvidersExhausted(EXHAUSTED_MESSAGE, attempted)
