"""
Error taxonomy shared by the AI relay and the portfolio store.
Every error renders as {"success": false, "error": message} with its status_code.
"""
from typing import Optional, Sequence


class RelayError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# ---- AI providers ----

class ProviderError(RelayError):
    """Failure of a single provider call. Recovered by the fallback chain."""

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider


class NotConfigured(ProviderError):
    def __init__(self, provider: str):
        super().__init__(provider, f"{provider} is not configured")


class UpstreamHTTPError(ProviderError):
    def __init__(self, provider: str, status: Optional[int], message: Optional[str] = None):
        self.status = status
        if not message:
            message = f"{provider} API error: {status}" if status is not None else f"{provider} request failed"
        super().__init__(provider, message)


class MalformedResponse(ProviderError):
    def __init__(self, provider: str, message: Optional[str] = None):
        super().__init__(provider, message or f"Invalid response from {provider}")


class AllProvidersExhausted(RelayError):
    status_code = 500

    def __init__(self, message: str, attempted: Sequence[str] = ()):
        super().__init__(message)
        self.attempted = list(attempted)


# ---- Store / identity ----

class StoreNotConfigured(RelayError):
    status_code = 500

    def __init__(self, message: str = "Supabase is not configured"):
        super().__init__(message)


class StoreError(RelayError):
    """Non-success response from the portfolios store."""

    status_code = 500

    def __init__(self, status: Optional[int], code: Optional[str], message: str):
        super().__init__(message)
        self.status = status
        self.code = code


class NotFound(RelayError):
    status_code = 404


class Conflict(RelayError):
    status_code = 409


class ValidationError(RelayError):
    status_code = 400


class AuthError(RelayError):
    status_code = 401
