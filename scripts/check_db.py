#!/usr/bin/env python3
"""
Print the most recent portfolio slugs, read through the public (anonymous) API key.
"""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx

from core.config import settings
from utils.store import PortfolioStore, anonymous_context


async def check(limit: int = 5) -> int:
    try:
        async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
            slugs = await PortfolioStore(client, settings).recent_slugs(anonymous_context(settings), limit)
    except Exception as e:
        print(f"❌ {e}")
        return 1
    print(f"Recent slugs: {slugs}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(check()))
