"""Health check module for the job store."""

import asyncio
import time
from dataclasses import dataclass
from typing import Literal

from sqlalchemy import text

from tracker.database import Database


@dataclass
class ServiceHealth:
    """Health status for a service dependency."""

    status: Literal["connected", "unreachable", "error"]
    latency_ms: float | None = None
    error: str | None = None


async def check_database(database: Database, timeout: float = 2.0) -> ServiceHealth:
    """Check store connectivity with a SELECT 1 query.

    Args:
        database: Application store handle
        timeout: Seconds before the store is reported unreachable

    Returns:
        ServiceHealth with connection status and latency
    """
    start = time.perf_counter()
    try:
        async with asyncio.timeout(timeout):
            async with database.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            latency = (time.perf_counter() - start) * 1000
            return ServiceHealth(status="connected", latency_ms=round(latency, 2))
    except asyncio.TimeoutError:
        return ServiceHealth(status="unreachable", error="timeout")
    except Exception as e:
        return ServiceHealth(status="error", error=str(e))
