"""Health check endpoint.

Simple GET endpoint that verifies the daemon is running and its store
is reachable.
"""

from fastapi import APIRouter, Depends

from opendydns import __version__
from opendydns.api.deps import get_store
from opendydns.errors import DydnsError
from opendydns.store.base import Store

router = APIRouter()


@router.get("/health")
async def health_check(store: Store = Depends(get_store)):
    """Check daemon health and store connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await store.ping()
        checks["store"] = "ok"
    except DydnsError as e:
        checks["store"] = f"error: {e.message}"

    status = "healthy" if checks["store"] == "ok" else "degraded"
    return {"status": status, **checks}
