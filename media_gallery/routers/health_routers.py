# media_gallery/routers/health_routers.py
"""
System health HTTP endpoint.

No caching: load balancers need the real-time status.
"""

from typing import Any, Dict

from fastapi import APIRouter

from ..config import settings
from ..dependencies import DocumentStoreDep, GalleryReadModelDep
from ..stores import PostgresDocumentStore
from ..utils.response_helpers import ResponseFormatter
from ..utils.router_helpers import handle_exceptions

router = APIRouter(tags=["health"])


@router.get("/health", response_model=Dict[str, Any])
@handle_exceptions("basic health check")
async def health_check(
    document_store: DocumentStoreDep, read_model: GalleryReadModelDep
) -> Dict[str, Any]:
    """Quick health check: store reachability and read model status."""
    database_ok = True
    if isinstance(document_store, PostgresDocumentStore):
        database_ok = await document_store.check_health()

    state = read_model.state
    data = {
        "document_store": settings.document_store_backend.value,
        "object_store": settings.object_store_backend.value,
        "database_ok": database_ok,
        "gallery_loaded": state.loaded,
        "media_count": state.media_count,
        "event_count": len(state.events),
    }
    if not database_ok:
        return ResponseFormatter.error("Service degraded - document store unreachable", details=data)
    return ResponseFormatter.success("Service healthy", data=data)
