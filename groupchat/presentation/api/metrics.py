"""Prometheus scrape endpoint: GET /metrics (no auth)."""

from fastapi import APIRouter, Response

from groupchat.observability.metrics import get_metrics_content

router = APIRouter(prefix="/metrics", tags=["observability"])


@router.get("", include_in_schema=False)
async def metrics():
    content, content_type = get_metrics_content()
    return Response(content=content, media_type=content_type)
