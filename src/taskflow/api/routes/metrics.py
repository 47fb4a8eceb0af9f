"""Prometheus scrape endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from taskflow.core.metrics import render

router = APIRouter(tags=["metrics"])


@router.get("/metrics", include_in_schema=False)
async def metrics_export(request: Request) -> Response:
    """Expose the app's metrics registry in the Prometheus text format."""
    body, content_type = render(request.app.state.metrics.registry)
    return Response(content=body, media_type=content_type)
