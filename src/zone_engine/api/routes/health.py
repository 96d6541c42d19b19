"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...errors import CatalogLoadError

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/catalog", status_code=status.HTTP_200_OK)
def health_catalog() -> dict:
    """Report where the geography catalog loads from and how large it is."""
    from ...data.catalog_repository import load_catalog

    try:
        catalog = load_catalog()
    except CatalogLoadError as exc:
        return {"service": "catalog", "healthy": False, "error": str(exc)}
    return {
        "service": "catalog",
        "healthy": True,
        "source": catalog.source,
        "regions": len(catalog.regions),
        "zones": len(catalog.zones),
        "cities": catalog.city_count,
    }
