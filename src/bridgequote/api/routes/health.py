"""Health check endpoints."""

from fastapi import APIRouter, Request

from bridgequote import __version__

router = APIRouter()


@router.get("/health")
@router.get("/api/health")
async def health_check():
    """Basic health check endpoint."""
    return {"ok": True, "status": "healthy", "service": "bridgequote"}


@router.get("/health/detailed")
async def detailed_health(request: Request):
    """Detailed health check with configuration info."""
    settings = request.app.state.settings
    return {
        "ok": True,
        "status": "healthy",
        "service": "bridgequote",
        "version": __version__,
        "provider": request.app.state.quote_service.provider.name,
        "config": settings.get_safe_dict(),
    }
