"""Error bodies shared by the business endpoints."""

from fastapi.responses import JSONResponse

from smartcare.entrypoints.api.deps import Settings


def error_response(
    status_code: int,
    error: str,
    settings: Settings,
    details: str | None = None,
) -> JSONResponse:
    """Build an ``{"error", "details"}`` response.

    ``details`` carries the underlying message for diagnostics and is
    dropped in production.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "details": None if settings.is_production else details,
        },
    )
