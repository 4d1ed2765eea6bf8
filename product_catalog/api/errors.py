"""
Exception handlers mapping catalog errors to HTTP responses
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ..errors import IntegrityError, ProductCatalogError
from ..logging_config import get_logger, log_action


logger = get_logger("product_catalog.api")


async def catalog_error_handler(request: Request, exc: ProductCatalogError) -> JSONResponse:
    """ValidationError -> 400, NotFoundError -> 404, IntegrityError -> 500"""
    if isinstance(exc, IntegrityError):
        log_action(
            logger, "error", f"Integrity violation: {exc.message}",
            action=request.method.lower(),
            resource=request.url.path,
            business_key=exc.details.get("business_key")
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Data integrity error"}
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected exceptions"""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred"}
    )
