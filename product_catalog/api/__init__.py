"""
Product Catalog API Application Factory
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from .errors import catalog_error_handler, unhandled_exception_handler
from .products import router as products_router
from .subresources import SUB_RESOURCES, build_router
from ..config import get_config
from ..errors import ProductCatalogError
from ..logging_config import setup_logging


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Product Catalog API",
        description="Versioned banking product catalog with full change history",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ProductCatalogError, catalog_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include routers
    app.include_router(products_router, prefix="/products", tags=["Products"])
    for path, section, create_schema, update_schema in SUB_RESOURCES:
        app.include_router(
            build_router(section, create_schema, update_schema),
            prefix=f"/products/{{product_code}}/{path}",
            tags=[section.replace("_", " ").title()]
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "product_catalog_api",
            "version": "1.0.0"
        }

    # Root endpoint
    @app.get("/")
    async def get_api_info():
        """Get API information"""
        endpoints = {
            "docs": "/docs",
            "health": "/health",
            "products": "/products",
        }
        for path, _, _, _ in SUB_RESOURCES:
            endpoints[path] = f"/products/{{product_code}}/{path}"
        return {
            "name": "Product Catalog API",
            "version": "1.0.0",
            "description": "Versioned banking product catalog",
            "endpoints": endpoints
        }

    return app


app = create_app()


def run_server(host: str = None, port: int = None, debug: bool = False):
    """Run the FastAPI server"""
    config = get_config()
    setup_logging(level=config.log_level, log_format=config.log_format, log_file=config.log_file)
    uvicorn.run(
        "product_catalog.api:app",
        host=host or config.api_host,
        port=port or config.api_port,
        reload=debug,
        log_level="info"
    )
