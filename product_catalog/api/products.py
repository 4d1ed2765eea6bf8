"""
Products endpoints
"""

from typing import Optional
from fastapi import APIRouter, Depends, status

from .auth import get_audit_context, get_catalog
from .schemas import CreateProductRequest, UpdateProductRequest
from ..audit import AuditContext
from ..catalog import ProductCatalog


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    request: CreateProductRequest,
    catalog: ProductCatalog = Depends(get_catalog),
    context: AuditContext = Depends(get_audit_context)
):
    """Create a new product"""
    product = catalog.product_engine.create_product(request.dict(), context)
    return product.to_dict()


@router.get("")
async def list_products(
    page: int = 0,
    size: Optional[int] = None,
    catalog: ProductCatalog = Depends(get_catalog)
):
    """List current products, one page at a time"""
    result = catalog.product_engine.list_products(page, size)
    return result.to_dict(lambda product: product.to_dict())


@router.get("/search")
async def search_products(
    product_type: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    catalog: ProductCatalog = Depends(get_catalog)
):
    """Search products by type, status or effective date window"""
    products = catalog.product_engine.search_products(
        product_type=product_type,
        status=status,
        start_date=start_date,
        end_date=end_date
    )
    return {"products": [product.to_dict() for product in products]}


@router.get("/{product_code}")
async def get_product(product_code: str, catalog: ProductCatalog = Depends(get_catalog)):
    """Get current product definition"""
    return catalog.product_engine.get_product(product_code).to_dict()


@router.get("/{product_code}/details")
async def get_product_details(product_code: str, catalog: ProductCatalog = Depends(get_catalog)):
    """Get product with all of its current sub-resources"""
    return catalog.assembler.get_product_details(product_code).to_dict()


@router.get("/{product_code}/history")
async def get_product_history(product_code: str, catalog: ProductCatalog = Depends(get_catalog)):
    """Get every version of a product, newest first"""
    versions = catalog.product_engine.product_history(product_code)
    return {
        "product_code": product_code,
        "versions": [version.to_dict(include_audit=True) for version in versions]
    }


@router.put("/{product_code}")
async def update_product(
    product_code: str,
    request: UpdateProductRequest,
    catalog: ProductCatalog = Depends(get_catalog),
    context: AuditContext = Depends(get_audit_context)
):
    """Update product definition"""
    product = catalog.product_engine.update_product(
        product_code, request.dict(exclude_none=True), context
    )
    return product.to_dict()


@router.delete("/{product_code}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_code: str,
    catalog: ProductCatalog = Depends(get_catalog),
    context: AuditContext = Depends(get_audit_context)
):
    """Delete a product; its history remains available"""
    catalog.product_engine.delete_product(product_code, context)
