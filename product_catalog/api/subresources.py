"""
Product sub-resource endpoints

Every sub-resource kind exposes the same routes under
/products/{product_code}/<path>, so the routers are built from one factory.
"""

from typing import Optional, Type
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from .auth import get_audit_context, get_catalog
from .schemas import (
    CreateChargeRequest, UpdateChargeRequest,
    CreateRuleRequest, UpdateRuleRequest,
    CreateRoleRequest, UpdateRoleRequest,
    CreateTransactionRequest, UpdateTransactionRequest,
    CreateCommunicationRequest, UpdateCommunicationRequest,
    CreateInterestRateRequest, UpdateInterestRateRequest,
    CreateBalanceRequest, UpdateBalanceRequest,
)
from ..audit import AuditContext
from ..catalog import ProductCatalog


# (url path, details section, create schema, update schema)
SUB_RESOURCES = [
    ("charges", "charges", CreateChargeRequest, UpdateChargeRequest),
    ("rules", "rules", CreateRuleRequest, UpdateRuleRequest),
    ("roles", "roles", CreateRoleRequest, UpdateRoleRequest),
    ("transactions", "transactions", CreateTransactionRequest, UpdateTransactionRequest),
    ("communications", "communications", CreateCommunicationRequest, UpdateCommunicationRequest),
    ("interest-rates", "interest_rates", CreateInterestRateRequest, UpdateInterestRateRequest),
    ("balances", "balances", CreateBalanceRequest, UpdateBalanceRequest),
]


def build_router(section: str, create_schema: Type[BaseModel],
                 update_schema: Type[BaseModel]) -> APIRouter:
    """Router for one sub-resource kind, served by catalog.sub_resources[section]"""
    router = APIRouter()

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_item(
        product_code: str,
        request: create_schema,
        catalog: ProductCatalog = Depends(get_catalog),
        context: AuditContext = Depends(get_audit_context)
    ):
        item = catalog.sub_resources[section].create(product_code, request.dict(), context)
        return item.to_dict()

    @router.get("")
    async def list_items(
        product_code: str,
        page: int = 0,
        size: Optional[int] = None,
        catalog: ProductCatalog = Depends(get_catalog)
    ):
        result = catalog.sub_resources[section].list_for_product(product_code, page, size)
        return result.to_dict(lambda item: item.to_dict())

    @router.get("/history")
    async def get_product_history(product_code: str, catalog: ProductCatalog = Depends(get_catalog)):
        versions = catalog.sub_resources[section].product_history(product_code)
        return {
            "product_code": product_code,
            "versions": [version.to_dict(include_audit=True) for version in versions]
        }

    @router.get("/{sub_code}")
    async def get_item(product_code: str, sub_code: str,
                       catalog: ProductCatalog = Depends(get_catalog)):
        return catalog.sub_resources[section].get(product_code, sub_code).to_dict()

    @router.get("/{sub_code}/history")
    async def get_item_history(product_code: str, sub_code: str,
                               catalog: ProductCatalog = Depends(get_catalog)):
        versions = catalog.sub_resources[section].history(product_code, sub_code)
        return {
            "product_code": product_code,
            "versions": [version.to_dict(include_audit=True) for version in versions]
        }

    @router.put("/{sub_code}")
    async def update_item(
        product_code: str,
        sub_code: str,
        request: update_schema,
        catalog: ProductCatalog = Depends(get_catalog),
        context: AuditContext = Depends(get_audit_context)
    ):
        item = catalog.sub_resources[section].update(
            product_code, sub_code, request.dict(exclude_none=True), context
        )
        return item.to_dict()

    @router.delete("/{sub_code}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_item(
        product_code: str,
        sub_code: str,
        catalog: ProductCatalog = Depends(get_catalog),
        context: AuditContext = Depends(get_audit_context)
    ):
        catalog.sub_resources[section].delete(product_code, sub_code, context)

    return router
