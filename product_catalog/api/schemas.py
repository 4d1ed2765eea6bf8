"""
Pydantic schemas for API requests

Enum-valued fields are plain strings here; the entity managers check them
against the allowed values so every domain rule is reported the same way.
"""

from decimal import Decimal
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


# Product schemas
class CreateProductRequest(BaseModel):
    product_code: str = Field(..., description="Unique product code, e.g. SAV001")
    product_name: str
    product_type: str = Field(..., description="SAVINGS, CURRENT, FIXED_DEPOSIT, LOAN, ...")
    currency: str = Field(..., description="Currency code (USD, EUR, etc.)")
    effective_date: date
    status: Optional[str] = None
    description: Optional[str] = None
    interest_type: Optional[str] = None
    compounding_frequency: Optional[str] = None
    expiry_date: Optional[date] = None


class UpdateProductRequest(BaseModel):
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    product_type: Optional[str] = None
    currency: Optional[str] = None
    effective_date: Optional[date] = None
    status: Optional[str] = None
    description: Optional[str] = None
    interest_type: Optional[str] = None
    compounding_frequency: Optional[str] = None
    expiry_date: Optional[date] = None


# Charge schemas
class CreateChargeRequest(BaseModel):
    charge_code: str
    charge_name: str
    charge_type: str = Field(..., description="FLAT, PERCENTAGE or SLAB")
    calculation_type: str
    amount: Decimal
    debit_credit: str = Field(..., description="DEBIT or CREDIT")
    frequency: Optional[str] = None


class UpdateChargeRequest(BaseModel):
    charge_code: Optional[str] = None
    charge_name: Optional[str] = None
    charge_type: Optional[str] = None
    calculation_type: Optional[str] = None
    amount: Optional[Decimal] = None
    debit_credit: Optional[str] = None
    frequency: Optional[str] = None


# Rule schemas
class CreateRuleRequest(BaseModel):
    rule_code: str
    rule_name: str
    rule_type: str
    data_type: str = Field(..., description="STRING, NUMBER, PERCENTAGE, BOOLEAN, DATE or JSON")
    rule_value: str
    validation_type: Optional[str] = None


class UpdateRuleRequest(BaseModel):
    rule_code: Optional[str] = None
    rule_name: Optional[str] = None
    rule_type: Optional[str] = None
    data_type: Optional[str] = None
    rule_value: Optional[str] = None
    validation_type: Optional[str] = None


# Role schemas
class CreateRoleRequest(BaseModel):
    role_code: str
    role_name: str
    role_type: str
    mandatory: bool = False
    max_count: int = 1


class UpdateRoleRequest(BaseModel):
    role_code: Optional[str] = None
    role_name: Optional[str] = None
    role_type: Optional[str] = None
    mandatory: Optional[bool] = None
    max_count: Optional[int] = None


# Transaction schemas
class CreateTransactionRequest(BaseModel):
    transaction_code: str
    transaction_name: str
    transaction_type: str
    allowed: bool = True
    minimum_amount: Optional[Decimal] = None
    maximum_amount: Optional[Decimal] = None


class UpdateTransactionRequest(BaseModel):
    transaction_code: Optional[str] = None
    transaction_name: Optional[str] = None
    transaction_type: Optional[str] = None
    allowed: Optional[bool] = None
    minimum_amount: Optional[Decimal] = None
    maximum_amount: Optional[Decimal] = None


# Communication schemas
class CreateCommunicationRequest(BaseModel):
    comm_code: str
    communication_type: str
    channel: str = Field(..., description="EMAIL, SMS, POST or PUSH")
    event: str
    template: str
    frequency_limit: Optional[int] = None


class UpdateCommunicationRequest(BaseModel):
    comm_code: Optional[str] = None
    communication_type: Optional[str] = None
    channel: Optional[str] = None
    event: Optional[str] = None
    template: Optional[str] = None
    frequency_limit: Optional[int] = None


# Interest rate schemas
class CreateInterestRateRequest(BaseModel):
    rate_code: str
    term_in_months: int
    rate_cumulative: Decimal = Field(..., description="Fraction, e.g. 0.0725 for 7.25%")
    rate_non_cumulative_monthly: Decimal
    rate_non_cumulative_quarterly: Decimal
    rate_non_cumulative_yearly: Decimal


class UpdateInterestRateRequest(BaseModel):
    rate_code: Optional[str] = None
    term_in_months: Optional[int] = None
    rate_cumulative: Optional[Decimal] = None
    rate_non_cumulative_monthly: Optional[Decimal] = None
    rate_non_cumulative_quarterly: Optional[Decimal] = None
    rate_non_cumulative_yearly: Optional[Decimal] = None


# Balance schemas
class CreateBalanceRequest(BaseModel):
    balance_type: str = Field(..., description="LOAN_PRINCIPAL, FD_INTEREST, ...")
    active: bool = True


class UpdateBalanceRequest(BaseModel):
    balance_type: Optional[str] = None
    active: Optional[bool] = None
