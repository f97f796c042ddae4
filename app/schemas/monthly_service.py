"""
Monthly Service Schemas

Totals are derived here so every write path agrees:
  water_total       = (water_current - water_previous) * water_price_per_unit   when omitted
  electricity_total = same for electricity                                     when omitted
  total_amount      = water_total + electricity_total + trash_fee + maintenance_fee
"""
import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def meter_total(previous: Optional[float], current: Optional[float], price: Optional[float]) -> Optional[float]:
    """Consumption x unit price, or None when a reading or the price is missing."""
    if previous is None or current is None or price is None:
        return None
    if current < previous:
        raise ValueError("current meter reading is lower than the previous one")
    return round((current - previous) * price, 2)


class MonthlyServiceFields(BaseModel):
    water_previous: Optional[float] = Field(None, ge=0)
    water_current: Optional[float] = Field(None, ge=0)
    water_price_per_unit: Optional[float] = Field(None, ge=0)
    water_total: Optional[float] = Field(None, ge=0)
    electricity_previous: Optional[float] = Field(None, ge=0)
    electricity_current: Optional[float] = Field(None, ge=0)
    electricity_price_per_unit: Optional[float] = Field(None, ge=0)
    electricity_total: Optional[float] = Field(None, ge=0)
    trash_fee: Optional[float] = Field(None, ge=0)
    maintenance_fee: Optional[float] = Field(None, ge=0)
    total_amount: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class MonthlyServiceCreate(MonthlyServiceFields):
    room_id: UUID
    month: str = Field(..., description="YYYY-MM")

    @field_validator("month")
    @classmethod
    def _check_month(cls, v: str) -> str:
        if not MONTH_PATTERN.match(v):
            raise ValueError("month must be formatted YYYY-MM")
        return v


class MonthlyServiceUpdate(MonthlyServiceFields):
    month: Optional[str] = None

    @field_validator("month")
    @classmethod
    def _check_month(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not MONTH_PATTERN.match(v):
            raise ValueError("month must be formatted YYYY-MM")
        return v


class MonthlyServiceResponse(BaseModel):
    id: UUID
    room_id: UUID
    month: str
    water_previous: Optional[float] = None
    water_current: Optional[float] = None
    water_price_per_unit: Optional[float] = None
    water_total: Optional[float] = None
    electricity_previous: Optional[float] = None
    electricity_current: Optional[float] = None
    electricity_price_per_unit: Optional[float] = None
    electricity_total: Optional[float] = None
    trash_fee: Optional[float] = None
    maintenance_fee: Optional[float] = None
    total_amount: float
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
