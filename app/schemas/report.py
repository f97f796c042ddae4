from datetime import date
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel


class KindTotals(BaseModel):
    obligations: int = 0
    total_due: float = 0.0
    total_paid: float = 0.0
    outstanding: float = 0.0


class OccupancySummary(BaseModel):
    houses: int
    rooms: int
    rented_rooms: int
    available_rooms: int
    tenants: int


class ReportSummary(BaseModel):
    success: bool = True
    as_of: date
    tenant_id: Optional[UUID] = None
    occupancy: OccupancySummary
    by_kind: Dict[str, KindTotals]
    status_counts: Dict[str, int]
    contract_counts: Dict[str, int]
    collected_in_period: float
    period_start: Optional[date] = None
    period_end: Optional[date] = None
