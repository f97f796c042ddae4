from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Optional, List

from app.models.property import RoomStatus


class RoomBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    monthly_rent: float = Field(..., gt=0)


class RoomCreate(RoomBase):
    house_id: UUID


class RoomUpdate(BaseModel):
    name: Optional[str] = None
    monthly_rent: Optional[float] = Field(None, gt=0)
    house_id: Optional[UUID] = None


class RoomResponse(RoomBase):
    id: UUID
    house_id: UUID
    status: RoomStatus
    created_at: datetime

    class Config:
        from_attributes = True


class HouseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None


class HouseCreate(HouseBase):
    pass


class HouseUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None


class HouseResponse(HouseBase):
    id: UUID
    created_at: datetime
    rooms: List[RoomResponse] = []

    class Config:
        from_attributes = True
