"""
Houses and Rooms
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.models.property import House, Room, RoomStatus
from app.models.rent import Rent
from app.schemas.property import (
    HouseCreate, HouseResponse, HouseUpdate,
    RoomCreate, RoomResponse, RoomUpdate
)

houses_router = APIRouter()
rooms_router = APIRouter()


# House endpoints
@houses_router.post("/", response_model=HouseResponse, status_code=status.HTTP_201_CREATED)
def create_house(
    house_in: HouseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    house = House(**house_in.model_dump())
    db.add(house)
    db.commit()
    db.refresh(house)
    return house


@houses_router.get("/", response_model=List[HouseResponse])
def list_houses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return db.query(House).order_by(House.name).all()


@houses_router.get("/{house_id}", response_model=HouseResponse)
def get_house(
    house_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    house = db.get(House, house_id)
    if not house:
        raise HTTPException(status_code=404, detail="House not found")
    return house


@houses_router.put("/{house_id}", response_model=HouseResponse)
def update_house(
    house_id: UUID,
    house_in: HouseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    house = db.get(House, house_id)
    if not house:
        raise HTTPException(status_code=404, detail="House not found")

    for field, value in house_in.model_dump(exclude_unset=True).items():
        setattr(house, field, value)

    db.commit()
    db.refresh(house)
    return house


@houses_router.delete("/{house_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_house(
    house_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    house = db.get(House, house_id)
    if not house:
        raise HTTPException(status_code=404, detail="House not found")

    room_ids = [room.id for room in house.rooms]
    if room_ids and db.query(Rent.id).filter(Rent.room_id.in_(room_ids)).first():
        raise HTTPException(status_code=409, detail="House has rooms with rent agreements")

    db.delete(house)
    db.commit()
    return None


# Room endpoints
@rooms_router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    room_in: RoomCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not db.get(House, room_in.house_id):
        raise HTTPException(status_code=404, detail="House not found")

    room = Room(**room_in.model_dump(), status=RoomStatus.AVAILABLE)
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


@rooms_router.get("/", response_model=List[RoomResponse])
def list_rooms(
    house_id: Optional[UUID] = None,
    room_status: Optional[RoomStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    query = db.query(Room)
    if house_id:
        query = query.filter(Room.house_id == house_id)
    if room_status:
        query = query.filter(Room.status == room_status)
    return query.order_by(Room.name).all()


@rooms_router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    room = db.get(Room, room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


@rooms_router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: UUID,
    room_in: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    room = db.get(Room, room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    update_data = room_in.model_dump(exclude_unset=True)
    if update_data.get("house_id") and not db.get(House, update_data["house_id"]):
        raise HTTPException(status_code=404, detail="House not found")
    for field, value in update_data.items():
        setattr(room, field, value)

    db.commit()
    db.refresh(room)
    return room


@rooms_router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(
    room_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    room = db.get(Room, room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    if room.rents or room.monthly_services:
        raise HTTPException(status_code=409, detail="Room has rent agreements or service bills")

    db.delete(room)
    db.commit()
    return None
