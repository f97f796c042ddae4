"""
Rent Service
Create/update/delete of rent agreements with their invariants:

  total_rent == monthly_rent * months          (to the cent, on create AND update)
  no two agreements of a room overlap          (new_start < end and new_end > start)
  total_rent never drops below what was paid
  room.status follows its agreements           (rented / available)
"""
import logging
import uuid
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, InvariantViolationError, NotFoundError
from app.models.payment import Payment
from app.models.property import Room, RoomStatus
from app.models.rent import Rent
from app.models.tenant import Tenant
from app.schemas.rent import RentCreate, RentUpdate
from app.services.balance_service import MONEY_TOLERANCE, compute_balance
from app.services.ledger import obligation_from_rent
from app.services.obligation_resolver import ObligationResolver, is_active_on

logger = logging.getLogger(__name__)


def expected_total(monthly_rent: float, months: int) -> float:
    return round(monthly_rent * months, 2)


def check_total_rent(monthly_rent: float, months: int, total_rent: Optional[float]) -> float:
    """Returns the total to store; computed when omitted, rejected when inconsistent."""
    expected = expected_total(monthly_rent, months)
    if total_rent is None:
        return expected
    if abs(total_rent - expected) > MONEY_TOLERANCE:
        raise InvariantViolationError(
            f"total_rent {total_rent:.2f} does not equal monthly_rent x months ({expected:.2f})",
            field="totalRent",
        )
    return round(total_rent, 2)


def periods_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    return start_a < end_b and end_a > start_b


class RentService:
    def __init__(self, db: Session):
        self.db = db

    def _check_room_free(self, room_id: uuid.UUID, start: date, end: date, exclude_id: Optional[uuid.UUID] = None):
        query = self.db.query(Rent).filter(Rent.room_id == room_id)
        if exclude_id is not None:
            query = query.filter(Rent.id != exclude_id)
        for other in query.all():
            if periods_overlap(start, end, other.start_date, other.end_date):
                raise ConflictError(
                    f"room already rented from {other.start_date} to {other.end_date}",
                    field="startDate",
                )

    def _paid_towards(self, rent: Rent) -> float:
        obligation = obligation_from_rent(rent)
        entries = ObligationResolver(self.db).entries_for(obligation)
        return compute_balance(obligation, entries).total_paid

    def _refresh_room_status(self, room: Room) -> None:
        today = date.today()
        occupied = any(is_active_on(r, today) or r.start_date > today for r in room.rents)
        room.status = RoomStatus.RENTED if occupied else RoomStatus.AVAILABLE

    def create(self, data: RentCreate) -> Rent:
        if self.db.get(Tenant, data.tenant_id) is None:
            raise NotFoundError("tenant not found", field="tenantId")
        room = self.db.get(Room, data.room_id)
        if room is None:
            raise NotFoundError("room not found", field="roomId")

        total = check_total_rent(data.monthly_rent, data.months, data.total_rent)
        self._check_room_free(room.id, data.start_date, data.end_date)

        rent = Rent(id=uuid.uuid4(), **data.model_dump(exclude={"total_rent"}), total_rent=total)
        self.db.add(rent)
        self.db.flush()
        self.db.expire(room, ["rents"])
        self._refresh_room_status(room)
        self.db.commit()
        self.db.refresh(rent)
        logger.info(f"[rents] Created rent {rent.id} room={room.name} total={rent.total_rent:.2f}")
        return rent

    def update(self, rent: Rent, data: RentUpdate) -> Rent:
        changes = data.model_dump(exclude_unset=True)

        monthly_rent = changes.get("monthly_rent", rent.monthly_rent)
        months = changes.get("months", rent.months)
        if "total_rent" in changes:
            total = check_total_rent(monthly_rent, months, changes["total_rent"])
        elif "monthly_rent" in changes or "months" in changes:
            total = expected_total(monthly_rent, months)
        else:
            # Existing rows are re-checked too; drift is never carried forward
            total = check_total_rent(monthly_rent, months, rent.total_rent)

        start = changes.get("start_date", rent.start_date)
        end = changes.get("end_date", rent.end_date)
        if end < start:
            raise InvariantViolationError("end_date must not be before start_date", field="endDate")
        if start != rent.start_date or end != rent.end_date:
            self._check_room_free(rent.room_id, start, end, exclude_id=rent.id)

        paid = self._paid_towards(rent)
        if total + MONEY_TOLERANCE < paid:
            raise InvariantViolationError(
                f"total_rent {total:.2f} is below the {paid:.2f} already paid",
                field="totalRent",
            )

        for field, value in changes.items():
            setattr(rent, field, value)
        rent.total_rent = total
        self.db.flush()
        self._refresh_room_status(rent.room)
        self.db.commit()
        self.db.refresh(rent)
        logger.info(f"[rents] Updated rent {rent.id}: {sorted(changes)}")
        return rent

    def delete(self, rent: Rent) -> None:
        referenced = self.db.query(Payment.id).filter(Payment.rent_id == rent.id).first()
        if referenced:
            raise ConflictError("rent has recorded payments and cannot be deleted", field="rentId")

        room, rent_id = rent.room, rent.id
        self.db.delete(rent)
        self.db.flush()
        self.db.expire(room)
        self._refresh_room_status(room)
        self.db.commit()
        logger.info(f"[rents] Deleted rent {rent_id}")
