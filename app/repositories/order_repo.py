# app/repositories/order_repo.py
import uuid
from datetime import datetime

from sqlalchemy import update
from sqlmodel import Session, select

from app.models.order import Order


def parse_uuid(raw: str | uuid.UUID) -> uuid.UUID | None:
    """Return the UUID for a path parameter, or None if it is not one."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


class OrderRepository:
    """
    Data access layer for orders.

    NOTE:
      - No commits here; order creation may also complete a referral in
        the same transaction. The service is responsible for calling
        session.commit().
    """

    def list_all(self, session: Session) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at.desc())
        return session.exec(stmt).all()

    def list_by_status(self, session: Session, status: str) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.status == status)
            .order_by(Order.created_at.desc())
        )
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, order_id: str | uuid.UUID) -> Order | None:
        parsed = parse_uuid(order_id)
        if parsed is None:
            return None
        return session.get(Order, parsed)

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()
        session.refresh(order)
        return order

    def transition_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        *,
        expected: str,
        new: str,
        delivered_at: datetime | None = None,
    ) -> bool:
        """
        Conditional update:

            UPDATE orders SET status = :new
            WHERE id = :order_id AND status = :expected

        Returns False if no row matched (status changed underneath us).
        """
        values: dict = {"status": new}
        if delivered_at is not None:
            values["delivered_at"] = delivered_at

        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == expected)
            .values(**values)
        )
        result = session.exec(stmt)  # type: ignore[call-overload]
        return result.rowcount == 1
