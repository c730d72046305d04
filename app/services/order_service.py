# app/services/order_service.py
import logging
from datetime import datetime
from html import escape
from typing import Callable

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.config import Settings
from app.core.email_client import EmailClient
from app.models.order import Order
from app.repositories.order_repo import OrderRepository
from app.repositories.referral_repo import ReferralRepository
from app.schemas.order import CartItem, OrderCreate, OrderRead

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Persist validated orders (status='Pending')
      - Complete the referral named by referralCode, if any
      - Notify the store owner by email (failures are logged, not raised)
      - Enforce status transitions:

          Pending  -> Accepted, Rejected
          Accepted -> Delivered
          Rejected, Delivered -> (terminal)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        referral_repo: ReferralRepository,
        settings: Settings,
        now: Callable[[], datetime],
        code_generator: Callable[[], str],
    ):
        self.order_repo = order_repo
        self.referral_repo = referral_repo
        self.settings = settings
        self.now = now
        self.code_generator = code_generator

    # -------- Customer-facing operations --------

    def place_order(
        self,
        session: Session,
        email_client: EmailClient,
        payload: OrderCreate,
    ) -> Order:
        """
        Store a new order.

        Steps:
          1. Create Order row (status='Pending').
          2. If referral_code matches a Pending referral, complete it
             and assign a discount code.
          3. Commit both in one transaction.
          4. Email the owner; a failed send does not fail the order.
        """
        order = Order(
            cart_items=[item.model_dump() for item in payload.cart_items],
            delivery_address=payload.delivery_address,
            mobile_number=payload.mobile_number,
            alt_mobile_number=payload.alt_mobile_number,
            payment_method=payload.payment_method,
            total_price=payload.total_price,
            status="Pending",
            created_at=self.now(),
        )
        order = self.order_repo.create_order(session, order)

        if payload.referral_code:
            self._complete_referral(session, payload.referral_code)

        session.commit()
        session.refresh(order)
        logger.info(f"Order {order.id} placed ({order.total_price})")

        self._notify_owner(email_client, order, payload.cart_items)
        return order

    # -------- Owner operations --------

    def list_pending_orders(self, session: Session) -> list[OrderRead]:
        orders = self.order_repo.list_by_status(session, "Pending")
        return [OrderRead.model_validate(o) for o in orders]

    def list_all_orders(self, session: Session) -> list[OrderRead]:
        orders = self.order_repo.list_all(session)
        return [OrderRead.model_validate(o) for o in orders]

    def accept_order(self, session: Session, order_id: str) -> None:
        self._transition(
            session,
            order_id,
            expected="Pending",
            new="Accepted",
            error="Order cannot be accepted",
        )

    def reject_order(self, session: Session, order_id: str) -> None:
        self._transition(
            session,
            order_id,
            expected="Pending",
            new="Rejected",
            error="Order cannot be rejected",
        )

    def deliver_order(self, session: Session, order_id: str) -> None:
        self._transition(
            session,
            order_id,
            expected="Accepted",
            new="Delivered",
            error="Order must be accepted before marking as delivered",
            delivered_at=self.now(),
        )

    # -------- Helpers --------

    def _transition(
        self,
        session: Session,
        order_id: str,
        *,
        expected: str,
        new: str,
        error: str,
        delivered_at: datetime | None = None,
    ) -> None:
        """
        Move an order from `expected` to `new`.

        Raises:
            HTTPException(404): unknown order id.
            HTTPException(400): order is not in `expected` status, including
                the case where a concurrent request changed it first.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        if order.status != expected:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=error,
            )

        updated = self.order_repo.transition_status(
            session,
            order.id,
            expected=expected,
            new=new,
            delivered_at=delivered_at,
        )
        if not updated:
            session.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=error,
            )

        session.commit()
        logger.info(f"Order {order.id}: {expected} -> {new}")

    def _complete_referral(self, session: Session, referral_code: str) -> None:
        referral = self.referral_repo.get_pending_by_code(session, referral_code)
        if referral is None:
            return

        if self.referral_repo.complete(session, referral.id, self.code_generator()):
            logger.info(f"Referral {referral.id} completed by code {referral_code}")

    def _notify_owner(
        self,
        email_client: EmailClient,
        order: Order,
        items: list[CartItem],
    ) -> None:
        if not self.settings.OWNER_EMAIL:
            logger.warning("OWNER_EMAIL is not set; skipping order notification")
            return

        try:
            email_client.send_email(
                to_email=self.settings.OWNER_EMAIL,
                subject=f"New Order Received - Order ID: {order.id}",
                text_body=self._owner_email_text(order, items),
                html_body=self._owner_email_html(order, items),
            )
            logger.info(f"Order notification sent for {order.id}")
        except Exception as e:
            logger.error(f"Failed to send email for order {order.id}: {e}")

    def _owner_email_text(self, order: Order, items: list[CartItem]) -> str:
        cur = self.settings.CURRENCY_SYMBOL
        lines = [
            f"New Order Received - {self.settings.STORE_NAME}",
            f"Order ID: {order.id}",
            "Items:",
        ]
        for item in items:
            lines.append(
                f"  - {item.name} (Qty: {item.quantity:g}) - {cur}{_fmt(item.line_total)}"
            )
        lines += [
            f"Total: {cur}{_fmt(order.total_price)}",
            f"Delivery Address: {order.delivery_address}",
            f"Mobile: {order.mobile_number}",
            f"Alt Mobile: {order.alt_mobile_number or 'N/A'}",
            "",
            f"Accept or reject this order at {self.settings.OWNER_DASHBOARD_URL}",
        ]
        return "\n".join(lines)

    def _owner_email_html(self, order: Order, items: list[CartItem]) -> str:
        cur = escape(self.settings.CURRENCY_SYMBOL)
        items_list = "".join(
            f"<li>{escape(item.name)} (Qty: {item.quantity:g}) - "
            f"{cur}{_fmt(item.line_total)}</li>"
            for item in items
        )
        return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #333;">New Order Received - {escape(self.settings.STORE_NAME)}</h2>
        <p><strong>Order ID:</strong> {order.id}</p>
        <p><strong>Items:</strong></p>
        <ul>{items_list}</ul>
        <p><strong>Total:</strong> {cur}{_fmt(order.total_price)}</p>
        <p><strong>Delivery Address:</strong> {escape(order.delivery_address)}</p>
        <p><strong>Mobile:</strong> {escape(order.mobile_number)}</p>
        <p><strong>Alt Mobile:</strong> {escape(order.alt_mobile_number or 'N/A')}</p>
        <p style="color: #777; font-size: 14px; margin-top: 20px;">
          Please visit the <a href="{escape(self.settings.OWNER_DASHBOARD_URL)}" style="color: #d32f2f; text-decoration: none;">Owner Dashboard</a> to accept or reject this order.
        </p>
      </div>
    """


def _fmt(amount: float) -> str:
    """600.0 -> '600', 12.5 -> '12.50'"""
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}"
