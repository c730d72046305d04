# app/routers/orders.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.code_utils import generate_discount_code, utcnow
from app.core.config import Settings, get_settings
from app.core.email_client import EmailClient, get_email_client
from app.database import get_session
from app.repositories.order_repo import OrderRepository
from app.repositories.referral_repo import ReferralRepository
from app.schemas.common import MessageResponse
from app.schemas.order import OrderCreate, OrderCreated, OrderListResponse
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
referral_repo = ReferralRepository()


def get_order_service(settings: Settings = Depends(get_settings)) -> OrderService:
    return OrderService(
        order_repo,
        referral_repo,
        settings,
        now=utcnow,
        code_generator=lambda: generate_discount_code(settings.DISCOUNT_CODE_PREFIX),
    )


# -------- Storefront endpoints --------


@router.post("", response_model=OrderCreated)
def place_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    email_client: EmailClient = Depends(get_email_client),
    service: OrderService = Depends(get_order_service),
):
    """
    Place a cash-on-delivery order.

    Also completes the referral named by `referralCode`, if it is Pending,
    and emails the store owner.
    """
    order = service.place_order(session, email_client, payload)
    return OrderCreated(message="Order placed successfully", order_id=order.id)


# -------- Owner dashboard endpoints --------


@router.get("/pending", response_model=OrderListResponse)
def list_pending_orders(
    session: Session = Depends(get_session),
    service: OrderService = Depends(get_order_service),
):
    """
    List orders waiting for the owner to accept or reject.
    """
    return OrderListResponse(orders=service.list_pending_orders(session))


@router.get("/all", response_model=OrderListResponse)
def list_all_orders(
    session: Session = Depends(get_session),
    service: OrderService = Depends(get_order_service),
):
    """
    List every order, newest first.
    """
    return OrderListResponse(orders=service.list_all_orders(session))


@router.post("/{order_id}/accept", response_model=MessageResponse)
def accept_order(
    order_id: str,
    session: Session = Depends(get_session),
    service: OrderService = Depends(get_order_service),
):
    """Pending -> Accepted."""
    service.accept_order(session, order_id)
    return MessageResponse(message="Order accepted successfully")


@router.post("/{order_id}/reject", response_model=MessageResponse)
def reject_order(
    order_id: str,
    session: Session = Depends(get_session),
    service: OrderService = Depends(get_order_service),
):
    """Pending -> Rejected."""
    service.reject_order(session, order_id)
    return MessageResponse(message="Order rejected successfully")


@router.post("/{order_id}/deliver", response_model=MessageResponse)
def deliver_order(
    order_id: str,
    session: Session = Depends(get_session),
    service: OrderService = Depends(get_order_service),
):
    """Accepted -> Delivered; stamps deliveredAt."""
    service.deliver_order(session, order_id)
    return MessageResponse(message="Order marked as delivered successfully")
