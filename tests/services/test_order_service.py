"""
Unit tests for the order service layer.

Tests focus on business logic:
- Order creation and referral completion
- Status state machine
- Lost-update protection on transitions
- Notification failure handling
"""
import pytest
from fastapi import HTTPException

from app.models.order import Order
from app.models.referral import Referral
from app.schemas.order import OrderCreate


def _payload(**overrides) -> OrderCreate:
    data = {
        "cartItems": [
            {"id": 1, "name": "Mutton Curry Cut", "price": 12.5, "quantity": 3},
            {"id": "2", "name": "Chicken Wings", "price": 250, "quantity": 1},
        ],
        "deliveryAddress": "  7 Lake Road  ",
        "mobileNumber": "9876543210",
        "paymentMethod": "cod",
        "totalPrice": 287.5,
    }
    data.update(overrides)
    return OrderCreate.model_validate(data)


def _naive(dt):
    return dt.replace(tzinfo=None)


class TestPlaceOrder:
    """Tests for OrderService.place_order"""

    def test_order_is_stored_pending(self, session, order_service, email_client, fixed_now):
        order = order_service.place_order(session, email_client, _payload())

        stored = session.get(Order, order.id)
        assert stored.status == "Pending"
        assert stored.delivered_at is None
        assert stored.delivery_address == "7 Lake Road"
        assert stored.payment_method == "cod"
        assert _naive(stored.created_at) == _naive(fixed_now)
        assert stored.cart_items[0] == {
            "id": "1",
            "name": "Mutton Curry Cut",
            "price": 12.5,
            "quantity": 3,
            "image": "",
            "category": "",
        }

    def test_owner_email_lists_line_totals(self, session, order_service, email_client):
        order_service.place_order(session, email_client, _payload())

        [mail] = email_client.sent
        assert "Mutton Curry Cut (Qty: 3) - ₹37.50" in mail["text"]
        assert "Chicken Wings (Qty: 1) - ₹250" in mail["text"]
        assert "Total: ₹287.50" in mail["text"]

    def test_html_is_escaped(self, session, order_service, email_client):
        order_service.place_order(
            session,
            email_client,
            _payload(deliveryAddress="<script>alert(1)</script>"),
        )

        html = email_client.sent[0]["html"]
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_email_failure_is_swallowed(self, session, order_service, email_client):
        email_client.fail = True

        order = order_service.place_order(session, email_client, _payload())

        assert session.get(Order, order.id) is not None

    def test_no_owner_email_configured_skips_send(
        self, session, order_service, email_client, settings
    ):
        settings.OWNER_EMAIL = None

        order_service.place_order(session, email_client, _payload())

        assert email_client.sent == []

    def test_referral_code_completes_pending_referral(
        self, session, order_service, email_client, make_referral
    ):
        referral = make_referral(code="FRIEND1")

        order_service.place_order(
            session, email_client, _payload(referralCode="FRIEND1")
        )

        session.refresh(referral)
        assert referral.status == "Completed"
        assert referral.discount_code == "DISCOUNT00000001"
        assert referral.claimed is False

    def test_completed_referral_is_not_recompleted(
        self, session, order_service, email_client, make_referral
    ):
        referral = make_referral(
            code="FRIEND1", status="Completed", discount_code="DISCOUNTOLD00001"
        )

        order_service.place_order(
            session, email_client, _payload(referralCode="FRIEND1")
        )

        session.refresh(referral)
        assert referral.discount_code == "DISCOUNTOLD00001"

    def test_unknown_referral_code_is_ignored(
        self, session, order_service, email_client, make_referral
    ):
        referral = make_referral(code="FRIEND1")

        order_service.place_order(session, email_client, _payload(referralCode="OTHER"))

        session.refresh(referral)
        assert referral.status == "Pending"
        assert referral.discount_code is None


class TestTransitions:
    """Tests for accept / reject / deliver"""

    @pytest.fixture
    def order(self, session, order_service, email_client):
        return order_service.place_order(session, email_client, _payload())

    def test_accept(self, session, order_service, order):
        order_service.accept_order(session, str(order.id))

        session.refresh(order)
        assert order.status == "Accepted"
        assert order.delivered_at is None

    def test_deliver_stamps_clock(self, session, order_service, order, fixed_now):
        order_service.accept_order(session, str(order.id))
        order_service.deliver_order(session, str(order.id))

        session.refresh(order)
        assert order.status == "Delivered"
        assert _naive(order.delivered_at) == _naive(fixed_now)

    @pytest.mark.parametrize(
        "steps, action, message",
        [
            (["accept"], "accept", "Order cannot be accepted"),
            (["accept"], "reject", "Order cannot be rejected"),
            (["reject"], "accept", "Order cannot be accepted"),
            (["reject"], "deliver", "Order must be accepted before marking as delivered"),
            ([], "deliver", "Order must be accepted before marking as delivered"),
            (["accept", "deliver"], "deliver", "Order must be accepted before marking as delivered"),
            (["accept", "deliver"], "reject", "Order cannot be rejected"),
        ],
    )
    def test_invalid_transitions(self, session, order_service, order, steps, action, message):
        for step in steps:
            getattr(order_service, f"{step}_order")(session, str(order.id))

        with pytest.raises(HTTPException) as exc:
            getattr(order_service, f"{action}_order")(session, str(order.id))

        assert exc.value.status_code == 400
        assert exc.value.detail == message

    def test_unknown_order(self, session, order_service):
        with pytest.raises(HTTPException) as exc:
            order_service.accept_order(session, "00000000-0000-0000-0000-000000000000")

        assert exc.value.status_code == 404

    def test_lost_update_is_detected(self, session, order_service, order, monkeypatch):
        """If the row changed between read and write, the transition fails"""
        monkeypatch.setattr(
            order_service.order_repo,
            "transition_status",
            lambda *args, **kwargs: False,
        )

        with pytest.raises(HTTPException) as exc:
            order_service.accept_order(session, str(order.id))

        assert exc.value.status_code == 400
        session.refresh(order)
        assert order.status == "Pending"


class TestConditionalUpdate:
    """OrderRepository.transition_status only matches the expected status"""

    def test_stale_expected_status_matches_nothing(self, session, order_service, email_client):
        order = order_service.place_order(session, email_client, _payload())
        repo = order_service.order_repo

        assert repo.transition_status(session, order.id, expected="Pending", new="Accepted")
        assert not repo.transition_status(session, order.id, expected="Pending", new="Rejected")
        session.commit()

        session.refresh(order)
        assert order.status == "Accepted"

    def test_referral_complete_only_once(self, session, order_service, make_referral):
        referral = make_referral()
        repo = order_service.referral_repo

        assert repo.complete(session, referral.id, "DISCOUNTAAAAAAAA")
        assert not repo.complete(session, referral.id, "DISCOUNTBBBBBBBB")
        session.commit()

        stored = session.get(Referral, referral.id)
        assert stored.discount_code == "DISCOUNTAAAAAAAA"
