# app/repositories/referral_repo.py
import uuid

from sqlalchemy import update
from sqlmodel import Session, select

from app.models.referral import Referral
from app.repositories.order_repo import parse_uuid


class ReferralRepository:
    """
    Data access layer for referrals. Services own the commit.
    """

    def list_all(self, session: Session) -> list[Referral]:
        stmt = select(Referral).order_by(Referral.created_at.desc())
        return session.exec(stmt).all()

    def get_by_id(
        self, session: Session, referral_id: str | uuid.UUID
    ) -> Referral | None:
        parsed = parse_uuid(referral_id)
        if parsed is None:
            return None
        return session.get(Referral, parsed)

    def get_pending_by_code(self, session: Session, code: str) -> Referral | None:
        stmt = select(Referral).where(
            Referral.referral_code == code,
            Referral.status == "Pending",
        )
        return session.exec(stmt).first()

    def create(self, session: Session, referral: Referral) -> Referral:
        session.add(referral)
        session.flush()
        session.refresh(referral)
        return referral

    def complete(
        self, session: Session, referral_id: uuid.UUID, discount_code: str
    ) -> bool:
        """
        Pending -> Completed with a discount code, only if still Pending.
        """
        stmt = (
            update(Referral)
            .where(Referral.id == referral_id, Referral.status == "Pending")
            .values(status="Completed", discount_code=discount_code)
        )
        result = session.exec(stmt)  # type: ignore[call-overload]
        return result.rowcount == 1

    def claim(
        self, session: Session, referral_id: uuid.UUID, discount_code: str
    ) -> bool:
        """
        Mark a Completed, unclaimed referral as claimed and replace its
        discount code. Returns False if another request claimed it first.
        """
        stmt = (
            update(Referral)
            .where(
                Referral.id == referral_id,
                Referral.status == "Completed",
                Referral.claimed == False,  # noqa: E712
            )
            .values(claimed=True, discount_code=discount_code)
        )
        result = session.exec(stmt)  # type: ignore[call-overload]
        return result.rowcount == 1
