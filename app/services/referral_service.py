# app/services/referral_service.py
import logging
from datetime import datetime
from html import escape
from typing import Callable

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.config import Settings
from app.core.email_client import EmailClient
from app.models.referral import Referral
from app.repositories.referral_repo import ReferralRepository
from app.schemas.referral import ReferralInvite, ReferralRead

logger = logging.getLogger(__name__)


class ReferralService:
    """
    Business logic for referrals and rewards.

    Lifecycle:
      Pending   -> Completed   (done by OrderService when an order
                                carries the referral code)
      Completed -> claimed     (once, via claim_reward)
    """

    def __init__(
        self,
        repo: ReferralRepository,
        settings: Settings,
        now: Callable[[], datetime],
        code_generator: Callable[[], str],
    ):
        self.repo = repo
        self.settings = settings
        self.now = now
        self.code_generator = code_generator

    def send_invitation(
        self,
        session: Session,
        email_client: EmailClient,
        payload: ReferralInvite,
    ) -> Referral:
        """
        Record a referral and email the invitation to the friend.

        The row is only committed once the email has gone out; if the
        send fails the insert is rolled back and a 500 is returned, so
        there are no referrals for invitations nobody received.
        """
        referral = Referral(
            referrer_id=self.settings.REFERRER_PLACEHOLDER_ID,
            referral_code=payload.referral_code,
            referred_email=payload.friend_email,
            reward=self.settings.REFERRAL_REWARD,
            created_at=self.now(),
        )
        referral = self.repo.create(session, referral)

        store = self.settings.STORE_NAME
        try:
            email_client.send_email(
                to_email=payload.friend_email,
                subject=f"You're Invited to {store} - Get {self.settings.REFERRAL_REWARD}!",
                text_body=self._invitation_text(payload.referral_link),
                html_body=self._invitation_html(payload.referral_link),
            )
        except Exception as e:
            session.rollback()
            logger.error(f"Failed to send referral email to {payload.friend_email}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to send referral email",
            )

        session.commit()
        session.refresh(referral)
        logger.info(f"Referral email sent successfully to {payload.friend_email}")
        return referral

    def list_rewards(self, session: Session) -> list[ReferralRead]:
        """
        All referrals. Not scoped to a referrer until the storefront
        has user accounts.
        """
        return [ReferralRead.model_validate(r) for r in self.repo.list_all(session)]

    def claim_reward(self, session: Session, referral_id: str) -> str:
        """
        Claim a completed referral and return its new discount code.

        Raises:
            HTTPException(404): unknown referral id.
            HTTPException(400): referral still Pending, or already claimed.
        """
        referral = self.repo.get_by_id(session, referral_id)
        if not referral:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Referral not found",
            )

        if referral.status != "Completed":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Reward not completed yet",
            )

        if referral.claimed:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Reward already claimed",
            )

        discount_code = self.code_generator()
        if not self.repo.claim(session, referral.id, discount_code):
            session.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Reward already claimed",
            )

        session.commit()
        logger.info(f"Referral {referral.id} claimed")
        return discount_code

    def _invitation_text(self, link: str) -> str:
        store = self.settings.STORE_NAME
        return (
            f"A friend has invited you to join {store}, where you can enjoy "
            "delicious chicken and mutton products.\n\n"
            f"Use the link below to sign up and get {self.settings.REFERRAL_REWARD} "
            f"on your first order:\n{link}\n\n"
            f"{store} Team"
        )

    def _invitation_html(self, link: str) -> str:
        store = escape(self.settings.STORE_NAME)
        href = escape(link)
        return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #333;">You've Been Invited to {store}!</h2>
        <p>A friend has invited you to join {store}, where you can enjoy delicious chicken and mutton products.</p>
        <p>Use the link below to sign up and get {escape(self.settings.REFERRAL_REWARD)} on your first order:</p>
        <p><a href="{href}" style="color: #d32f2f; text-decoration: none;">{href}</a></p>
        <p>We can't wait to have you on board!</p>
        <p style="color: #777; font-size: 14px; margin-top: 20px;">
          {store} Team
        </p>
      </div>
    """
