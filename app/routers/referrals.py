# app/routers/referrals.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.code_utils import generate_discount_code, utcnow
from app.core.config import Settings, get_settings
from app.core.email_client import EmailClient, get_email_client
from app.database import get_session
from app.repositories.referral_repo import ReferralRepository
from app.schemas.common import MessageResponse
from app.schemas.referral import ReferralInvite, RewardClaimed, RewardListResponse
from app.services.referral_service import ReferralService

router = APIRouter(tags=["Referrals"])

referral_repo = ReferralRepository()


def get_referral_service(
    settings: Settings = Depends(get_settings),
) -> ReferralService:
    return ReferralService(
        referral_repo,
        settings,
        now=utcnow,
        code_generator=lambda: generate_discount_code(settings.DISCOUNT_CODE_PREFIX),
    )


@router.post("/referrals/send", response_model=MessageResponse)
def send_referral(
    payload: ReferralInvite,
    session: Session = Depends(get_session),
    email_client: EmailClient = Depends(get_email_client),
    service: ReferralService = Depends(get_referral_service),
):
    """
    Record a referral and email the invitation link to a friend.
    """
    service.send_invitation(session, email_client, payload)
    return MessageResponse(message="Referral email sent successfully")


@router.get("/rewards", response_model=RewardListResponse)
def list_rewards(
    session: Session = Depends(get_session),
    service: ReferralService = Depends(get_referral_service),
):
    """
    List referrals and their reward state.
    """
    return RewardListResponse(rewards=service.list_rewards(session))


@router.post("/rewards/claim/{reward_id}", response_model=RewardClaimed)
def claim_reward(
    reward_id: str,
    session: Session = Depends(get_session),
    service: ReferralService = Depends(get_referral_service),
):
    """
    Claim a completed referral for a fresh discount code.
    """
    discount_code = service.claim_reward(session, reward_id)
    return RewardClaimed(
        message="Reward claimed successfully",
        discount_code=discount_code,
    )
