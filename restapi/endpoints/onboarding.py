"""First-run onboarding endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.onboarding.repository import OnboardingRepository
from components.onboarding import schemas
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.post("/complete", response_model=schemas.OnboardingResult)
async def complete_onboarding(
    answers: schemas.OnboardingAnswers,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Save the questionnaire, create the first plan and seed its categories."""
    return await OnboardingRepository(db).complete(current_user, answers)
