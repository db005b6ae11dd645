"""Repository for first-run onboarding."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from components.category.models import CategoryGroup, Category
from components.core.config import get_settings
from components.onboarding import schemas
from components.onboarding.seed import category_layout
from components.plan.models import Plan, GroupMember, Role
from components.user.models import User

logger = logging.getLogger(__name__)
settings = get_settings()


class OnboardingRepository:
    """Repository for onboarding operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def complete(self, user: User, answers: schemas.OnboardingAnswers) -> schemas.OnboardingResult:
        """Store the answers, create the first plan and seed its categories."""
        name = answers.name.strip()
        layout = category_layout(answers)
        try:
            user.name = name
            user.has_completed_onboarding = True
            user.onboarding_data = answers.model_dump()

            plan = Plan(
                name=f"{name}'s Budget",
                description=(
                    "Your custom budget - start fresh!" if answers.skipped
                    else "Your personalized budget based on your lifestyle"
                ),
                currency=settings.DEFAULT_CURRENCY,
            )
            self.session.add(plan)
            await self.session.flush()
            self.session.add(GroupMember(user_id=user.id, plan_id=plan.id, role=Role.OWNER))

            category_count = 0
            for group_order, (group_name, category_names) in enumerate(layout, start=1):
                group = CategoryGroup(plan_id=plan.id, name=group_name, sort_order=group_order)
                self.session.add(group)
                await self.session.flush()
                for category_order, category_name in enumerate(category_names, start=1):
                    self.session.add(Category(
                        category_group_id=group.id,
                        name=category_name,
                        sort_order=category_order,
                    ))
                category_count += len(category_names)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "User %s completed onboarding: plan %s with %s groups and %s categories",
            user.id, plan.id, len(layout), category_count,
        )
        return schemas.OnboardingResult(
            plan_id=plan.id,
            category_group_count=len(layout),
            category_count=category_count,
        )
