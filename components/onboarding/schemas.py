"""Onboarding schemas for request validation."""

from typing import List, Optional

from pydantic import BaseModel, Field


class OnboardingAnswers(BaseModel):
    """Answers from the first-run questionnaire."""
    name: str = Field(..., min_length=1, max_length=100)
    skipped: bool = False
    budgeting_experience: Optional[str] = None
    housing_type: Optional[str] = None
    has_debt: Optional[str] = None
    transportation: List[str] = []
    expense_categories: List[str] = []
    health_wellness: List[str] = []
    debt_types: List[str] = []
    savings_goals: List[str] = []
    subscriptions: List[str] = []
    family_pets: List[str] = []
    hobbies_interests: List[str] = []
    irregular_expenses: List[str] = []


class OnboardingResult(BaseModel):
    success: bool = True
    plan_id: int
    category_group_count: int
    category_count: int
