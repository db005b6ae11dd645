"""Starter category layout derived from onboarding answers."""

from typing import Dict, List, Tuple

from components.onboarding.schemas import OnboardingAnswers

FALLBACK_GROUP = ("Essential Expenses", ["Groceries", "Utilities", "Transportation", "Emergency Fund"])

HOUSING = {
    "own_home": ["Mortgage Payment", "Property Tax", "Home Insurance", "HOA Fees"],
    "own_home_free": ["Property Tax", "Home Insurance", "HOA Fees"],
    "rent": ["Rent", "Renter's Insurance"],
    "rent_shared": ["Rent", "Renter's Insurance"],
    "live_with_family": ["Contribution to Household"],
    "dormitory": ["Dormitory Fees", "Meal Plan"],
}
UTILITIES = ["Electricity", "Gas", "Water/Sewer", "Trash/Recycling"]

# group name, answer field, {answer: categories}
OPTION_GROUPS: List[Tuple[str, str, Dict[str, List[str]]]] = [
    ("Transportation", "transportation", {
        "own_car": ["Car Payment", "Car Insurance", "Gas & Fuel", "Car Maintenance"],
        "own_car_paid_off": ["Car Insurance", "Gas & Fuel", "Car Maintenance"],
        "public_transit": ["Public Transportation"],
        "rideshare": ["Rideshare/Taxi"],
        "bike": ["Bike Maintenance"],
    }),
    ("Food & Dining", "expense_categories", {
        "groceries": ["Groceries"],
        "dining": ["Dining Out", "Takeout/Delivery"],
    }),
    ("Health & Wellness", "health_wellness", {
        "health_insurance": ["Health Insurance"],
        "medications": ["Medications"],
        "therapy": ["Therapy/Mental Health"],
        "dental": ["Dental Care"],
        "vision": ["Vision Care"],
        "gym_membership": ["Gym Membership"],
    }),
    ("Debt Payments", "debt_types", {
        "credit_card": ["Credit Card Payments"],
        "student_loan": ["Student Loan Payments"],
        "car_loan": ["Car Loan Payment"],
        "personal_loan": ["Personal Loan Payment"],
        "medical_debt": ["Medical Debt Payment"],
        "other": ["Other Debt Payment"],
    }),
    ("Savings & Investments", "savings_goals", {
        "emergency_fund": ["Emergency Fund"],
        "house_down_payment": ["House Down Payment"],
        "car_purchase": ["Car Purchase Fund"],
        "vacation": ["Vacation Fund"],
        "education": ["Education Fund"],
        "retirement": ["Retirement Savings"],
        "investments": ["Investment Account"],
    }),
    ("Subscriptions & Digital", "subscriptions", {
        "streaming": ["Streaming Services"],
        "music": ["Music Streaming"],
        "gaming": ["Gaming Subscriptions"],
        "news": ["News & Magazines"],
        "software": ["Software Subscriptions"],
        "cloud": ["Cloud Storage"],
    }),
    ("Family & Pets", "family_pets", {
        "children": ["Childcare", "School Expenses", "Kids Activities"],
        "elder_care": ["Elder Care"],
        "dogs": ["Dog Food", "Dog Vet Bills"],
        "cats": ["Cat Food", "Cat Vet Bills"],
        "other_pets": ["Pet Food", "Pet Vet Bills"],
    }),
    ("Hobbies & Fun", "hobbies_interests", {
        "sports": ["Sports Equipment"],
        "arts": ["Art Supplies"],
        "music": ["Music Equipment"],
        "gaming": ["Video Games"],
        "reading": ["Books"],
        "travel": ["Travel Fund"],
    }),
    ("Irregular Expenses", "irregular_expenses", {
        "car_maintenance": ["Car Repairs Fund"],
        "medical": ["Medical Emergency Fund"],
        "gifts": ["Gifts"],
        "holidays": ["Holidays"],
        "annual_fees": ["Annual Fees"],
    }),
]


def _unique(names: List[str]) -> List[str]:
    return list(dict.fromkeys(names))


def category_layout(answers: OnboardingAnswers) -> List[Tuple[str, List[str]]]:
    """Category groups and their categories, in display order."""
    if answers.skipped:
        return []

    layout = []
    housing = list(HOUSING.get(answers.housing_type or "", []))
    if answers.housing_type != "dormitory" or "utilities" in answers.expense_categories:
        housing += UTILITIES
    if "internet" in answers.expense_categories:
        housing += ["Internet", "Cable/TV"]
    layout.append(("Housing & Utilities", _unique(housing)))

    for group_name, field, options in OPTION_GROUPS:
        selected = getattr(answers, field)
        if field == "debt_types" and answers.has_debt != "yes":
            continue
        names = [name for option in selected for name in options.get(option, [])]
        if names:
            layout.append((group_name, _unique(names)))

    if not any(names for _, names in layout):
        return [FALLBACK_GROUP]
    return [(group, names) for group, names in layout if names]
