"""
DateTime utilities for pet onboarding.

This module provides the age-bracket helpers used by the pet form: turning
a selected bracket into the approximate birth date stored on the pet record,
and rendering brackets for display.
"""

from datetime import date
from typing import Optional

# Brackets run from "0" (under one year) to "16" (sixteen years or older)
MIN_AGE_BRACKET = 0
MAX_AGE_BRACKET = 16


def parse_age_bracket(age: Optional[str]) -> Optional[int]:
    """
    Parse an age bracket selected in the pet form.

    Args:
        age: Bracket value as a string ("0" to "16"), or empty

    Returns:
        The bracket as an integer, or None when nothing was selected

    Raises:
        ValueError: If the value is not a known bracket
    """
    if age is None or not str(age).strip():
        return None

    try:
        years = int(str(age).strip())
    except ValueError:
        raise ValueError(f"Age bracket must be a whole number, got: {age!r}")

    if years < MIN_AGE_BRACKET or years > MAX_AGE_BRACKET:
        raise ValueError(
            f"Age bracket must be between {MIN_AGE_BRACKET} and {MAX_AGE_BRACKET}"
        )
    return years


def birth_date_from_age_bracket(
    age: Optional[str], reference_date: Optional[date] = None
) -> Optional[date]:
    """
    Derive an approximate birth date from an age bracket.

    The pet is assumed to be born on January 1st of ``reference_year - age``.

    Args:
        age: Bracket value as a string, or empty
        reference_date: The date to count back from (defaults to today)

    Returns:
        Approximate birth date, or None when no bracket was selected

    Example:
        >>> birth_date_from_age_bracket("3", date(2024, 9, 20))
        datetime.date(2021, 1, 1)
    """
    years = parse_age_bracket(age)
    if years is None:
        return None

    if reference_date is None:
        reference_date = date.today()

    return date(reference_date.year - years, 1, 1)


def format_age_bracket(age: Optional[str]) -> str:
    """Render an age bracket the way the pet list shows it."""
    years = parse_age_bracket(age)
    if years is None:
        return ""
    if years == MIN_AGE_BRACKET:
        return "Filhote (< 1 ano)"
    if years == MAX_AGE_BRACKET:
        return "16+ anos (Idoso)"
    return f"{years} {'ano' if years == 1 else 'anos'}"
