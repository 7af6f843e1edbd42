"""Weekly attribute progression and decline.

Young fighters grow toward a ceiling derived from their base snapshot and
talent tier, fighters in their prime hold steady, and veterans past their
physical peak erode.  Rates are configurable via
``rules/progression_model.json``.
"""

from __future__ import annotations

import random

from boxing_universe.constants import MAX_ATTRIBUTE, MIN_ATTRIBUTE
from boxing_universe.events import Event, VisibleDeclineEvent
from boxing_universe.models import Fighter
from boxing_universe.rules_registry import load_rule_set
from boxing_universe.utils import clamp_float


def _rules() -> dict:
    return load_rule_set("progression_model")


# ---------------------------------------------------------------------------
# Prime classification
# ---------------------------------------------------------------------------

def in_prime(fighter: Fighter, age: int) -> bool:
    """True when *age* sits inside the physical or the mental prime window.

    Boundary ages count as in prime.
    """
    window = int(_rules()["prime_window_years"])
    potential = fighter.potential
    return (
        abs(age - potential.peak_age_physical) <= window
        or abs(age - potential.peak_age_mental) <= window
    )


def in_physical_prime(fighter: Fighter, age: int) -> bool:
    window = int(_rules()["prime_window_years"])
    return abs(age - fighter.potential.peak_age_physical) <= window


def past_prime(fighter: Fighter, age: int) -> bool:
    onset = int(_rules()["decline_onset_years_past_peak"])
    return age > fighter.potential.peak_age_physical + onset


def prime_status(fighter: Fighter, age: int) -> tuple[bool, bool]:
    """Return ``(in_prime, past_prime)``; prime wins when both apply."""
    prime = in_prime(fighter, age)
    return prime, (not prime) and past_prime(fighter, age)


def work_ethic_modifier(work_ethic: int) -> float:
    settings = _rules()["work_ethic"]
    floor = float(settings["floor"])
    divisor = float(settings["divisor"])
    return clamp_float(floor + work_ethic / divisor, floor, floor + 100.0 / divisor)


def effective_ceiling(fighter: Fighter, category: str, skill: str) -> float:
    """Highest value *skill* may progress to."""
    multiplier = float(_rules()["ceiling_base_multiplier"])
    base = fighter.base_attributes.get(category, skill, fighter.attributes.get(category, skill))
    return min(fighter.potential.ceiling, base * multiplier, MAX_ATTRIBUTE)


# ---------------------------------------------------------------------------
# Progression
# ---------------------------------------------------------------------------

def _progress(fighter: Fighter) -> None:
    rules = _rules()
    rates = rules["progression_rates"]
    ethic = work_ethic_modifier(fighter.personality.work_ethic)
    growth_rate = fighter.potential.growth_rate

    for category, skill, value in list(fighter.attributes.items()):
        if skill == "experience":
            continue
        ceiling = effective_ceiling(fighter, category, skill)
        if value >= ceiling:
            continue
        growth = float(rates.get(category, 0.0)) * growth_rate * ethic * (1.0 - value / 100.0)
        if growth <= 0.0:
            continue
        fighter.attributes.set(category, skill, min(ceiling, value + growth))


# ---------------------------------------------------------------------------
# Decline
# ---------------------------------------------------------------------------

def _decline_rate(category: str, skill: str, decline_rules: dict) -> float:
    overrides = decline_rules["skill_overrides"]
    if skill in overrides:
        return float(overrides[skill])
    return float(decline_rules["category_rates"].get(category, 0.0))


def _decline(fighter: Fighter, age: int) -> float:
    """Erode attributes for a fighter past prime; returns the total loss."""
    decline_rules = _rules()["decline"]
    years_past_peak = max(0, age - fighter.potential.peak_age_physical)
    multiplier = 1.0 + float(decline_rules["acceleration_per_year"]) * years_past_peak
    resilience_modifier = 1.0 - float(decline_rules["resilience_dampening"]) * fighter.potential.resilience
    physical_skills = set(decline_rules["physical_skills"])
    physical_extra = float(decline_rules["physical_extra_rate"])

    total_loss = 0.0
    for category, skill, value in list(fighter.attributes.items()):
        loss = _decline_rate(category, skill, decline_rules) * multiplier * resilience_modifier
        if skill in physical_skills:
            loss += physical_extra * multiplier * resilience_modifier
        if loss <= 0.0:
            continue
        stored = fighter.attributes.set(category, skill, max(MIN_ATTRIBUTE, value - loss))
        total_loss += value - stored
    return total_loss


def _maybe_visible_decline(
    fighter: Fighter,
    age: int,
    weekly_loss: float,
    rng: random.Random,
) -> list[Event]:
    settings = _rules()["visible_decline"]
    years_past_peak = age - fighter.potential.peak_age_physical
    if years_past_peak < int(settings["min_years_past_peak"]):
        return []
    if weekly_loss < float(settings["min_weekly_loss"]):
        return []
    if rng.random() >= float(settings["chance"]):
        return []
    return [
        VisibleDeclineEvent(
            fighter_id=fighter.id,
            name=fighter.name,
            age=age,
            weekly_loss=round(weekly_loss, 3),
        )
    ]


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------

def grow_experience(fighter: Fighter) -> None:
    """Fold this year's ring time into experience and ring-IQ skills."""
    if fighter.fights_this_year <= 0:
        return
    settings = _rules()["experience"]
    experience = fighter.attributes.get("mental", "experience")
    experience = fighter.attributes.set(
        "mental",
        "experience",
        min(MAX_ATTRIBUTE, experience + float(settings["growth_per_fight"]) * fighter.fights_this_year),
    )

    trickle = float(settings["trickle_rate"]) * (experience / 100.0)
    targets = set(settings["trickle_skills"])
    categories = set(settings["trickle_categories"])
    for category, skill, _ in list(fighter.attributes.items()):
        if category in categories and skill in targets:
            fighter.attributes.adjust(category, skill, trickle)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def advance_attributes(
    fighter: Fighter,
    age: int,
    *,
    is_in_prime: bool,
    is_past_prime: bool,
    rng: random.Random | None = None,
) -> list[Event]:
    """Apply one week of progression, stability or decline to *fighter*.

    Mutates ``fighter.attributes`` in place and returns any narrative
    events.  Prime takes precedence over both progression and decline.
    """
    fighter.ensure_active()
    randomizer = rng or random.Random()
    events: list[Event] = []

    if is_past_prime and not is_in_prime:
        weekly_loss = _decline(fighter, age)
        events.extend(_maybe_visible_decline(fighter, age, weekly_loss, randomizer))
    elif not is_in_prime:
        _progress(fighter)

    grow_experience(fighter)
    return events
