"""Retirement decisions for active fighters.

Hard triggers mark a fighter as a retirement candidate; only candidates roll
against a small, capped monthly probability.  A configurable age cap forces
retirement outright.  Configurable via ``rules/retirement_model.json``.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from boxing_universe.constants import RETIREMENT_CADENCE_WEEKS
from boxing_universe.events import Event, RetirementEvent
from boxing_universe.models import (
    CareerPhase,
    CareerRecord,
    Fighter,
    RetirementRecord,
    SimDate,
    Universe,
)
from boxing_universe.modules.career_phase import apply_phase_transition
from boxing_universe.modules.post_career import assign_post_career_role
from boxing_universe.modules.titles import vacate_all_titles
from boxing_universe.rules_registry import load_rule_set
from boxing_universe.utils import clamp_float

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetirementEvaluation:
    """Result of a monthly retirement check."""

    is_retired: bool
    newly_retired: bool
    forced: bool
    chance: float
    roll: float | None
    reason: str


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _rules() -> dict:
    return load_rule_set("retirement_model")


def _base_age_chance(age: int) -> float:
    for band in _rules()["age_bands"]:
        if int(band["min_age"]) <= age <= int(band["max_age"]):
            return float(band["base_chance"])
    return 0.0


def _heart(fighter: Fighter) -> float:
    value = fighter.attributes.find("heart")
    if value is None:
        return float(_rules()["default_heart"])
    return value


# ---------------------------------------------------------------------------
# Hard triggers and probability
# ---------------------------------------------------------------------------

def should_consider_retirement(fighter: Fighter, current_date: SimDate) -> bool:
    """True if any hard trigger marks *fighter* as a retirement candidate."""
    if fighter.is_retired:
        return False
    triggers = _rules()["hard_triggers"]
    age = fighter.age_at(current_date)

    if age >= int(triggers["age"]):
        return True
    if age >= int(triggers["veteran_age"]) and fighter.consecutive_losses >= int(triggers["veteran_loss_streak"]):
        return True
    if fighter.record.ko_losses >= int(triggers["ko_losses"]):
        return True
    if fighter.phase == CareerPhase.DECLINE and fighter.record.is_losing:
        return True
    return fighter.consecutive_losses >= int(triggers["loss_streak"])


def retirement_probability(fighter: Fighter, age: int) -> float:
    """Return the monthly probability that a candidate retires.

    Age bands plus form and damage bonuses, damped by heart and ambition and
    capped by ``chance_cap``.
    """
    rules = _rules()
    chance = _base_age_chance(age)

    streak = rules["loss_streak"]
    if fighter.consecutive_losses >= int(streak["threshold"]):
        chance += float(streak["bonus"])

    ko_rules = rules["ko_losses"]
    if fighter.record.ko_losses >= int(ko_rules["severe_threshold"]):
        chance += float(ko_rules["severe_bonus"])
    elif fighter.record.ko_losses >= int(ko_rules["moderate_threshold"]):
        chance += float(ko_rules["moderate_bonus"])

    divisor = float(rules["resolve_divisor"])
    heart = clamp_float(_heart(fighter), 0.0, divisor)
    ambition = clamp_float(fighter.personality.ambition, 0.0, divisor)
    chance *= (1.0 - heart / divisor) * (1.0 - ambition / divisor)

    return clamp_float(chance, 0.0, float(rules["chance_cap"]))


# ---------------------------------------------------------------------------
# Retirement reason formatting
# ---------------------------------------------------------------------------

def _retirement_reason(fighter: Fighter, age: int, *, forced: bool) -> str:
    if forced:
        hard_age_cap = int(_rules()["hard_age_cap"])
        return f"Retired at age {age} after reaching the age cap ({hard_age_cap})."
    return (
        f"Retired at age {age} after weighing age, form and punishment taken. "
        f"Final record: {fighter.record.summary()}."
    )


# ---------------------------------------------------------------------------
# Public evaluation
# ---------------------------------------------------------------------------

def evaluate_retirement(
    fighter: Fighter,
    current_date: SimDate,
    *,
    rng: random.Random | None = None,
) -> RetirementEvaluation:
    """Decide whether *fighter* retires in this evaluation window.

    Does not mutate the fighter; see :func:`retire_fighter`.
    """
    if fighter.is_retired:
        return RetirementEvaluation(
            is_retired=True, newly_retired=False, forced=False,
            chance=1.0, roll=None, reason="Already retired.",
        )

    age = fighter.age_at(current_date)
    if age >= int(_rules()["hard_age_cap"]):
        return RetirementEvaluation(
            is_retired=True, newly_retired=True, forced=True,
            chance=1.0, roll=None, reason=_retirement_reason(fighter, age, forced=True),
        )

    if not should_consider_retirement(fighter, current_date):
        return RetirementEvaluation(
            is_retired=False, newly_retired=False, forced=False,
            chance=0.0, roll=None, reason="",
        )

    chance = retirement_probability(fighter, age)
    randomizer = rng or random.Random()
    roll = randomizer.random()
    if roll < chance:
        return RetirementEvaluation(
            is_retired=True, newly_retired=True, forced=False,
            chance=chance, roll=roll, reason=_retirement_reason(fighter, age, forced=False),
        )

    return RetirementEvaluation(
        is_retired=False, newly_retired=False, forced=False,
        chance=chance, roll=roll, reason="",
    )


def retire_fighter(
    universe: Universe,
    fighter: Fighter,
    evaluation: RetirementEvaluation,
    *,
    rng: random.Random | None = None,
) -> list[Event]:
    """Retire *fighter*: vacate belts, archive the career, pick a next role."""
    fighter.ensure_active()
    today = universe.current_date
    age = fighter.age_at(today)
    final_ranking = fighter.rankings.current

    events: list[Event] = list(vacate_all_titles(universe, fighter, today, "retired"))

    apply_phase_transition(fighter, CareerPhase.RETIRED)
    fighter.retirement_date = today
    fighter.attributes.freeze()
    universe.move_to_retired(fighter)
    universe.stats.fighters_retired += 1
    universe.history.retirements.append(
        RetirementRecord(
            fighter_id=fighter.id,
            name=fighter.name,
            date=today,
            age=age,
            record=CareerRecord.from_dict(fighter.record.to_dict()),
            titles=[f"{reign.organization} {reign.division}" for reign in fighter.titles],
            peak_ranking=fighter.rankings.peak,
            final_ranking=final_ranking,
            reason=evaluation.reason,
        )
    )

    role = None
    if universe.config.post_career_roles:
        role = assign_post_career_role(universe, fighter, rng=rng)

    logger.debug("Retired %s (%s) at %d: %s", fighter.name, fighter.id, age, evaluation.reason)
    events.append(
        RetirementEvent(
            fighter_id=fighter.id,
            name=fighter.name,
            age=age,
            record=fighter.record.summary(),
            forced=evaluation.forced,
            reason=evaluation.reason,
            post_career_role=role,
        )
    )
    return events


def is_retirement_week(date: SimDate) -> bool:
    return date.week % RETIREMENT_CADENCE_WEEKS == 0


def process_retirements(
    universe: Universe,
    *,
    rng: random.Random | None = None,
) -> list[Event]:
    """Run the monthly retirement pass over every active fighter."""
    if not is_retirement_week(universe.current_date):
        return []
    randomizer = rng or random.Random()
    events: list[Event] = []
    for fighter in universe.active_fighters():
        evaluation = evaluate_retirement(fighter, universe.current_date, rng=randomizer)
        if evaluation.newly_retired:
            events.extend(retire_fighter(universe, fighter, evaluation, rng=randomizer))
    return events
