"""Career phase state machine.

All phase changes for active fighters go through :func:`next_phase` and
:func:`apply_phase_transition`, called once per fighter per week.  Phases
only move forward, except for lateral moves among the active professional
phases.  ``RETIRED`` is terminal and is only entered via the retirement
engine.
"""

from __future__ import annotations

from boxing_universe.models import (
    ACTIVE_PRO_PHASES,
    CareerPhase,
    CareerStateError,
    Fighter,
    Universe,
)
from boxing_universe.modules.progression_engine import in_physical_prime
from boxing_universe.rules_registry import load_rule_set

_PHASE_ORDER: dict[CareerPhase, int] = {
    CareerPhase.YOUTH: 0,
    CareerPhase.AMATEUR: 1,
    CareerPhase.PRO_DEBUT: 2,
    CareerPhase.RISING: 3,
    CareerPhase.CONTENDER: 3,
    CareerPhase.CHAMPION: 3,
    CareerPhase.GATEKEEPER: 3,
    CareerPhase.DECLINE: 3,
    CareerPhase.RETIRED: 4,
}


def _rules() -> dict:
    return load_rule_set("career_model")


def can_transition(current: CareerPhase, target: CareerPhase) -> bool:
    if current == target:
        return True
    if current == CareerPhase.RETIRED:
        return False
    if current in ACTIVE_PRO_PHASES and target in ACTIVE_PRO_PHASES:
        return True
    return _PHASE_ORDER[target] > _PHASE_ORDER[current]


def _desired_phase(
    fighter: Fighter,
    age: int,
    *,
    retirement_candidate: bool,
    physical_prime: bool,
) -> CareerPhase | None:
    rules = _rules()
    record = fighter.record
    total = record.total_fights

    if retirement_candidate:
        return CareerPhase.DECLINE
    if fighter.open_titles():
        return CareerPhase.CHAMPION
    current_rank = fighter.rankings.current
    if current_rank is not None and current_rank <= int(rules["contender_max_rank"]):
        return CareerPhase.CONTENDER

    gatekeeper = rules["gatekeeper"]
    if total >= int(gatekeeper["min_fights"]) and age >= int(gatekeeper["min_age"]) and not physical_prime:
        return CareerPhase.GATEKEEPER

    rising = rules["rising"]
    if int(rising["min_fights"]) <= total <= int(rising["max_fights"]) and record.wins > record.losses:
        return CareerPhase.RISING
    if total < int(rising["min_fights"]) and fighter.pro_debut_date is not None:
        return CareerPhase.PRO_DEBUT

    decline = rules["decline"]
    if age >= int(decline["age"]) or fighter.consecutive_losses >= int(decline["loss_streak"]):
        return CareerPhase.DECLINE
    if fighter.phase == CareerPhase.PRO_DEBUT and total >= int(rising["min_fights"]):
        return CareerPhase.RISING
    return None


def next_phase(
    fighter: Fighter,
    age: int,
    *,
    retirement_candidate: bool,
    physical_prime: bool,
) -> CareerPhase:
    """Return the phase *fighter* should occupy after this week.

    Falls back to the current phase when no rule fires or when the
    preferred phase would be an illegal backwards move.
    """
    if fighter.is_retired:
        return CareerPhase.RETIRED
    target = _desired_phase(
        fighter,
        age,
        retirement_candidate=retirement_candidate,
        physical_prime=physical_prime,
    )
    if target is None or not can_transition(fighter.phase, target):
        return fighter.phase
    return target


def apply_phase_transition(fighter: Fighter, target: CareerPhase) -> bool:
    """Move *fighter* to *target*; returns whether the phase changed."""
    if fighter.is_retired and target != CareerPhase.RETIRED:
        raise CareerStateError(
            f"{fighter.name} ({fighter.id}) is retired and cannot become {target.value}."
        )
    if not can_transition(fighter.phase, target):
        raise CareerStateError(
            f"Illegal phase transition for {fighter.id}: "
            f"{fighter.phase.value} -> {target.value}."
        )
    if fighter.phase == target:
        return False
    fighter.phase = target
    return True


def update_career_phases(universe: Universe) -> int:
    """Run the transition function over every active fighter.

    Returns the number of fighters whose phase changed.
    """
    from boxing_universe.modules.retirement_engine import should_consider_retirement

    changed = 0
    for fighter in universe.active_fighters():
        age = fighter.age_at(universe.current_date)
        target = next_phase(
            fighter,
            age,
            retirement_candidate=should_consider_retirement(fighter, universe.current_date),
            physical_prime=in_physical_prime(fighter, age),
        )
        if apply_phase_transition(fighter, target):
            changed += 1
    return changed
