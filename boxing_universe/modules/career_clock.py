"""Calendar-driven weekly upkeep.

Ages every active fighter through the progression model, counts down
injuries and suspensions, and maintains the activity counters that rankings
and matchmaking read.
"""

from __future__ import annotations

import random

from boxing_universe.events import Event, InjuryHealedEvent, SuspensionEndedEvent
from boxing_universe.models import Universe
from boxing_universe.modules.progression_engine import advance_attributes, prime_status


def age_and_progress(universe: Universe, *, rng: random.Random | None = None) -> list[Event]:
    randomizer = rng or random.Random()
    events: list[Event] = []
    for fighter in universe.active_fighters():
        age = fighter.age_at(universe.current_date)
        in_prime, past_prime = prime_status(fighter, age)
        events.extend(
            advance_attributes(
                fighter,
                age,
                is_in_prime=in_prime,
                is_past_prime=past_prime,
                rng=randomizer,
            )
        )
    return events


def count_down_layoffs(universe: Universe) -> list[Event]:
    """Tick one week off every injury and suspension."""
    events: list[Event] = []
    for fighter in universe.active_fighters():
        healing = []
        for injury in fighter.injuries:
            injury.weeks_remaining -= 1
            if injury.weeks_remaining <= 0:
                events.append(InjuryHealedEvent(fighter_id=fighter.id, name=fighter.name, injury=injury.kind))
            else:
                healing.append(injury)
        fighter.injuries = healing

        serving = []
        for suspension in fighter.suspensions:
            suspension.weeks_remaining -= 1
            if suspension.weeks_remaining <= 0:
                events.append(
                    SuspensionEndedEvent(fighter_id=fighter.id, name=fighter.name, reason=suspension.reason)
                )
            else:
                serving.append(suspension)
        fighter.suspensions = serving
    return events


def update_activity(universe: Universe) -> None:
    new_year = universe.current_date.week == 1
    for fighter in universe.active_fighters():
        if new_year:
            fighter.fights_this_year = 0
        fighter.weeks_inactive += 1
