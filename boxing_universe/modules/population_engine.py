"""Population equilibrium controller.

Keeps the active roster near ``UniverseConfig.target_population`` by
injecting fresh professional prospects.  Generation never fully stops: even
well above target a small replacement trickle continues.  Configurable via
``rules/population_model.json``.
"""

from __future__ import annotations

import logging
import random

from boxing_universe.events import Event, NewProspectEvent
from boxing_universe.models import CareerPhase, Fighter, Universe
from boxing_universe.modules.collaborators import FighterGenerator
from boxing_universe.rules_registry import load_rule_set

logger = logging.getLogger(__name__)


def _rules() -> dict:
    return load_rule_set("population_model")


def generation_probability(
    active_count: int,
    target: int,
    variance: int,
    base_rate: float,
) -> float:
    """Weekly chance of a prospect intake as a step function of the deficit."""
    probabilities = _rules()["probabilities"]
    if variance <= 0:
        return max(0.0, min(1.0, base_rate / float(_rules()["base_rate_divisor"])))

    deficit = target - active_count
    if deficit > variance:
        return float(probabilities["well_below"])
    if deficit > 0:
        floor = float(probabilities["below_floor"])
        ramp = float(probabilities["below_ramp"])
        return floor + (deficit / variance) * ramp
    if deficit > -variance:
        return float(probabilities["at_target"])
    return float(probabilities["above_target"])


def should_generate(
    active_count: int,
    target: int,
    variance: int,
    base_rate: float,
    *,
    rng: random.Random | None = None,
) -> bool:
    randomizer = rng or random.Random()
    return randomizer.random() < generation_probability(active_count, target, variance, base_rate)


def prospect_count(deficit: int, *, rng: random.Random | None = None) -> int:
    """How many prospects one intake brings, scaled by deficit severity."""
    randomizer = rng or random.Random()
    rules = _rules()
    for band in rules["prospect_counts"]:
        if deficit >= int(band["min_deficit"]):
            return randomizer.randint(int(band["min_count"]), int(band["max_count"]))
    return int(rules["surplus_count"])


def _generate_batch(
    universe: Universe,
    generator: FighterGenerator,
    count: int,
    randomizer: random.Random,
) -> list[Fighter]:
    ages = _rules()["prospect_age"]
    batch: list[Fighter] = []
    for _ in range(count):
        age = randomizer.randint(int(ages["min"]), int(ages["max"]))
        fighter = generator.generate(universe.current_date, age, randomizer)
        fighter.phase = CareerPhase.PRO_DEBUT
        fighter.pro_debut_date = universe.current_date
        batch.append(fighter)
    return batch


def _check_batch(universe: Universe, batch: list[Fighter]) -> None:
    """Reject the whole batch if any prospect could not join the roster."""
    seen: set[str] = set()
    for fighter in batch:
        if fighter.id in seen or universe.get_fighter(fighter.id) is not None:
            raise ValueError(f"Duplicate fighter id: {fighter.id}")
        if fighter.division not in universe.divisions:
            raise ValueError(f"Unknown division: {fighter.division}")
        seen.add(fighter.id)


def maintain_population(
    universe: Universe,
    generator: FighterGenerator,
    *,
    rng: random.Random | None = None,
) -> list[Event]:
    """Maybe inject a batch of prospects this week.

    A generator failure anywhere in the batch means no prospects this week.
    """
    randomizer = rng or random.Random()
    config = universe.config
    active = universe.population
    if not should_generate(
        active,
        config.target_population,
        config.population_variance,
        config.base_prospect_rate,
        rng=randomizer,
    ):
        return []

    count = prospect_count(config.target_population - active, rng=randomizer)
    try:
        batch = _generate_batch(universe, generator, count, randomizer)
        _check_batch(universe, batch)
    except (ValueError, KeyError) as exc:
        logger.warning("Prospect generation failed, skipping intake this week: %s", exc)
        return []

    events: list[Event] = []
    for fighter in batch:
        universe.add_fighter(fighter)
        universe.stats.fighters_generated += 1
        events.append(
            NewProspectEvent(
                fighter_id=fighter.id,
                name=fighter.name,
                division=fighter.division,
                age=fighter.age_at(universe.current_date),
                tier=fighter.potential.tier.value,
            )
        )
    return events
