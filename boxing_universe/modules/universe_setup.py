"""Building a fresh universe: divisions, sanctioning bodies and a seed roster."""

from __future__ import annotations

import logging
import random

from boxing_universe.models import (
    Division,
    SanctioningBody,
    SimDate,
    Universe,
    UniverseConfig,
)
from boxing_universe.modules.body_rankings import body_codes, body_config
from boxing_universe.modules.collaborators import FighterGenerator
from boxing_universe.modules.generation import ProspectGenerator
from boxing_universe.rules_registry import load_rule_set

logger = logging.getLogger(__name__)

SEED_AGE_RANGE = (18, 32)


def build_divisions() -> dict[str, Division]:
    return {
        str(item["name"]): Division(
            name=str(item["name"]),
            min_kg=float(item["min_kg"]),
            max_kg=float(item["max_kg"]),
        )
        for item in load_rule_set("weight_classes")["classes"]
    }


def build_sanctioning_bodies(divisions: list[str]) -> dict[str, SanctioningBody]:
    bodies: dict[str, SanctioningBody] = {}
    for code in body_codes():
        config = body_config(code)
        bodies[code] = SanctioningBody(
            code=code,
            name=str(config["name"]),
            champions={division: None for division in divisions},
            rankings={division: [] for division in divisions},
            mandatory_challengers={division: None for division in divisions},
        )
    return bodies


def create_universe(
    *,
    config: UniverseConfig | None = None,
    start_date: SimDate | None = None,
    initial_population: int | None = None,
    generator: FighterGenerator | None = None,
    rng: random.Random | None = None,
) -> Universe:
    """Create a universe and seed it with a starting roster.

    ``initial_population`` defaults to the configured target population.
    """
    randomizer = rng or random.Random()
    universe = Universe(
        config=config or UniverseConfig(),
        current_date=start_date or SimDate(year=2000, week=1),
    )
    universe.divisions = build_divisions()
    universe.sanctioning_bodies = build_sanctioning_bodies(list(universe.divisions))

    seed_count = universe.config.target_population if initial_population is None else initial_population
    if seed_count < 0:
        raise ValueError("initial_population must be >= 0.")
    source = generator or ProspectGenerator(universe)
    for _ in range(seed_count):
        age = randomizer.randint(*SEED_AGE_RANGE)
        universe.add_fighter(source.generate(universe.current_date, age, randomizer))
        universe.stats.fighters_generated += 1

    logger.info(
        "Created universe with %d fighters across %d divisions",
        universe.population,
        len(universe.divisions),
    )
    return universe
