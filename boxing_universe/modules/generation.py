"""Procedural prospect generation.

Rolls a talent tier, a division, a name and nationality, a full attribute
bundle, potential and personality.  Younger prospects start below their
natural level and grow into it.  Configurable via
``rules/generation_model.json`` and ``rules/weight_classes.json``.
"""

from __future__ import annotations

import random
from typing import Callable

from boxing_universe.constants import WEEKS_PER_YEAR
from boxing_universe.models import (
    Attributes,
    CareerPhase,
    Fighter,
    Personality,
    Potential,
    SimDate,
    TalentTier,
    Universe,
)
from boxing_universe.rules_registry import load_rule_set
from boxing_universe.utils import clamp_attribute, clamp_int, weighted_choice

MIN_PROSPECT_AGE = 16
MAX_PROSPECT_AGE = 45


def _rules() -> dict:
    return load_rule_set("generation_model")


def weight_class_names() -> list[str]:
    return [str(item["name"]) for item in load_rule_set("weight_classes")["classes"]]


def roll_talent_tier(rng: random.Random) -> TalentTier:
    tiers = _rules()["talent_tiers"]
    picked = weighted_choice(
        [(name, float(config["chance"])) for name, config in tiers.items()],
        rng.random(),
    )
    return TalentTier(picked)


def age_start_modifier(age: int, skill: str) -> float:
    """Fraction of natural level a prospect of *age* starts with."""
    settings = _rules()["age_start"]
    if age >= int(settings["full_strength_age"]):
        return 1.0
    years = max(0, age - 18)
    if skill == "experience":
        band = settings["experience"]
    elif skill in settings["physical_skills"]:
        band = settings["physical"]
    else:
        band = settings["other"]
    return float(band["base"]) + years * float(band["per_year"])


def _roll_attributes(tier: TalentTier, age: int, rng: random.Random) -> Attributes:
    rules = _rules()
    base_mod = float(rules["talent_tiers"][tier.value]["base_mod"])
    variance = float(rules["attribute_variance"])
    attributes = Attributes()
    for category, skills in rules["attribute_template"].items():
        for skill in skills:
            base = float(rules["experience_base"] if skill == "experience" else rules["attribute_base"])
            value = base * base_mod + rng.uniform(-variance, variance)
            value *= age_start_modifier(age, skill)
            attributes.set(category, skill, round(value))
    return attributes


def _roll_potential(tier: TalentTier, rng: random.Random) -> Potential:
    rules = _rules()
    growth = rules["growth_rate"]
    physical = rules["peak_age_physical"]
    mental = rules["peak_age_mental"]
    resilience = rules["resilience"]
    return Potential(
        tier=tier,
        ceiling=clamp_attribute(
            round(float(rules["base_ceiling"]) * float(rules["talent_tiers"][tier.value]["ceiling_mod"]))
        ),
        growth_rate=round(rng.uniform(float(growth["min"]), float(growth["max"])), 3),
        peak_age_physical=rng.randint(int(physical["min"]), int(physical["max"])),
        peak_age_mental=rng.randint(int(mental["min"]), int(mental["max"])),
        resilience=round(rng.uniform(float(resilience["min"]), float(resilience["max"])), 3),
    )


def _roll_personality(rng: random.Random) -> Personality:
    settings = _rules()["personality"]
    base = float(settings["base"])
    variance = float(settings["variance"])

    def trait() -> int:
        return clamp_int(round(base + rng.uniform(-variance, variance)), 0, 100)

    return Personality(
        ambition=trait(),
        risk_tolerance=trait(),
        loyalty=trait(),
        work_ethic=trait(),
    )


def _roll_identity(rng: random.Random) -> tuple[str, str]:
    regions = _rules()["names"]["regions"]
    label = weighted_choice(
        [(str(region["nationality"]), float(region["weight"])) for region in regions],
        rng.random(),
    )
    region = next(item for item in regions if item["nationality"] == label)
    name = f"{rng.choice(region['first'])} {rng.choice(region['last'])}"
    return name, label


class ProspectGenerator:
    """Default fighter generator bound to one universe's id sequence."""

    def __init__(
        self,
        universe: Universe,
        *,
        divisions: list[str] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._universe = universe
        self._divisions = divisions
        self._id_factory = id_factory or universe.new_fighter_id

    def _division_pool(self) -> list[str]:
        if self._divisions:
            return list(self._divisions)
        known = set(self._universe.divisions)
        return [name for name in weight_class_names() if name in known]

    def generate(self, current_date: SimDate, age: int, rng: random.Random) -> Fighter:
        if not MIN_PROSPECT_AGE <= age <= MAX_PROSPECT_AGE:
            raise ValueError(f"Prospect age out of range: {age}")
        pool = self._division_pool()
        if not pool:
            raise ValueError("No divisions available for new prospects.")

        rules = _rules()
        tier = roll_talent_tier(rng)
        attributes = _roll_attributes(tier, age, rng)
        name, nationality = _roll_identity(rng)
        popularity = rules["starting_popularity"]
        birth_week = rng.randint(1, WEEKS_PER_YEAR)
        birth_year = current_date.year - age - (1 if birth_week > current_date.week else 0)

        return Fighter(
            id=self._id_factory(),
            name=name,
            nationality=nationality,
            division=rng.choice(pool),
            birth_date=SimDate(year=birth_year, week=birth_week),
            stance="southpaw" if rng.random() < float(rules["southpaw_chance"]) else "orthodox",
            phase=CareerPhase.PRO_DEBUT,
            potential=_roll_potential(tier, rng),
            personality=_roll_personality(rng),
            attributes=attributes,
            base_attributes=attributes.copy(),
            popularity=rng.randint(int(popularity["min"]), int(popularity["max"])),
            pro_debut_date=current_date,
        )
