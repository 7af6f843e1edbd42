"""Post-career role assignment for retiring fighters.

Roles are a closed set of descriptors (trainer, commentator, promoter,
none) loaded from ``rules/post_career.json``.  Each descriptor scores a
fighter's aptitude from the same signals; the role is drawn with weights
proportional to those scores and its skill bundle is registered once in
``Universe.staff``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from boxing_universe.models import Fighter, StaffMember, Universe
from boxing_universe.rules_registry import load_rule_set
from boxing_universe.utils import weighted_choice

NO_ROLE = "none"
_NEUTRAL_SIGNAL = 50.0


def _signal(fighter: Fighter, name: str) -> float:
    if name == "popularity":
        return float(fighter.popularity)
    if name == "earnings_100k":
        return fighter.earnings / 100_000.0
    value = fighter.attributes.find(name)
    return _NEUTRAL_SIGNAL if value is None else value


@dataclass(frozen=True)
class RoleDescriptor:
    name: str
    base_score: float
    signals: dict[str, float]
    title_bonus: float
    skills: dict[str, str]

    def aptitude(self, fighter: Fighter) -> float:
        score = self.base_score
        for signal, weight in self.signals.items():
            score += _signal(fighter, signal) * weight
        if fighter.titles:
            score += self.title_bonus
        return max(0.0, score)

    def skill_bundle(self, fighter: Fighter) -> dict[str, float]:
        return {
            skill: round(_signal(fighter, source), 2)
            for skill, source in self.skills.items()
        }


def role_descriptors() -> tuple[RoleDescriptor, ...]:
    return tuple(
        RoleDescriptor(
            name=str(item["name"]),
            base_score=float(item["base_score"]),
            signals={str(key): float(value) for key, value in item.get("signals", {}).items()},
            title_bonus=float(item.get("title_bonus", 0.0)),
            skills={str(key): str(value) for key, value in item.get("skills", {}).items()},
        )
        for item in load_rule_set("post_career")["roles"]
    )


def choose_role(fighter: Fighter, *, rng: random.Random | None = None) -> RoleDescriptor:
    randomizer = rng or random.Random()
    descriptors = role_descriptors()
    picked = weighted_choice(
        [(role.name, role.aptitude(fighter)) for role in descriptors],
        randomizer.random(),
    )
    return next(role for role in descriptors if role.name == picked)


def assign_post_career_role(
    universe: Universe,
    fighter: Fighter,
    *,
    rng: random.Random | None = None,
) -> str:
    """Pick and record a post-career role for a retired fighter.

    One-time side effect: the fighter's ``post_career_role`` is set and, for
    any role other than ``none``, a staff entry is added unless one exists.
    """
    if fighter.post_career_role is not None:
        return fighter.post_career_role
    role = choose_role(fighter, rng=rng)
    fighter.post_career_role = role.name
    if role.name != NO_ROLE and not any(member.fighter_id == fighter.id for member in universe.staff):
        universe.staff.append(
            StaffMember(
                fighter_id=fighter.id,
                name=fighter.name,
                role=role.name,
                skills=role.skill_bundle(fighter),
                hired_date=universe.current_date,
            )
        )
    return role.name
