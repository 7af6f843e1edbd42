"""Interfaces for the services the weekly tick consumes.

Matchmaking, combat resolution, prospect generation and economics are
collaborators: the tick only depends on these protocols.  Default
implementations live in ``matchmaking``, ``combat``, ``generation`` and
``economics``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Protocol

from boxing_universe.constants import DRAW_METHOD
from boxing_universe.events import Event
from boxing_universe.models import Fighter, SimDate, TalentTier, Universe


@dataclass(frozen=True)
class TitleInfo:
    organizations: tuple[str, ...]
    vacant: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"organizations": list(self.organizations), "vacant": self.vacant}


@dataclass(frozen=True)
class FightCard:
    fighter_a_id: str
    fighter_b_id: str
    division: str
    fight_type: str
    rounds: int
    title_info: TitleInfo | None = None

    @property
    def is_title_fight(self) -> bool:
        return self.title_info is not None and bool(self.title_info.organizations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fighter_a_id": self.fighter_a_id,
            "fighter_b_id": self.fighter_b_id,
            "division": self.division,
            "fight_type": self.fight_type,
            "rounds": self.rounds,
            "title_info": None if self.title_info is None else self.title_info.to_dict(),
        }


@dataclass(frozen=True)
class FighterSnapshot:
    """Read-only copy of the fight-relevant parts of a fighter."""

    id: str
    name: str
    division: str
    tier: TalentTier
    attributes: dict[str, dict[str, float]]
    wins: int
    losses: int
    popularity: int
    rank: int | None

    @classmethod
    def from_fighter(cls, fighter: Fighter) -> FighterSnapshot:
        return cls(
            id=fighter.id,
            name=fighter.name,
            division=fighter.division,
            tier=fighter.potential.tier,
            attributes=fighter.attributes.to_dict(),
            wins=fighter.record.wins,
            losses=fighter.record.losses,
            popularity=fighter.popularity,
            rank=fighter.rankings.current,
        )

    def skill(self, category: str, name: str, default: float = 50.0) -> float:
        return float(self.attributes.get(category, {}).get(name, default))


@dataclass(frozen=True)
class FightOutcome:
    card: FightCard
    winner_id: str | None
    loser_id: str | None
    method: str
    round: int
    stats: dict[str, Any] = field(default_factory=dict)
    is_upset: bool = False

    @property
    def is_draw(self) -> bool:
        return self.winner_id is None or self.method == DRAW_METHOD

    def to_dict(self) -> dict[str, Any]:
        return {
            "card": self.card.to_dict(),
            "winner_id": self.winner_id,
            "loser_id": self.loser_id,
            "method": self.method,
            "round": self.round,
            "stats": dict(self.stats),
            "is_upset": self.is_upset,
        }


class Matchmaker(Protocol):
    def generate_weekly_fights(self, universe: Universe, rng: random.Random) -> list[FightCard]:
        ...


class CombatResolver(Protocol):
    def run_fight(
        self,
        card: FightCard,
        snapshot_a: FighterSnapshot,
        snapshot_b: FighterSnapshot,
        rng: random.Random,
    ) -> FightOutcome:
        ...


class FighterGenerator(Protocol):
    def generate(self, current_date: SimDate, age: int, rng: random.Random) -> Fighter:
        ...


class EconomicsService(Protocol):
    def process_week(self, universe: Universe, results: list[FightOutcome]) -> list[Event]:
        ...
