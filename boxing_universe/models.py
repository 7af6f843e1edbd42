from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from boxing_universe.constants import (
    ATTRIBUTE_CATEGORIES,
    CURRENT_UNIVERSE_VERSION,
    LINEAL_TITLE,
    MIN_ATTRIBUTE,
    WEEKS_PER_YEAR,
)
from boxing_universe.utils import clamp_attribute, clamp_float, clamp_int


class CareerStateError(RuntimeError):
    """Raised when code tries to mutate or re-activate a retired fighter."""


class CareerPhase(str, Enum):
    YOUTH = "YOUTH"
    AMATEUR = "AMATEUR"
    PRO_DEBUT = "PRO_DEBUT"
    RISING = "RISING"
    CONTENDER = "CONTENDER"
    CHAMPION = "CHAMPION"
    GATEKEEPER = "GATEKEEPER"
    DECLINE = "DECLINE"
    RETIRED = "RETIRED"


ACTIVE_PRO_PHASES: frozenset[CareerPhase] = frozenset(
    {
        CareerPhase.RISING,
        CareerPhase.CONTENDER,
        CareerPhase.CHAMPION,
        CareerPhase.GATEKEEPER,
        CareerPhase.DECLINE,
    }
)


class TalentTier(str, Enum):
    GENERATIONAL = "GENERATIONAL"
    ELITE = "ELITE"
    WORLD_CLASS = "WORLD_CLASS"
    CONTENDER = "CONTENDER"
    GATEKEEPER = "GATEKEEPER"
    JOURNEYMAN = "JOURNEYMAN"
    CLUB = "CLUB"


def _date_or_none(payload: Any) -> SimDate | None:
    if not isinstance(payload, dict):
        return None
    return SimDate.from_dict(payload)


def _date_dict(value: SimDate | None) -> dict[str, int] | None:
    return None if value is None else value.to_dict()


@dataclass(frozen=True, order=True)
class SimDate:
    year: int
    week: int

    def advance(self) -> SimDate:
        if self.week >= WEEKS_PER_YEAR:
            return SimDate(year=self.year + 1, week=1)
        return SimDate(year=self.year, week=self.week + 1)

    def weeks_since(self, other: SimDate) -> int:
        return (self.year - other.year) * WEEKS_PER_YEAR + (self.week - other.week)

    def __str__(self) -> str:
        return f"Y{self.year} W{self.week:02d}"

    def to_dict(self) -> dict[str, int]:
        return {"year": self.year, "week": self.week}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SimDate:
        return cls(
            year=int(payload["year"]),
            week=clamp_int(int(payload.get("week", 1)), 1, WEEKS_PER_YEAR),
        )


@dataclass
class CareerRecord:
    wins: int = 0
    losses: int = 0
    draws: int = 0
    kos: int = 0
    ko_losses: int = 0

    @property
    def total_fights(self) -> int:
        return self.wins + self.losses + self.draws

    @property
    def win_percentage(self) -> float:
        total = self.total_fights
        return 0.0 if total == 0 else self.wins / total

    @property
    def ko_percentage(self) -> float:
        """Share of wins that came inside the distance."""
        return 0.0 if self.wins == 0 else self.kos / self.wins

    @property
    def is_losing(self) -> bool:
        return self.losses > self.wins

    def summary(self) -> str:
        return f"{self.wins}-{self.losses}-{self.draws} ({self.kos} KO)"

    def to_dict(self) -> dict[str, int]:
        return {
            "wins": self.wins,
            "losses": self.losses,
            "draws": self.draws,
            "kos": self.kos,
            "ko_losses": self.ko_losses,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> CareerRecord:
        return cls(
            wins=int(payload.get("wins", 0)),
            losses=int(payload.get("losses", 0)),
            draws=int(payload.get("draws", 0)),
            kos=int(payload.get("kos", 0)),
            ko_losses=int(payload.get("ko_losses", 0)),
        )


@dataclass
class RankingInfo:
    current: int | None = None
    peak: int | None = None
    weeks_ranked: int = 0

    def record_rank(self, rank: int) -> None:
        self.current = rank
        self.weeks_ranked += 1
        if self.peak is None or rank < self.peak:
            self.peak = rank

    def to_dict(self) -> dict[str, Any]:
        return {
            "current": self.current,
            "peak": self.peak,
            "weeks_ranked": self.weeks_ranked,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> RankingInfo:
        current = payload.get("current")
        peak = payload.get("peak")
        return cls(
            current=None if current is None else int(current),
            peak=None if peak is None else int(peak),
            weeks_ranked=int(payload.get("weeks_ranked", 0)),
        )


@dataclass
class TitleReign:
    """One title reign; ``lost_date is None`` while the belt is still held."""

    fighter_id: str
    organization: str
    division: str
    won_date: SimDate
    lost_date: SimDate | None = None
    defenses: int = 0
    lost_reason: str | None = None
    last_defense_date: SimDate | None = None

    @property
    def is_open(self) -> bool:
        return self.lost_date is None

    def close(self, date: SimDate, reason: str) -> None:
        self.lost_date = date
        self.lost_reason = reason

    def record_defense(self, date: SimDate) -> None:
        self.defenses += 1
        self.last_defense_date = date

    def to_dict(self) -> dict[str, Any]:
        return {
            "fighter_id": self.fighter_id,
            "organization": self.organization,
            "division": self.division,
            "won_date": self.won_date.to_dict(),
            "lost_date": _date_dict(self.lost_date),
            "defenses": self.defenses,
            "lost_reason": self.lost_reason,
            "last_defense_date": _date_dict(self.last_defense_date),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> TitleReign:
        reason = payload.get("lost_reason")
        return cls(
            fighter_id=str(payload["fighter_id"]),
            organization=str(payload["organization"]),
            division=str(payload["division"]),
            won_date=SimDate.from_dict(payload["won_date"]),
            lost_date=_date_or_none(payload.get("lost_date")),
            defenses=int(payload.get("defenses", 0)),
            lost_reason=None if reason is None else str(reason),
            last_defense_date=_date_or_none(payload.get("last_defense_date")),
        )


@dataclass(frozen=True)
class Potential:
    tier: TalentTier
    ceiling: float
    growth_rate: float
    peak_age_physical: int
    peak_age_mental: int
    resilience: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "tier": self.tier.value,
            "ceiling": self.ceiling,
            "growth_rate": self.growth_rate,
            "peak_age_physical": self.peak_age_physical,
            "peak_age_mental": self.peak_age_mental,
            "resilience": self.resilience,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Potential:
        return cls(
            tier=TalentTier(str(payload.get("tier", TalentTier.JOURNEYMAN.value))),
            ceiling=clamp_attribute(float(payload.get("ceiling", 75.0))),
            growth_rate=float(payload.get("growth_rate", 1.0)),
            peak_age_physical=int(payload.get("peak_age_physical", 28)),
            peak_age_mental=int(payload.get("peak_age_mental", 30)),
            resilience=clamp_float(float(payload.get("resilience", 0.5)), 0.0, 1.0),
        )


@dataclass(frozen=True)
class Personality:
    ambition: int = 50
    risk_tolerance: int = 50
    loyalty: int = 50
    work_ethic: int = 50

    def to_dict(self) -> dict[str, int]:
        return {
            "ambition": self.ambition,
            "risk_tolerance": self.risk_tolerance,
            "loyalty": self.loyalty,
            "work_ethic": self.work_ethic,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Personality:
        return cls(
            ambition=clamp_int(payload.get("ambition", 50), 0, 100),
            risk_tolerance=clamp_int(payload.get("risk_tolerance", 50), 0, 100),
            loyalty=clamp_int(payload.get("loyalty", 50), 0, 100),
            work_ethic=clamp_int(payload.get("work_ethic", 50), 0, 100),
        )


@dataclass
class Injury:
    kind: str
    weeks_remaining: int

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "weeks_remaining": self.weeks_remaining}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Injury:
        return cls(
            kind=str(payload.get("kind", "injury")),
            weeks_remaining=max(0, int(payload.get("weeks_remaining", 0))),
        )


@dataclass
class Suspension:
    reason: str
    weeks_remaining: int

    def to_dict(self) -> dict[str, Any]:
        return {"reason": self.reason, "weeks_remaining": self.weeks_remaining}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Suspension:
        return cls(
            reason=str(payload.get("reason", "medical")),
            weeks_remaining=max(0, int(payload.get("weeks_remaining", 0))),
        )


class Attributes:
    """Seven categories of named skills, every value held inside ``[30, 99]``.

    All writes go through :meth:`set`, which clamps.  Once frozen (a retired
    fighter), any write raises ``CareerStateError``.
    """

    def __init__(self, categories: dict[str, dict[str, float]] | None = None) -> None:
        self._values: dict[str, dict[str, float]] = {
            category: {} for category in ATTRIBUTE_CATEGORIES
        }
        self._frozen = False
        for category, skills in (categories or {}).items():
            for skill, value in skills.items():
                self.set(category, skill, value)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def get(self, category: str, skill: str, default: float = MIN_ATTRIBUTE) -> float:
        return self._values.get(category, {}).get(skill, default)

    def set(self, category: str, skill: str, value: float) -> float:
        if self._frozen:
            raise CareerStateError(
                f"Cannot change {category}.{skill}: attributes are frozen."
            )
        if category not in self._values:
            raise ValueError(f"Unknown attribute category: {category}")
        stored = clamp_attribute(value)
        self._values[category][skill] = stored
        return stored

    def adjust(self, category: str, skill: str, delta: float) -> float:
        return self.set(category, skill, self.get(category, skill) + delta)

    def find(self, skill: str) -> float | None:
        """Look a skill up by name in whichever category holds it."""
        for skills in self._values.values():
            if skill in skills:
                return skills[skill]
        return None

    def items(self) -> Iterator[tuple[str, str, float]]:
        for category, skills in self._values.items():
            for skill, value in skills.items():
                yield category, skill, value

    def copy(self) -> Attributes:
        return Attributes(self.to_dict())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Attributes):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Attributes({self._values!r})"

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {category: dict(skills) for category, skills in self._values.items()}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Attributes:
        return cls(
            {
                str(category): {str(skill): float(value) for skill, value in skills.items()}
                for category, skills in payload.items()
                if isinstance(skills, dict)
            }
        )


@dataclass
class Fighter:
    id: str
    name: str
    nationality: str
    division: str
    birth_date: SimDate
    potential: Potential
    personality: Personality
    attributes: Attributes
    base_attributes: Attributes
    stance: str = "orthodox"
    phase: CareerPhase = CareerPhase.PRO_DEBUT
    record: CareerRecord = field(default_factory=CareerRecord)
    rankings: RankingInfo = field(default_factory=RankingInfo)
    body_rankings: dict[str, int] = field(default_factory=dict)
    titles: list[TitleReign] = field(default_factory=list)
    fights_this_year: int = 0
    weeks_inactive: int = 0
    consecutive_wins: int = 0
    consecutive_losses: int = 0
    ranked_wins: int = 0
    popularity: int = 10
    earnings: float = 0.0
    injuries: list[Injury] = field(default_factory=list)
    suspensions: list[Suspension] = field(default_factory=list)
    pro_debut_date: SimDate | None = None
    last_fight_date: SimDate | None = None
    retirement_date: SimDate | None = None
    post_career_role: str | None = None

    @property
    def is_retired(self) -> bool:
        return self.phase == CareerPhase.RETIRED

    def age_at(self, date: SimDate) -> int:
        age = date.year - self.birth_date.year
        if date.week < self.birth_date.week:
            age -= 1
        return max(0, age)

    def can_fight(self) -> bool:
        return not self.is_retired and not self.injuries and not self.suspensions

    def ensure_active(self) -> None:
        if self.is_retired:
            raise CareerStateError(f"{self.name} ({self.id}) is retired.")

    def open_titles(self) -> list[TitleReign]:
        return [reign for reign in self.titles if reign.is_open]

    def open_title(self, organization: str) -> TitleReign | None:
        for reign in self.titles:
            if reign.is_open and reign.organization == organization:
                return reign
        return None

    @property
    def is_champion(self) -> bool:
        return bool(self.open_titles())

    @property
    def world_titles(self) -> int:
        """Number of sanctioning-body reigns, lineal reigns excluded."""
        return sum(1 for reign in self.titles if reign.organization != LINEAL_TITLE)

    @property
    def total_defenses(self) -> int:
        return sum(reign.defenses for reign in self.titles)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "nationality": self.nationality,
            "division": self.division,
            "birth_date": self.birth_date.to_dict(),
            "stance": self.stance,
            "phase": self.phase.value,
            "record": self.record.to_dict(),
            "rankings": self.rankings.to_dict(),
            "body_rankings": dict(self.body_rankings),
            "titles": [reign.to_dict() for reign in self.titles],
            "potential": self.potential.to_dict(),
            "personality": self.personality.to_dict(),
            "attributes": self.attributes.to_dict(),
            "base_attributes": self.base_attributes.to_dict(),
            "fights_this_year": self.fights_this_year,
            "weeks_inactive": self.weeks_inactive,
            "consecutive_wins": self.consecutive_wins,
            "consecutive_losses": self.consecutive_losses,
            "ranked_wins": self.ranked_wins,
            "popularity": self.popularity,
            "earnings": self.earnings,
            "injuries": [injury.to_dict() for injury in self.injuries],
            "suspensions": [suspension.to_dict() for suspension in self.suspensions],
            "pro_debut_date": _date_dict(self.pro_debut_date),
            "last_fight_date": _date_dict(self.last_fight_date),
            "retirement_date": _date_dict(self.retirement_date),
            "post_career_role": self.post_career_role,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Fighter:
        attributes = Attributes.from_dict(payload.get("attributes", {}))
        base_payload = payload.get("base_attributes")
        base_attributes = (
            Attributes.from_dict(base_payload)
            if isinstance(base_payload, dict)
            else attributes.copy()
        )
        phase = CareerPhase(str(payload.get("phase", CareerPhase.PRO_DEBUT.value)))
        if phase == CareerPhase.RETIRED:
            attributes.freeze()
        role = payload.get("post_career_role")
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            nationality=str(payload.get("nationality", "USA")),
            division=str(payload["division"]),
            birth_date=SimDate.from_dict(payload["birth_date"]),
            stance=str(payload.get("stance", "orthodox")),
            phase=phase,
            record=CareerRecord.from_dict(payload.get("record", {})),
            rankings=RankingInfo.from_dict(payload.get("rankings", {})),
            body_rankings={
                str(code): int(rank)
                for code, rank in payload.get("body_rankings", {}).items()
            },
            titles=[TitleReign.from_dict(item) for item in payload.get("titles", [])],
            potential=Potential.from_dict(payload.get("potential", {})),
            personality=Personality.from_dict(payload.get("personality", {})),
            attributes=attributes,
            base_attributes=base_attributes,
            fights_this_year=int(payload.get("fights_this_year", 0)),
            weeks_inactive=int(payload.get("weeks_inactive", 0)),
            consecutive_wins=int(payload.get("consecutive_wins", 0)),
            consecutive_losses=int(payload.get("consecutive_losses", 0)),
            ranked_wins=int(payload.get("ranked_wins", 0)),
            popularity=clamp_int(payload.get("popularity", 10), 0, 100),
            earnings=float(payload.get("earnings", 0.0)),
            injuries=[Injury.from_dict(item) for item in payload.get("injuries", [])],
            suspensions=[
                Suspension.from_dict(item) for item in payload.get("suspensions", [])
            ],
            pro_debut_date=_date_or_none(payload.get("pro_debut_date")),
            last_fight_date=_date_or_none(payload.get("last_fight_date")),
            retirement_date=_date_or_none(payload.get("retirement_date")),
            post_career_role=None if role is None else str(role),
        )


@dataclass
class Division:
    name: str
    min_kg: float
    max_kg: float
    champion_id: str | None = None
    champion_defenses: int = 0
    rankings: list[str] = field(default_factory=list)
    mandatory_challenger_id: str | None = None
    fighter_ids: list[str] = field(default_factory=list)
    champion_history: list[TitleReign] = field(default_factory=list)

    def current_reign(self) -> TitleReign | None:
        for reign in reversed(self.champion_history):
            if reign.is_open:
                return reign
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "min_kg": self.min_kg,
            "max_kg": self.max_kg,
            "champion_id": self.champion_id,
            "champion_defenses": self.champion_defenses,
            "rankings": list(self.rankings),
            "mandatory_challenger_id": self.mandatory_challenger_id,
            "fighter_ids": list(self.fighter_ids),
            "champion_history": [reign.to_dict() for reign in self.champion_history],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Division:
        champion = payload.get("champion_id")
        challenger = payload.get("mandatory_challenger_id")
        return cls(
            name=str(payload["name"]),
            min_kg=float(payload.get("min_kg", 0.0)),
            max_kg=float(payload.get("max_kg", 0.0)),
            champion_id=None if champion is None else str(champion),
            champion_defenses=int(payload.get("champion_defenses", 0)),
            rankings=[str(item) for item in payload.get("rankings", [])],
            mandatory_challenger_id=None if challenger is None else str(challenger),
            fighter_ids=[str(item) for item in payload.get("fighter_ids", [])],
            champion_history=[
                TitleReign.from_dict(item) for item in payload.get("champion_history", [])
            ],
        )


@dataclass
class SanctioningBody:
    code: str
    name: str
    champions: dict[str, str | None] = field(default_factory=dict)
    rankings: dict[str, list[str]] = field(default_factory=dict)
    mandatory_challengers: dict[str, str | None] = field(default_factory=dict)
    reigns: list[TitleReign] = field(default_factory=list)

    def current_reign(self, division: str) -> TitleReign | None:
        for reign in reversed(self.reigns):
            if reign.division == division and reign.is_open:
                return reign
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "champions": dict(self.champions),
            "rankings": {division: list(ids) for division, ids in self.rankings.items()},
            "mandatory_challengers": dict(self.mandatory_challengers),
            "reigns": [reign.to_dict() for reign in self.reigns],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SanctioningBody:
        return cls(
            code=str(payload["code"]),
            name=str(payload.get("name", payload["code"])),
            champions={
                str(division): None if holder is None else str(holder)
                for division, holder in payload.get("champions", {}).items()
            },
            rankings={
                str(division): [str(item) for item in ids]
                for division, ids in payload.get("rankings", {}).items()
            },
            mandatory_challengers={
                str(division): None if holder is None else str(holder)
                for division, holder in payload.get("mandatory_challengers", {}).items()
            },
            reigns=[TitleReign.from_dict(item) for item in payload.get("reigns", [])],
        )


@dataclass
class HallOfFameInductee:
    fighter_id: str
    name: str
    year: int
    score: float
    category: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "fighter_id": self.fighter_id,
            "name": self.name,
            "year": self.year,
            "score": self.score,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> HallOfFameInductee:
        return cls(
            fighter_id=str(payload["fighter_id"]),
            name=str(payload["name"]),
            year=int(payload["year"]),
            score=float(payload["score"]),
            category=str(payload["category"]),
        )


@dataclass
class HallOfFame:
    inductees: list[HallOfFameInductee] = field(default_factory=list)

    def is_inducted(self, fighter_id: str) -> bool:
        return any(item.fighter_id == fighter_id for item in self.inductees)

    def to_dict(self) -> dict[str, Any]:
        return {"inductees": [item.to_dict() for item in self.inductees]}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> HallOfFame:
        return cls(
            inductees=[
                HallOfFameInductee.from_dict(item) for item in payload.get("inductees", [])
            ]
        )


@dataclass
class RetirementRecord:
    fighter_id: str
    name: str
    date: SimDate
    age: int
    record: CareerRecord
    titles: list[str]
    peak_ranking: int | None
    final_ranking: int | None
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "fighter_id": self.fighter_id,
            "name": self.name,
            "date": self.date.to_dict(),
            "age": self.age,
            "record": self.record.to_dict(),
            "titles": list(self.titles),
            "peak_ranking": self.peak_ranking,
            "final_ranking": self.final_ranking,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> RetirementRecord:
        peak = payload.get("peak_ranking")
        final = payload.get("final_ranking")
        return cls(
            fighter_id=str(payload["fighter_id"]),
            name=str(payload["name"]),
            date=SimDate.from_dict(payload["date"]),
            age=int(payload["age"]),
            record=CareerRecord.from_dict(payload.get("record", {})),
            titles=[str(item) for item in payload.get("titles", [])],
            peak_ranking=None if peak is None else int(peak),
            final_ranking=None if final is None else int(final),
            reason=str(payload.get("reason", "")),
        )


@dataclass
class UpsetRecord:
    date: SimDate
    winner_id: str
    loser_id: str
    division: str
    method: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.to_dict(),
            "winner_id": self.winner_id,
            "loser_id": self.loser_id,
            "division": self.division,
            "method": self.method,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> UpsetRecord:
        return cls(
            date=SimDate.from_dict(payload["date"]),
            winner_id=str(payload["winner_id"]),
            loser_id=str(payload["loser_id"]),
            division=str(payload["division"]),
            method=str(payload["method"]),
        )


@dataclass
class UniverseHistory:
    retirements: list[RetirementRecord] = field(default_factory=list)
    upsets: list[UpsetRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "retirements": [item.to_dict() for item in self.retirements],
            "upsets": [item.to_dict() for item in self.upsets],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> UniverseHistory:
        return cls(
            retirements=[
                RetirementRecord.from_dict(item) for item in payload.get("retirements", [])
            ],
            upsets=[UpsetRecord.from_dict(item) for item in payload.get("upsets", [])],
        )


@dataclass
class StaffMember:
    """A retired fighter working a post-career role."""

    fighter_id: str
    name: str
    role: str
    skills: dict[str, float]
    hired_date: SimDate

    def to_dict(self) -> dict[str, Any]:
        return {
            "fighter_id": self.fighter_id,
            "name": self.name,
            "role": self.role,
            "skills": dict(self.skills),
            "hired_date": self.hired_date.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> StaffMember:
        return cls(
            fighter_id=str(payload["fighter_id"]),
            name=str(payload["name"]),
            role=str(payload["role"]),
            skills={str(key): float(value) for key, value in payload.get("skills", {}).items()},
            hired_date=SimDate.from_dict(payload["hired_date"]),
        )


@dataclass
class UniverseStats:
    fights_simulated: int = 0
    knockouts: int = 0
    decisions: int = 0
    draws: int = 0
    fighters_generated: int = 0
    fighters_retired: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "fights_simulated": self.fights_simulated,
            "knockouts": self.knockouts,
            "decisions": self.decisions,
            "draws": self.draws,
            "fighters_generated": self.fighters_generated,
            "fighters_retired": self.fighters_retired,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> UniverseStats:
        return cls(
            fights_simulated=int(payload.get("fights_simulated", 0)),
            knockouts=int(payload.get("knockouts", 0)),
            decisions=int(payload.get("decisions", 0)),
            draws=int(payload.get("draws", 0)),
            fighters_generated=int(payload.get("fighters_generated", 0)),
            fighters_retired=int(payload.get("fighters_retired", 0)),
        )


@dataclass
class UniverseConfig:
    target_population: int = 500
    population_variance: int = 100
    base_prospect_rate: float = 0.5
    post_career_roles: bool = True
    combat_workers: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_population": self.target_population,
            "population_variance": self.population_variance,
            "base_prospect_rate": self.base_prospect_rate,
            "post_career_roles": self.post_career_roles,
            "combat_workers": self.combat_workers,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> UniverseConfig:
        return cls(
            target_population=max(0, int(payload.get("target_population", 500))),
            population_variance=int(payload.get("population_variance", 100)),
            base_prospect_rate=float(payload.get("base_prospect_rate", 0.5)),
            post_career_roles=bool(payload.get("post_career_roles", True)),
            combat_workers=max(1, int(payload.get("combat_workers", 1))),
        )


@dataclass
class Universe:
    """Everything one simulated boxing world owns.

    Every pipeline stage receives the universe explicitly; nothing lives in
    module-level state, so several universes can run side by side.
    """

    config: UniverseConfig = field(default_factory=UniverseConfig)
    current_date: SimDate = field(default_factory=lambda: SimDate(year=2000, week=1))
    fighters: dict[str, Fighter] = field(default_factory=dict)
    retired_fighters: dict[str, Fighter] = field(default_factory=dict)
    divisions: dict[str, Division] = field(default_factory=dict)
    sanctioning_bodies: dict[str, SanctioningBody] = field(default_factory=dict)
    hall_of_fame: HallOfFame = field(default_factory=HallOfFame)
    history: UniverseHistory = field(default_factory=UniverseHistory)
    staff: list[StaffMember] = field(default_factory=list)
    stats: UniverseStats = field(default_factory=UniverseStats)
    last_week_results: list[dict[str, Any]] = field(default_factory=list)
    next_fighter_number: int = 1

    @property
    def population(self) -> int:
        return len(self.fighters)

    def new_fighter_id(self) -> str:
        fighter_id = f"F{self.next_fighter_number:06d}"
        self.next_fighter_number += 1
        return fighter_id

    def active_fighters(self) -> list[Fighter]:
        return list(self.fighters.values())

    def get_fighter(self, fighter_id: str | None) -> Fighter | None:
        if fighter_id is None:
            return None
        return self.fighters.get(fighter_id) or self.retired_fighters.get(fighter_id)

    def fighters_in(self, division: str) -> list[Fighter]:
        found = self.divisions.get(division)
        if found is None:
            return []
        return [self.fighters[fid] for fid in found.fighter_ids if fid in self.fighters]

    def add_fighter(self, fighter: Fighter) -> None:
        if fighter.id in self.fighters or fighter.id in self.retired_fighters:
            raise ValueError(f"Duplicate fighter id: {fighter.id}")
        fighter.ensure_active()
        division = self.divisions.get(fighter.division)
        if division is None:
            raise ValueError(f"Unknown division: {fighter.division}")
        self.fighters[fighter.id] = fighter
        division.fighter_ids.append(fighter.id)

    def move_to_retired(self, fighter: Fighter) -> None:
        """Detach a retired fighter from every active structure.

        The fighter keeps its history and lands in ``retired_fighters``.
        """
        if not fighter.is_retired:
            raise CareerStateError(f"{fighter.name} ({fighter.id}) has not retired.")
        self.fighters.pop(fighter.id, None)
        self.retired_fighters[fighter.id] = fighter

        division = self.divisions.get(fighter.division)
        if division is not None:
            if fighter.id in division.fighter_ids:
                division.fighter_ids.remove(fighter.id)
            if fighter.id in division.rankings:
                division.rankings.remove(fighter.id)
            if division.mandatory_challenger_id == fighter.id:
                division.mandatory_challenger_id = None
        for body in self.sanctioning_bodies.values():
            ranked = body.rankings.get(fighter.division, [])
            if fighter.id in ranked:
                ranked.remove(fighter.id)
            if body.mandatory_challengers.get(fighter.division) == fighter.id:
                body.mandatory_challengers[fighter.division] = None
        fighter.rankings.current = None
        fighter.body_rankings.clear()

    def advance_week(self) -> SimDate:
        self.current_date = self.current_date.advance()
        return self.current_date

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": CURRENT_UNIVERSE_VERSION,
            "config": self.config.to_dict(),
            "current_date": self.current_date.to_dict(),
            "fighters": {fid: fighter.to_dict() for fid, fighter in self.fighters.items()},
            "retired_fighters": {
                fid: fighter.to_dict() for fid, fighter in self.retired_fighters.items()
            },
            "divisions": {name: division.to_dict() for name, division in self.divisions.items()},
            "sanctioning_bodies": {
                code: body.to_dict() for code, body in self.sanctioning_bodies.items()
            },
            "hall_of_fame": self.hall_of_fame.to_dict(),
            "history": self.history.to_dict(),
            "staff": [member.to_dict() for member in self.staff],
            "stats": self.stats.to_dict(),
            "last_week_results": list(self.last_week_results),
            "next_fighter_number": self.next_fighter_number,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Universe:
        version = int(payload.get("version", CURRENT_UNIVERSE_VERSION))
        if version > CURRENT_UNIVERSE_VERSION:
            raise ValueError(f"Unsupported universe version: {version}")
        return cls(
            config=UniverseConfig.from_dict(payload.get("config", {})),
            current_date=SimDate.from_dict(payload["current_date"]),
            fighters={
                str(fid): Fighter.from_dict(item)
                for fid, item in payload.get("fighters", {}).items()
            },
            retired_fighters={
                str(fid): Fighter.from_dict(item)
                for fid, item in payload.get("retired_fighters", {}).items()
            },
            divisions={
                str(name): Division.from_dict(item)
                for name, item in payload.get("divisions", {}).items()
            },
            sanctioning_bodies={
                str(code): SanctioningBody.from_dict(item)
                for code, item in payload.get("sanctioning_bodies", {}).items()
            },
            hall_of_fame=HallOfFame.from_dict(payload.get("hall_of_fame", {})),
            history=UniverseHistory.from_dict(payload.get("history", {})),
            staff=[StaffMember.from_dict(item) for item in payload.get("staff", [])],
            stats=UniverseStats.from_dict(payload.get("stats", {})),
            last_week_results=list(payload.get("last_week_results", [])),
            next_fighter_number=int(payload.get("next_fighter_number", 1)),
        )
