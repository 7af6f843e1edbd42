"""Weekly simulation events.

Every stage of the weekly tick returns a list of these.  Each variant is a
frozen dataclass carrying only the fields relevant to its kind, plus a
``type`` tag and a human-readable ``message`` for display layers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Union


class EventType(str, Enum):
    FIGHT_RESULT = "FIGHT_RESULT"
    TITLE_CHANGE = "TITLE_CHANGE"
    UPSET = "UPSET"
    RETIREMENT = "RETIREMENT"
    NEW_PROSPECT = "NEW_PROSPECT"
    VISIBLE_DECLINE = "VISIBLE_DECLINE"
    HOF_INDUCTION = "HOF_INDUCTION"
    RANKING_CHANGE = "RANKING_CHANGE"
    MANDATORY_DUE = "MANDATORY_DUE"
    INJURY_HEALED = "INJURY_HEALED"
    SUSPENSION_ENDED = "SUSPENSION_ENDED"
    FINANCIAL_SUMMARY = "FINANCIAL_SUMMARY"


class RankingChange(str, Enum):
    ENTERED = "ENTERED"
    UP = "UP"
    DOWN = "DOWN"
    DROPPED = "DROPPED"


class _EventMixin:
    type: EventType

    @property
    def message(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)  # type: ignore[call-overload]
        for key, value in payload.items():
            if isinstance(value, Enum):
                payload[key] = value.value
        payload["message"] = self.message
        return payload


@dataclass(frozen=True)
class FightResultEvent(_EventMixin):
    fighter_a_id: str
    fighter_a_name: str
    fighter_b_id: str
    fighter_b_name: str
    winner_id: str | None
    method: str
    round: int
    division: str
    title_fight: bool = False
    type: EventType = field(default=EventType.FIGHT_RESULT, init=False)

    @property
    def message(self) -> str:
        if self.winner_id is None:
            return f"{self.fighter_a_name} and {self.fighter_b_name} fight to a draw."
        if self.winner_id == self.fighter_a_id:
            winner, loser = self.fighter_a_name, self.fighter_b_name
        else:
            winner, loser = self.fighter_b_name, self.fighter_a_name
        return f"{winner} def. {loser} by {self.method} (R{self.round})."


@dataclass(frozen=True)
class TitleChangeEvent(_EventMixin):
    organization: str
    division: str
    new_champion_id: str | None
    new_champion_name: str | None
    previous_champion_id: str | None
    previous_champion_name: str | None
    reason: str
    type: EventType = field(default=EventType.TITLE_CHANGE, init=False)

    @property
    def message(self) -> str:
        if self.new_champion_name is None:
            return (
                f"The {self.organization} {self.division} title is vacated by "
                f"{self.previous_champion_name} ({self.reason})."
            )
        if self.previous_champion_name is None:
            return (
                f"{self.new_champion_name} wins the vacant {self.organization} "
                f"{self.division} title."
            )
        return (
            f"{self.new_champion_name} takes the {self.organization} {self.division} "
            f"title from {self.previous_champion_name}."
        )


@dataclass(frozen=True)
class UpsetEvent(_EventMixin):
    winner_id: str
    winner_name: str
    loser_id: str
    loser_name: str
    division: str
    method: str
    type: EventType = field(default=EventType.UPSET, init=False)

    @property
    def message(self) -> str:
        return f"UPSET! {self.winner_name} stuns {self.loser_name} by {self.method}."


@dataclass(frozen=True)
class RetirementEvent(_EventMixin):
    fighter_id: str
    name: str
    age: int
    record: str
    forced: bool
    reason: str
    post_career_role: str | None = None
    type: EventType = field(default=EventType.RETIREMENT, init=False)

    @property
    def message(self) -> str:
        text = f"{self.name} retires at {self.age} with a record of {self.record}."
        if self.post_career_role and self.post_career_role != "none":
            text += f" Moves on to work as a {self.post_career_role}."
        return text


@dataclass(frozen=True)
class NewProspectEvent(_EventMixin):
    fighter_id: str
    name: str
    division: str
    age: int
    tier: str
    type: EventType = field(default=EventType.NEW_PROSPECT, init=False)

    @property
    def message(self) -> str:
        return f"New prospect {self.name} ({self.age}) turns pro at {self.division}."


@dataclass(frozen=True)
class VisibleDeclineEvent(_EventMixin):
    fighter_id: str
    name: str
    age: int
    weekly_loss: float
    type: EventType = field(default=EventType.VISIBLE_DECLINE, init=False)

    @property
    def message(self) -> str:
        return f"{self.name} ({self.age}) is showing signs of decline."


@dataclass(frozen=True)
class HallOfFameInductionEvent(_EventMixin):
    fighter_id: str
    name: str
    year: int
    score: float
    category: str
    type: EventType = field(default=EventType.HOF_INDUCTION, init=False)

    @property
    def message(self) -> str:
        if self.category == "FIRST_BALLOT":
            return f"{self.name} is a first-ballot Hall of Famer ({self.year})."
        return f"{self.name} is inducted into the Hall of Fame ({self.year})."


@dataclass(frozen=True)
class RankingChangeEvent(_EventMixin):
    fighter_id: str
    name: str
    division: str
    change: RankingChange
    old_rank: int | None
    new_rank: int | None
    type: EventType = field(default=EventType.RANKING_CHANGE, init=False)

    @property
    def message(self) -> str:
        if self.change == RankingChange.ENTERED:
            return f"{self.name} enters the {self.division} rankings at #{self.new_rank}."
        if self.change == RankingChange.DROPPED:
            return f"{self.name} drops out of the {self.division} rankings."
        direction = "up" if self.change == RankingChange.UP else "down"
        return f"{self.name} moves {direction} to #{self.new_rank} at {self.division}."


@dataclass(frozen=True)
class MandatoryDueEvent(_EventMixin):
    organization: str
    division: str
    champion_id: str
    champion_name: str
    challenger_id: str | None
    weeks_since_defense: int
    type: EventType = field(default=EventType.MANDATORY_DUE, init=False)

    @property
    def message(self) -> str:
        return (
            f"{self.organization} orders {self.champion_name} to make a mandatory "
            f"{self.division} defense ({self.weeks_since_defense} weeks since last defense)."
        )


@dataclass(frozen=True)
class InjuryHealedEvent(_EventMixin):
    fighter_id: str
    name: str
    injury: str
    type: EventType = field(default=EventType.INJURY_HEALED, init=False)

    @property
    def message(self) -> str:
        return f"{self.name} has recovered from a {self.injury}."


@dataclass(frozen=True)
class SuspensionEndedEvent(_EventMixin):
    fighter_id: str
    name: str
    reason: str
    type: EventType = field(default=EventType.SUSPENSION_ENDED, init=False)

    @property
    def message(self) -> str:
        return f"{self.name} is cleared to fight again ({self.reason} suspension over)."


@dataclass(frozen=True)
class FinancialSummaryEvent(_EventMixin):
    fights: int
    total_purses: float
    type: EventType = field(default=EventType.FINANCIAL_SUMMARY, init=False)

    @property
    def message(self) -> str:
        return f"${self.total_purses:,.0f} paid out across {self.fights} fights."


Event = Union[
    FightResultEvent,
    TitleChangeEvent,
    UpsetEvent,
    RetirementEvent,
    NewProspectEvent,
    VisibleDeclineEvent,
    HallOfFameInductionEvent,
    RankingChangeEvent,
    MandatoryDueEvent,
    InjuryHealedEvent,
    SuspensionEndedEvent,
    FinancialSummaryEvent,
]
