"""Annual Hall-of-Fame voting over long-retired fighters."""

from __future__ import annotations

from dataclasses import dataclass

from boxing_universe.constants import HALL_OF_FAME_WEEK
from boxing_universe.events import Event, HallOfFameInductionEvent
from boxing_universe.models import Fighter, HallOfFameInductee, Universe
from boxing_universe.rules_registry import load_rule_set

FIRST_BALLOT = "FIRST_BALLOT"
MODERN = "MODERN"


@dataclass(frozen=True)
class HallOfFameEvaluation:
    qualifies: bool
    score: float
    category: str | None


def _rules() -> dict:
    return load_rule_set("hall_of_fame")


def meets_eligibility(fighter: Fighter) -> bool:
    gates = _rules()["eligibility"]
    record = fighter.record
    if record.total_fights < int(gates["min_total_fights"]):
        return False
    if record.wins < int(gates["min_wins"]):
        return False
    return record.win_percentage * 100.0 >= float(gates["min_win_percentage"])


def career_score(fighter: Fighter) -> float:
    rules = _rules()
    scoring = rules["scoring"]
    record = fighter.record

    score = min(
        float(scoring["world_titles_cap"]),
        fighter.world_titles * float(scoring["points_per_world_title"]),
    )
    score += min(
        float(scoring["defenses_cap"]),
        fighter.total_defenses * float(scoring["points_per_defense"]),
    )
    score += record.win_percentage * float(scoring["win_percentage_weight"])
    score += record.ko_percentage * float(scoring["ko_percentage_weight"])
    score += min(
        float(scoring["longevity_cap"]),
        record.total_fights * float(scoring["points_per_fight"]),
    )
    if fighter.rankings.peak is not None:
        score += max(0.0, float(scoring["peak_rank_ceiling"]) - fighter.rankings.peak)
    score += float(rules["tier_bonus"].get(fighter.potential.tier.value, 0.0))
    return round(score, 1)


def evaluate_candidate(fighter: Fighter) -> HallOfFameEvaluation:
    """Score a retired fighter; failing an eligibility gate never qualifies."""
    if not meets_eligibility(fighter):
        return HallOfFameEvaluation(qualifies=False, score=0.0, category=None)
    thresholds = _rules()["thresholds"]
    score = career_score(fighter)
    if score >= float(thresholds["first_ballot"]):
        return HallOfFameEvaluation(qualifies=True, score=score, category=FIRST_BALLOT)
    if score >= float(thresholds["induction"]):
        return HallOfFameEvaluation(qualifies=True, score=score, category=MODERN)
    return HallOfFameEvaluation(qualifies=False, score=score, category=None)


def _ballot(universe: Universe) -> list[Fighter]:
    wait = int(_rules()["eligibility"]["years_retired"])
    today = universe.current_date
    return [
        fighter
        for fighter in universe.retired_fighters.values()
        if fighter.retirement_date is not None
        and today.year - fighter.retirement_date.year >= wait
        and not universe.hall_of_fame.is_inducted(fighter.id)
    ]


def process_hall_of_fame(universe: Universe) -> list[Event]:
    if universe.current_date.week != HALL_OF_FAME_WEEK:
        return []
    events: list[Event] = []
    year = universe.current_date.year
    for fighter in _ballot(universe):
        evaluation = evaluate_candidate(fighter)
        if not evaluation.qualifies or evaluation.category is None:
            continue
        universe.hall_of_fame.inductees.append(
            HallOfFameInductee(
                fighter_id=fighter.id,
                name=fighter.name,
                year=year,
                score=evaluation.score,
                category=evaluation.category,
            )
        )
        events.append(
            HallOfFameInductionEvent(
                fighter_id=fighter.id,
                name=fighter.name,
                year=year,
                score=evaluation.score,
                category=evaluation.category,
            )
        )
    return events
