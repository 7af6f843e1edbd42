"""Per-sanctioning-body rankings and mandatory-defense timers.

Each body (WBC, WBA, IBF, WBO) weighs the same record signals differently,
applies its own entry gates and tolerates a different amount of inactivity.
Configurable via ``rules/sanctioning_bodies.json``.
"""

from __future__ import annotations

from dataclasses import dataclass

from boxing_universe.constants import RETIREMENT_CADENCE_WEEKS
from boxing_universe.events import Event, MandatoryDueEvent
from boxing_universe.models import Fighter, Universe
from boxing_universe.modules.titles import weeks_since_defense
from boxing_universe.rules_registry import load_rule_set

INELIGIBLE_SCORE = -1.0


@dataclass(frozen=True)
class BodyRankingEntry:
    rank: int
    fighter_id: str
    score: float


@dataclass(frozen=True)
class MandatoryStatus:
    champion_id: str
    weeks_since_defense: int
    mandatory_due: bool
    weeks_until_mandatory: int
    challenger_id: str | None


def _rules() -> dict:
    return load_rule_set("sanctioning_bodies")


def body_config(code: str) -> dict:
    for body in _rules()["bodies"]:
        if body["code"] == code:
            return body
    raise ValueError(f"Unknown sanctioning body: {code}")


def body_codes() -> list[str]:
    return [str(body["code"]) for body in _rules()["bodies"]]


def meets_entry_requirements(fighter: Fighter, config: dict) -> bool:
    requirements = config["entry_requirements"]
    record = fighter.record
    if record.wins < int(requirements["minimum_wins"]):
        return False
    if record.wins + record.losses < int(requirements["minimum_pro_fights"]):
        return False
    return record.losses <= int(requirements["max_losses"])


def opposition_quality(fighter: Fighter) -> float:
    settings = _rules()["opposition_quality"]
    quality = float(settings["base"]) + float(settings["per_ranked_win"]) * fighter.ranked_wins
    return min(float(settings["max"]), quality)


def body_ranking_score(fighter: Fighter, code: str) -> float:
    """Score *fighter* for body *code*; ``-1`` marks an ineligible fighter."""
    config = body_config(code)
    if not meets_entry_requirements(fighter, config):
        return INELIGIBLE_SCORE
    rules = _rules()
    weights = config["weights"]
    record = fighter.record

    score = record.win_percentage * float(weights["win_percentage"])

    record_weight = float(weights["record_quality"])
    quality = max(0, record.wins - record.losses * int(rules["record_quality_loss_weight"]))
    score += min(record_weight, quality / float(rules["record_quality_wins_scale"]) * record_weight)

    score += record.ko_percentage * float(weights["ko_percentage"])

    activity = config["activity"]
    max_inactive = int(activity["max_inactive_weeks"])
    if fighter.weeks_inactive <= max_inactive:
        score += float(weights["activity"])
    else:
        penalty = (fighter.weeks_inactive - max_inactive) * float(activity["inactivity_penalty_per_week"])
        score += max(0.0, float(weights["activity"]) - penalty)

    streak_weight = float(weights["win_streak"])
    score += min(streak_weight, fighter.consecutive_wins / float(rules["win_streak_scale"]) * streak_weight)

    score += opposition_quality(fighter) / 100.0 * float(weights["quality_of_opposition"])

    popularity_weight = float(weights["popularity"])
    if popularity_weight > 0:
        score += fighter.popularity / 100.0 * popularity_weight

    if config["entry_requirements"]["requires_ranked_win"] and fighter.ranked_wins == 0:
        penalty = rules["ranked_win_penalty"]
        if score > float(penalty["score_threshold"]):
            score *= float(penalty["multiplier"])

    return round(score, 1)


def update_body_rankings(universe: Universe, code: str, division: str) -> list[BodyRankingEntry]:
    """Re-rank one division for one body and store the result."""
    body = universe.sanctioning_bodies.get(code)
    if body is None or division not in universe.divisions:
        return []
    config = body_config(code)
    champion_id = body.champions.get(division)
    fighters = [fighter for fighter in universe.fighters_in(division) if not fighter.is_retired]

    scored = [
        (fighter, body_ranking_score(fighter, code))
        for fighter in fighters
        if fighter.id != champion_id
    ]
    eligible = sorted(
        ((fighter, score) for fighter, score in scored if score >= 0),
        key=lambda item: (-item[1], item[0].id),
    )[: int(config["max_ranked"])]

    entries = [
        BodyRankingEntry(rank=index + 1, fighter_id=fighter.id, score=score)
        for index, (fighter, score) in enumerate(eligible)
    ]
    body.rankings[division] = [entry.fighter_id for entry in entries]
    body.mandatory_challengers[division] = entries[0].fighter_id if entries else None

    ranked_ids = {entry.fighter_id: entry.rank for entry in entries}
    for fighter in fighters:
        if fighter.id in ranked_ids:
            fighter.body_rankings[code] = ranked_ids[fighter.id]
        else:
            fighter.body_rankings.pop(code, None)
    return entries


def mandatory_status(universe: Universe, code: str, division: str) -> MandatoryStatus | None:
    body = universe.sanctioning_bodies.get(code)
    if body is None:
        return None
    champion_id = body.champions.get(division)
    if champion_id is None:
        return None
    reign = body.current_reign(division)
    if reign is None:
        return None
    threshold = int(body_config(code)["mandatory"]["weeks_before_mandatory"])
    elapsed = weeks_since_defense(reign, universe.current_date)
    return MandatoryStatus(
        champion_id=champion_id,
        weeks_since_defense=elapsed,
        mandatory_due=elapsed >= threshold,
        weeks_until_mandatory=max(0, threshold - elapsed),
        challenger_id=body.mandatory_challengers.get(division),
    )


def is_body_rankings_week(universe: Universe) -> bool:
    return universe.current_date.week % RETIREMENT_CADENCE_WEEKS == 0


def process_body_rankings(universe: Universe) -> list[Event]:
    """Refresh every body's rankings and surface overdue mandatories."""
    if not is_body_rankings_week(universe):
        return []
    events: list[Event] = []
    for code in body_codes():
        for division in universe.divisions:
            update_body_rankings(universe, code, division)
            status = mandatory_status(universe, code, division)
            if status is None or not status.mandatory_due:
                continue
            champion = universe.get_fighter(status.champion_id)
            events.append(
                MandatoryDueEvent(
                    organization=code,
                    division=division,
                    champion_id=status.champion_id,
                    champion_name=status.champion_id if champion is None else champion.name,
                    challenger_id=status.challenger_id,
                    weeks_since_defense=status.weeks_since_defense,
                )
            )
    return events
