"""Universe-wide division rankings.

Each active fighter with at least one pro fight receives a ranking score;
the top fifteen (champion excluded) become the division's ranked
contenders.  Configurable via ``rules/rankings_model.json``.
"""

from __future__ import annotations

from boxing_universe.constants import RANKED_SLOTS
from boxing_universe.events import Event, RankingChange, RankingChangeEvent
from boxing_universe.models import Fighter, Universe
from boxing_universe.rules_registry import load_rule_set


def _rules() -> dict:
    return load_rule_set("rankings_model")


def ranking_score(fighter: Fighter) -> float:
    """Score a fighter for divisional ranking purposes; never negative."""
    record = fighter.record
    if record.total_fights == 0:
        return 0.0
    weights = _rules()["score"]

    score = record.win_percentage * float(weights["win_percentage_weight"])
    score += min(float(weights["wins_cap"]), record.wins * float(weights["wins_weight"]))
    score += record.ko_percentage * float(weights["ko_percentage_weight"])
    score += min(
        float(weights["activity_cap"]),
        fighter.fights_this_year * float(weights["activity_per_fight"]),
    )
    score += min(
        float(weights["win_streak_cap"]),
        fighter.consecutive_wins * float(weights["win_streak_per_win"]),
    )
    if fighter.rankings.peak is not None:
        score += max(0.0, float(weights["peak_rank_ceiling"]) - fighter.rankings.peak)

    score -= fighter.consecutive_losses * float(weights["loss_streak_per_loss"])
    if fighter.consecutive_losses > 0:
        score -= float(weights["recent_loss_penalty"])
    grace = int(weights["inactivity_grace_weeks"])
    if fighter.weeks_inactive > grace:
        score -= (fighter.weeks_inactive - grace) * float(weights["inactivity_penalty_per_week"])

    return max(0.0, score)


def rank_by_score(
    scores: dict[str, float],
    champion_id: str | None,
    slots: int | None = None,
) -> list[str]:
    """Order fighter ids by descending score, ties broken by id."""
    limit = int(_rules().get("slots", RANKED_SLOTS)) if slots is None else slots
    ordered = sorted(
        (fighter_id for fighter_id in scores if fighter_id != champion_id),
        key=lambda fighter_id: (-scores[fighter_id], fighter_id),
    )
    return ordered[:limit]


def _eligible(universe: Universe, division: str) -> list[Fighter]:
    return [
        fighter
        for fighter in universe.fighters_in(division)
        if not fighter.is_retired and fighter.record.total_fights > 0
    ]


def _name(universe: Universe, fighter_id: str) -> str:
    fighter = universe.get_fighter(fighter_id)
    return fighter_id if fighter is None else fighter.name


def update_division_rankings(universe: Universe, division: str) -> list[Event]:
    """Recompute one division's rankings and report notable movement."""
    found = universe.divisions.get(division)
    if found is None:
        raise ValueError(f"Unknown division: {division}")
    report_threshold = int(_rules()["report_move_threshold"])

    scores = {fighter.id: ranking_score(fighter) for fighter in _eligible(universe, division)}
    new_rankings = rank_by_score(scores, found.champion_id)
    old_rankings = list(found.rankings)

    events: list[Event] = []
    for index, fighter_id in enumerate(new_rankings):
        new_rank = index + 1
        if fighter_id not in old_rankings:
            events.append(
                RankingChangeEvent(
                    fighter_id=fighter_id,
                    name=_name(universe, fighter_id),
                    division=division,
                    change=RankingChange.ENTERED,
                    old_rank=None,
                    new_rank=new_rank,
                )
            )
            continue
        old_rank = old_rankings.index(fighter_id) + 1
        moved = old_rank - new_rank
        if abs(moved) >= report_threshold:
            events.append(
                RankingChangeEvent(
                    fighter_id=fighter_id,
                    name=_name(universe, fighter_id),
                    division=division,
                    change=RankingChange.UP if moved > 0 else RankingChange.DOWN,
                    old_rank=old_rank,
                    new_rank=new_rank,
                )
            )

    for fighter_id in old_rankings:
        if fighter_id in new_rankings:
            continue
        events.append(
            RankingChangeEvent(
                fighter_id=fighter_id,
                name=_name(universe, fighter_id),
                division=division,
                change=RankingChange.DROPPED,
                old_rank=old_rankings.index(fighter_id) + 1,
                new_rank=None,
            )
        )
        dropped = universe.fighters.get(fighter_id)
        if dropped is not None:
            dropped.rankings.current = None

    found.rankings = new_rankings
    for index, fighter_id in enumerate(new_rankings):
        universe.fighters[fighter_id].rankings.record_rank(index + 1)

    champion = universe.fighters.get(found.champion_id) if found.champion_id else None
    if champion is not None:
        champion.rankings.current = None

    challenger = found.mandatory_challenger_id
    if new_rankings and (challenger is None or challenger not in new_rankings):
        found.mandatory_challenger_id = new_rankings[0]
    elif not new_rankings:
        found.mandatory_challenger_id = None

    return events


def update_all_rankings(universe: Universe) -> list[Event]:
    events: list[Event] = []
    for division in universe.divisions:
        events.extend(update_division_rankings(universe, division))
    return events
