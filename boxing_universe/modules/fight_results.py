"""Fold resolved fights back into fighter careers.

Updates records, streaks, activity, popularity and belts, then applies
the physical aftermath (medical suspensions after stoppages, random
injuries).  Popularity and aftermath tuning lives in
``rules/fight_model.json``.
"""

from __future__ import annotations

import logging
import random

from boxing_universe.constants import STOPPAGE_METHODS
from boxing_universe.events import (
    Event,
    FightResultEvent,
    TitleChangeEvent,
    UpsetEvent,
)
from boxing_universe.models import (
    Fighter,
    Injury,
    SimDate,
    Suspension,
    Universe,
    UpsetRecord,
)
from boxing_universe.modules.collaborators import FightOutcome
from boxing_universe.modules.titles import (
    crown_champion,
    current_holder,
    record_defense,
    strip_title,
)
from boxing_universe.rules_registry import load_rule_set
from boxing_universe.utils import clamp_int

logger = logging.getLogger(__name__)


def _rules() -> dict:
    return load_rule_set("fight_model")


# ---------------------------------------------------------------------------
# Record and popularity
# ---------------------------------------------------------------------------

def _mark_active(fighter: Fighter, today: SimDate) -> None:
    fighter.fights_this_year += 1
    fighter.weeks_inactive = 0
    fighter.last_fight_date = today
    if fighter.pro_debut_date is None:
        fighter.pro_debut_date = today


def popularity_change(
    *,
    won: bool,
    method: str,
    round_number: int,
    title_fight: bool,
    upset: bool,
) -> int:
    rules = _rules()["popularity"]
    stoppage = method in STOPPAGE_METHODS
    if won:
        change = int(rules["win"])
        if stoppage:
            change += int(rules["ko_win_bonus"])
            if round_number <= int(rules["early_ko_max_round"]):
                change += int(rules["early_ko_bonus"])
        if title_fight:
            change += int(rules["title_win_bonus"])
        if upset:
            change += int(rules["upset_win_bonus"])
        return change

    change = int(rules["loss"])
    if stoppage:
        change += int(rules["ko_loss_penalty"])
    if title_fight:
        change += int(rules["title_loss_penalty"])
    return change


def _apply_record(winner: Fighter, loser: Fighter, outcome: FightOutcome) -> None:
    stoppage = outcome.method in STOPPAGE_METHODS
    title_fight = outcome.card.is_title_fight

    if loser.rankings.current is not None or loser.is_champion:
        winner.ranked_wins += 1

    winner.record.wins += 1
    winner.consecutive_wins += 1
    winner.consecutive_losses = 0
    loser.record.losses += 1
    loser.consecutive_losses += 1
    loser.consecutive_wins = 0
    if stoppage:
        winner.record.kos += 1
        loser.record.ko_losses += 1

    winner.popularity = clamp_int(
        winner.popularity
        + popularity_change(
            won=True,
            method=outcome.method,
            round_number=outcome.round,
            title_fight=title_fight,
            upset=outcome.is_upset,
        ),
        0,
        100,
    )
    loser.popularity = clamp_int(
        loser.popularity
        + popularity_change(
            won=False,
            method=outcome.method,
            round_number=outcome.round,
            title_fight=title_fight,
            upset=outcome.is_upset,
        ),
        0,
        100,
    )


def _apply_draw(fighter_a: Fighter, fighter_b: Fighter) -> None:
    for fighter in (fighter_a, fighter_b):
        fighter.record.draws += 1
        fighter.consecutive_wins = 0
        fighter.consecutive_losses = 0


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------

def _apply_titles(
    universe: Universe,
    fighter_a: Fighter,
    fighter_b: Fighter,
    outcome: FightOutcome,
) -> list[Event]:
    title_info = outcome.card.title_info
    if title_info is None:
        return []
    today = universe.current_date
    division = outcome.card.division
    events: list[Event] = []

    for organization in title_info.organizations:
        holder_id = current_holder(universe, organization, division)
        if outcome.is_draw:
            holder = next((f for f in (fighter_a, fighter_b) if f.id == holder_id), None)
            if holder is not None:
                record_defense(universe, holder, organization, today, counts=False)
            continue

        winner = fighter_a if outcome.winner_id == fighter_a.id else fighter_b
        loser = fighter_b if winner is fighter_a else fighter_a
        if holder_id == winner.id:
            record_defense(universe, winner, organization, today)
            continue
        if holder_id is not None and holder_id != loser.id:
            logger.warning(
                "%s %s title held by %s, not by either fighter in %s vs %s; skipping",
                organization, division, holder_id, fighter_a.id, fighter_b.id,
            )
            continue

        previous = None
        if holder_id is not None:
            previous = strip_title(universe, organization, division, today, f"lost to {winner.name}")
        crown_champion(universe, winner, organization, today)
        events.append(
            TitleChangeEvent(
                organization=organization,
                division=division,
                new_champion_id=winner.id,
                new_champion_name=winner.name,
                previous_champion_id=None if previous is None else previous.id,
                previous_champion_name=None if previous is None else previous.name,
                reason="won",
            )
        )
    return events


# ---------------------------------------------------------------------------
# Aftermath
# ---------------------------------------------------------------------------

def _weeks_between(bounds: list, randomizer: random.Random) -> int:
    return randomizer.randint(int(bounds[0]), int(bounds[1]))


def apply_aftermath(
    fighter: Fighter,
    *,
    lost: bool,
    method: str,
    rng: random.Random,
) -> None:
    """Medical suspension for a stopped fighter plus a chance of injury."""
    aftermath = _rules()["aftermath"]
    stopped = lost and method in STOPPAGE_METHODS
    if stopped:
        key = "ko_suspension_weeks" if method == "KO" else "tko_suspension_weeks"
        fighter.suspensions.append(
            Suspension(reason=f"{method} loss", weeks_remaining=_weeks_between(aftermath[key], rng))
        )

    chance = float(aftermath["injury_chance"])
    if stopped:
        chance *= float(aftermath["stoppage_loss_injury_multiplier"])
    if rng.random() < chance:
        fighter.injuries.append(
            Injury(
                kind=rng.choice(list(aftermath["injury_types"])),
                weeks_remaining=_weeks_between(aftermath["injury_weeks"], rng),
            )
        )


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def _record_stats(universe: Universe, outcome: FightOutcome) -> None:
    stats = universe.stats
    stats.fights_simulated += 1
    if outcome.is_draw:
        stats.draws += 1
    elif outcome.method in STOPPAGE_METHODS:
        stats.knockouts += 1
    else:
        stats.decisions += 1


def apply_fight_result(
    universe: Universe,
    outcome: FightOutcome,
    *,
    rng: random.Random | None = None,
) -> list[Event]:
    """Apply one resolved fight; unknown fighters are skipped with a warning."""
    randomizer = rng or random.Random()
    card = outcome.card
    fighter_a = universe.fighters.get(card.fighter_a_id)
    fighter_b = universe.fighters.get(card.fighter_b_id)
    if fighter_a is None or fighter_b is None:
        logger.warning(
            "Skipping result for unknown fighter(s): %s vs %s",
            card.fighter_a_id, card.fighter_b_id,
        )
        return []
    if not outcome.is_draw and outcome.winner_id not in (fighter_a.id, fighter_b.id):
        logger.warning("Skipping result naming unknown winner %s", outcome.winner_id)
        return []

    today = universe.current_date
    _mark_active(fighter_a, today)
    _mark_active(fighter_b, today)
    _record_stats(universe, outcome)

    events: list[Event] = []
    if outcome.is_draw:
        _apply_draw(fighter_a, fighter_b)
        winner = None
    else:
        winner = fighter_a if outcome.winner_id == fighter_a.id else fighter_b
        loser = fighter_b if winner is fighter_a else fighter_a
        _apply_record(winner, loser, outcome)

    events.append(
        FightResultEvent(
            fighter_a_id=fighter_a.id,
            fighter_a_name=fighter_a.name,
            fighter_b_id=fighter_b.id,
            fighter_b_name=fighter_b.name,
            winner_id=None if winner is None else winner.id,
            method=outcome.method,
            round=outcome.round,
            division=card.division,
            title_fight=card.is_title_fight,
        )
    )
    events.extend(_apply_titles(universe, fighter_a, fighter_b, outcome))

    if winner is not None and outcome.is_upset:
        universe.history.upsets.append(
            UpsetRecord(
                date=today,
                winner_id=winner.id,
                loser_id=loser.id,
                division=card.division,
                method=outcome.method,
            )
        )
        events.append(
            UpsetEvent(
                winner_id=winner.id,
                winner_name=winner.name,
                loser_id=loser.id,
                loser_name=loser.name,
                division=card.division,
                method=outcome.method,
            )
        )

    for fighter in (fighter_a, fighter_b):
        apply_aftermath(
            fighter,
            lost=winner is not None and fighter is not winner,
            method=outcome.method,
            rng=randomizer,
        )
    return events


def apply_fight_results(
    universe: Universe,
    outcomes: list[FightOutcome],
    *,
    rng: random.Random | None = None,
) -> list[Event]:
    randomizer = rng or random.Random()
    events: list[Event] = []
    for outcome in outcomes:
        events.extend(apply_fight_result(universe, outcome, rng=randomizer))
    return events
