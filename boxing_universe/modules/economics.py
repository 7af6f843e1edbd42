"""Purse ledger: the default economics collaborator.

Credits each fighter's earnings with a purse scaled by combined popularity
and boosted for title fights.  Tuning lives under ``purse`` in
``rules/fight_model.json``.
"""

from __future__ import annotations

from boxing_universe.events import Event, FinancialSummaryEvent
from boxing_universe.models import Universe
from boxing_universe.modules.collaborators import FightOutcome
from boxing_universe.rules_registry import load_rule_set


def fight_purse(popularity_a: int, popularity_b: int, *, title_fight: bool) -> float:
    rules = load_rule_set("fight_model")["purse"]
    purse = float(rules["base"]) + (popularity_a + popularity_b) * float(rules["per_popularity_point"])
    if title_fight:
        purse *= float(rules["title_multiplier"])
    return round(purse, 2)


class PurseLedger:
    """Default economics collaborator."""

    def process_week(self, universe: Universe, results: list[FightOutcome]) -> list[Event]:
        if not results:
            return []
        winner_share = float(load_rule_set("fight_model")["purse"]["winner_share"])
        total = 0.0
        paid = 0
        for outcome in results:
            card = outcome.card
            fighter_a = universe.get_fighter(card.fighter_a_id)
            fighter_b = universe.get_fighter(card.fighter_b_id)
            if fighter_a is None or fighter_b is None:
                continue
            purse = fight_purse(fighter_a.popularity, fighter_b.popularity, title_fight=card.is_title_fight)
            if outcome.is_draw:
                shares = {fighter_a.id: 0.5, fighter_b.id: 0.5}
            else:
                shares = {
                    fighter.id: winner_share if fighter.id == outcome.winner_id else 1.0 - winner_share
                    for fighter in (fighter_a, fighter_b)
                }
            for fighter in (fighter_a, fighter_b):
                fighter.earnings += round(purse * shares[fighter.id], 2)
            total += purse
            paid += 1
        if paid == 0:
            return []
        return [FinancialSummaryEvent(fights=paid, total_purses=round(total, 2))]
