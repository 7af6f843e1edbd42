"""Division-based weekly matchmaking.

Belt holders defend (more urgently once a mandatory is overdue), vacant
belts are contested by the best available contenders, and everyone else is
paired with a fighter of similar standing.  A fighter appears on at most
one card per week.  Configurable via ``rules/matchmaking_model.json``.
"""

from __future__ import annotations

import random
from typing import Any

from boxing_universe.constants import LINEAL_TITLE
from boxing_universe.models import Fighter, Universe
from boxing_universe.modules.body_rankings import body_codes, mandatory_status
from boxing_universe.modules.collaborators import FightCard, TitleInfo
from boxing_universe.modules.rankings_engine import ranking_score
from boxing_universe.modules.titles import current_holder
from boxing_universe.rules_registry import load_rule_set
from boxing_universe.utils import clamp_probability


def _policy() -> dict[str, Any]:
    """Load and normalise the matchmaking policy from rules."""
    raw = load_rule_set("matchmaking_model")
    rounds = raw.get("rounds", {})
    return {
        "min_rest_weeks": max(0, int(raw.get("min_rest_weeks", 6))),
        "fight_chance": clamp_probability(raw.get("fight_chance"), 0.14),
        "opponent_window": max(1, int(raw.get("opponent_window", 4))),
        "vacant_title_chance": clamp_probability(raw.get("vacant_title_chance"), 0.5),
        "defense_chance": clamp_probability(raw.get("defense_chance"), 0.12),
        "mandatory_defense_chance": clamp_probability(raw.get("mandatory_defense_chance"), 0.5),
        "title_rounds": max(1, int(rounds.get("title", 12))),
        "ranked_rounds": max(1, int(rounds.get("ranked", 10))),
        "regular_rounds": max(1, int(rounds.get("regular", 8))),
        "prospect_rounds": max(1, int(rounds.get("prospect", 4))),
        "prospect_max_fights": max(0, int(raw.get("prospect_max_fights", 5))),
    }


def is_available(fighter: Fighter) -> bool:
    if not fighter.can_fight():
        return False
    if fighter.last_fight_date is None:
        return True
    return fighter.weeks_inactive >= _policy()["min_rest_weeks"]


def _bout_rounds(fighter_a: Fighter, fighter_b: Fighter) -> tuple[str, int]:
    policy = _policy()
    if fighter_a.rankings.current is not None or fighter_b.rankings.current is not None:
        return "ranked", policy["ranked_rounds"]
    prospect_cap = policy["prospect_max_fights"]
    if fighter_a.record.total_fights < prospect_cap or fighter_b.record.total_fights < prospect_cap:
        return "prospect", policy["prospect_rounds"]
    return "regular", policy["regular_rounds"]


class DivisionMatchmaker:
    """Default matchmaking collaborator."""

    def generate_weekly_fights(self, universe: Universe, rng: random.Random) -> list[FightCard]:
        cards: list[FightCard] = []
        for division in universe.divisions:
            cards.extend(self._division_cards(universe, division, rng))
        return cards

    # ------------------------------------------------------------------
    # Per-division scheduling
    # ------------------------------------------------------------------

    def _division_cards(self, universe: Universe, division: str, rng: random.Random) -> list[FightCard]:
        pool = {fighter.id: fighter for fighter in universe.fighters_in(division) if is_available(fighter)}
        if len(pool) < 2:
            return []
        ranked_order = [fid for fid in universe.divisions[division].rankings if fid in pool]
        booked: set[str] = set()
        cards: list[FightCard] = []

        for organization in (LINEAL_TITLE, *body_codes()):
            card = self._title_card(universe, division, organization, pool, ranked_order, booked, rng)
            if card is not None:
                booked.update((card.fighter_a_id, card.fighter_b_id))
                cards.append(card)

        cards.extend(self._regular_cards(division, pool, booked, rng))
        return cards

    def _title_card(
        self,
        universe: Universe,
        division: str,
        organization: str,
        pool: dict[str, Fighter],
        ranked_order: list[str],
        booked: set[str],
        rng: random.Random,
    ) -> FightCard | None:
        policy = _policy()
        holder_id = current_holder(universe, organization, division)
        contenders = [fid for fid in ranked_order if fid not in booked and fid != holder_id]

        if holder_id is None:
            if len(contenders) < 2 or rng.random() >= policy["vacant_title_chance"]:
                return None
            return FightCard(
                fighter_a_id=contenders[0],
                fighter_b_id=contenders[1],
                division=division,
                fight_type="title",
                rounds=policy["title_rounds"],
                title_info=TitleInfo(organizations=(organization,), vacant=True),
            )

        if holder_id not in pool or holder_id in booked or not contenders:
            return None
        status = None if organization == LINEAL_TITLE else mandatory_status(universe, organization, division)
        mandatory_due = status is not None and status.mandatory_due
        chance = policy["mandatory_defense_chance"] if mandatory_due else policy["defense_chance"]
        if rng.random() >= chance:
            return None

        challenger = contenders[0]
        if mandatory_due and status is not None and status.challenger_id in contenders:
            challenger = status.challenger_id
        holder = pool[holder_id]
        belts = tuple(
            reign.organization
            for reign in holder.open_titles()
            if reign.division == division
        ) or (organization,)
        return FightCard(
            fighter_a_id=holder_id,
            fighter_b_id=challenger,
            division=division,
            fight_type="title",
            rounds=policy["title_rounds"],
            title_info=TitleInfo(organizations=belts),
        )

    def _regular_cards(
        self,
        division: str,
        pool: dict[str, Fighter],
        booked: set[str],
        rng: random.Random,
    ) -> list[FightCard]:
        policy = _policy()
        window = policy["opponent_window"]
        chance = policy["fight_chance"]
        ladder = sorted(
            (fighter for fid, fighter in pool.items() if fid not in booked),
            key=lambda fighter: (-ranking_score(fighter), fighter.id),
        )

        cards: list[FightCard] = []
        for index, fighter in enumerate(ladder):
            if fighter.id in booked or rng.random() >= chance:
                continue
            opponents = [
                candidate
                for candidate in ladder[index + 1 : index + 1 + window]
                if candidate.id not in booked
            ]
            if not opponents:
                continue
            opponent = rng.choice(opponents)
            fight_type, rounds = _bout_rounds(fighter, opponent)
            booked.update((fighter.id, opponent.id))
            cards.append(
                FightCard(
                    fighter_a_id=fighter.id,
                    fighter_b_id=opponent.id,
                    division=division,
                    fight_type=fight_type,
                    rounds=rounds,
                )
            )
        return cards
