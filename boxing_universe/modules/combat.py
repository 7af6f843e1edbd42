"""Rating-based fight resolution.

A light stand-in for a full punch-by-punch engine: each fighter gets a
weighted overall rating, both ratings receive noise, and the margin plus
the winner's knockout power decide the method.  ``run_fights_batch`` fans
a week's card out over a thread pool and returns outcomes in card order.
"""

from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor

from boxing_universe.constants import DECISION_METHOD, DRAW_METHOD
from boxing_universe.models import TalentTier
from boxing_universe.modules.collaborators import (
    CombatResolver,
    FightCard,
    FighterSnapshot,
    FightOutcome,
)
from boxing_universe.rules_registry import load_rule_set

_TIER_ORDER: tuple[TalentTier, ...] = tuple(TalentTier)


def _rules() -> dict:
    return load_rule_set("fight_model")["combat"]


def fighter_rating(snapshot: FighterSnapshot) -> float:
    weights = _rules()["rating_weights"]
    power = (snapshot.skill("power", "powerLeft") + snapshot.skill("power", "powerRight")) / 2
    speed = (snapshot.skill("speed", "handSpeed") + snapshot.skill("speed", "footSpeed")) / 2
    defense = (snapshot.skill("defense", "headMovement") + snapshot.skill("defense", "blocking")) / 2
    return (
        power * float(weights["power"])
        + speed * float(weights["speed"])
        + defense * float(weights["defense"])
        + snapshot.skill("mental", "chin") * float(weights["chin"])
        + snapshot.skill("mental", "heart") * float(weights["heart"])
        + snapshot.skill("technical", "fightIQ") * float(weights["fight_iq"])
    )


def is_upset(winner: FighterSnapshot, loser: FighterSnapshot) -> bool:
    """A lower-tier fighter beating a clearly better one, or an unranked fighter beating a top-five one."""
    gap = int(load_rule_set("fight_model")["upset_tier_gap"])
    if _TIER_ORDER.index(winner.tier) - _TIER_ORDER.index(loser.tier) >= gap:
        return True
    return winner.rank is None and loser.rank is not None and loser.rank <= 5


def _stats(snapshot: FighterSnapshot, rounds: int, won: bool, stoppage: bool, rng: random.Random) -> dict:
    thrown = rng.randint(30, 80) * rounds
    landed = int(thrown * (0.25 + snapshot.skill("offense", "jabAccuracy") / 400.0))
    if not won:
        landed = int(landed * 0.8)
    return {
        "punches_thrown": thrown,
        "punches_landed": landed,
        "knockdowns": 1 if (won and stoppage) else 0,
    }


class RatingCombatResolver:
    """Default combat collaborator."""

    def run_fight(
        self,
        card: FightCard,
        snapshot_a: FighterSnapshot,
        snapshot_b: FighterSnapshot,
        rng: random.Random,
    ) -> FightOutcome:
        rules = _rules()
        variance = float(rules["variance"])
        adjusted_a = fighter_rating(snapshot_a) + (rng.random() - 0.5) * variance
        adjusted_b = fighter_rating(snapshot_b) + (rng.random() - 0.5) * variance
        winner, loser = (snapshot_a, snapshot_b) if adjusted_a >= adjusted_b else (snapshot_b, snapshot_a)
        margin = abs(adjusted_a - adjusted_b)
        rounds = max(1, card.rounds)

        ko_chance = winner.skill("power", "knockoutPower", 70.0) / 100.0 * float(rules["ko_power_scale"])
        if margin > float(rules["dominant_margin"]) and rng.random() < ko_chance * 1.5:
            method = "KO"
            round_number = 1 + rng.randrange(min(6, rounds))
        elif margin > float(rules["clear_margin"]) and rng.random() < ko_chance:
            method = "TKO"
            round_number = max(1, rounds // 2 + rng.randrange(max(1, rounds - rounds // 2)))
        elif margin > float(rules["close_margin"]) and rng.random() < ko_chance * 0.5:
            method = "TKO" if rng.random() < 0.5 else "KO"
            late = int(rounds * 0.7)
            round_number = max(1, min(rounds, late + rng.randrange(max(1, rounds - late))))
        else:
            method = DECISION_METHOD
            round_number = rounds

        if method == DECISION_METHOD and margin < float(rules["draw_margin"]):
            return FightOutcome(
                card=card,
                winner_id=None,
                loser_id=None,
                method=DRAW_METHOD,
                round=rounds,
                stats={
                    snapshot_a.id: _stats(snapshot_a, rounds, False, False, rng),
                    snapshot_b.id: _stats(snapshot_b, rounds, False, False, rng),
                },
            )

        stoppage = method != DECISION_METHOD
        return FightOutcome(
            card=card,
            winner_id=winner.id,
            loser_id=loser.id,
            method=method,
            round=round_number,
            stats={
                winner.id: _stats(winner, round_number, True, stoppage, rng),
                loser.id: _stats(loser, round_number, False, stoppage, rng),
            },
            is_upset=is_upset(winner, loser),
        )


def run_fights_batch(
    combat: CombatResolver,
    bouts: list[tuple[FightCard, FighterSnapshot, FighterSnapshot]],
    *,
    rng: random.Random,
    max_workers: int = 1,
) -> list[FightOutcome]:
    """Resolve independent bouts, optionally in parallel.

    Each bout gets its own generator seeded up front from *rng*, so results
    are identical whatever the worker count, and come back in input order.
    """
    seeds = [rng.getrandbits(64) for _ in bouts]

    def resolve(index: int) -> FightOutcome:
        card, snapshot_a, snapshot_b = bouts[index]
        return combat.run_fight(card, snapshot_a, snapshot_b, random.Random(seeds[index]))

    if max_workers <= 1 or len(bouts) <= 1:
        return [resolve(index) for index in range(len(bouts))]
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(resolve, range(len(bouts))))
