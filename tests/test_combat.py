import random

from boxing_universe.constants import DRAW_METHOD, STOPPAGE_METHODS
from boxing_universe.models import TalentTier
from boxing_universe.modules.collaborators import FightCard, FighterSnapshot
from boxing_universe.modules.combat import RatingCombatResolver, is_upset, run_fights_batch


def _snapshot(fighter_id: str, level: float, tier: TalentTier = TalentTier.CONTENDER, rank: int | None = None) -> FighterSnapshot:
    return FighterSnapshot(
        id=fighter_id,
        name=f"Boxer {fighter_id}",
        division="Heavyweight",
        tier=tier,
        attributes={
            "power": {"powerLeft": level, "powerRight": level, "knockoutPower": level},
            "speed": {"handSpeed": level, "footSpeed": level},
            "defense": {"headMovement": level, "blocking": level},
            "mental": {"chin": level, "heart": level},
            "technical": {"fightIQ": level},
            "offense": {"jabAccuracy": level},
        },
        wins=10,
        losses=2,
        popularity=30,
        rank=rank,
    )


def _bouts(count: int) -> list:
    bouts = []
    for index in range(count):
        a_id = f"F{2 * index + 1:06d}"
        b_id = f"F{2 * index + 2:06d}"
        card = FightCard(fighter_a_id=a_id, fighter_b_id=b_id, division="Heavyweight", fight_type="regular", rounds=8)
        bouts.append((card, _snapshot(a_id, 60 + index), _snapshot(b_id, 75 - index)))
    return bouts


def test_outcome_names_one_of_the_fighters() -> None:
    resolver = RatingCombatResolver()
    rng = random.Random(10)

    for card, snapshot_a, snapshot_b in _bouts(20):
        outcome = resolver.run_fight(card, snapshot_a, snapshot_b, rng)
        assert outcome.card is card
        if outcome.method == DRAW_METHOD:
            assert outcome.winner_id is None
            continue
        assert {outcome.winner_id, outcome.loser_id} == {snapshot_a.id, snapshot_b.id}
        assert 1 <= outcome.round <= card.rounds
        if outcome.method not in STOPPAGE_METHODS:
            assert outcome.round == card.rounds


def test_much_better_fighter_usually_wins() -> None:
    resolver = RatingCombatResolver()
    rng = random.Random(3)
    card = FightCard(fighter_a_id="F000001", fighter_b_id="F000002", division="Heavyweight", fight_type="regular", rounds=10)
    strong = _snapshot("F000001", 95)
    weak = _snapshot("F000002", 40)

    wins = sum(1 for _ in range(200) if resolver.run_fight(card, strong, weak, rng).winner_id == "F000001")

    assert wins >= 180


def test_upset_rules() -> None:
    assert is_upset(_snapshot("a", 60, TalentTier.JOURNEYMAN), _snapshot("b", 60, TalentTier.CONTENDER))
    assert not is_upset(_snapshot("a", 60, TalentTier.GATEKEEPER), _snapshot("b", 60, TalentTier.CONTENDER))
    assert is_upset(_snapshot("a", 60), _snapshot("b", 60, rank=3))
    assert not is_upset(_snapshot("a", 60, rank=9), _snapshot("b", 60, rank=3))


def test_batch_preserves_card_order() -> None:
    bouts = _bouts(12)

    outcomes = run_fights_batch(RatingCombatResolver(), bouts, rng=random.Random(42), max_workers=4)

    assert [outcome.card for outcome in outcomes] == [card for card, _, _ in bouts]


def test_batch_is_deterministic_across_worker_counts() -> None:
    bouts = _bouts(12)

    serial = run_fights_batch(RatingCombatResolver(), bouts, rng=random.Random(42), max_workers=1)
    parallel = run_fights_batch(RatingCombatResolver(), bouts, rng=random.Random(42), max_workers=4)

    assert serial == parallel


def test_empty_batch() -> None:
    assert run_fights_batch(RatingCombatResolver(), [], rng=random.Random(1), max_workers=4) == []
