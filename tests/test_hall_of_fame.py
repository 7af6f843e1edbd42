import random

from boxing_universe.events import HallOfFameInductionEvent
from boxing_universe.models import (
    Attributes,
    CareerPhase,
    Fighter,
    Personality,
    Potential,
    SimDate,
    TalentTier,
    TitleReign,
)
from boxing_universe.modules.hall_of_fame import (
    FIRST_BALLOT,
    MODERN,
    evaluate_candidate,
    meets_eligibility,
    process_hall_of_fame,
)
from boxing_universe.modules.universe_setup import create_universe


def _build_retiree(
    fighter_id: str,
    *,
    wins: int,
    losses: int,
    kos: int,
    titles: int = 0,
    defenses: int = 0,
    peak_rank: int | None = None,
    tier: TalentTier = TalentTier.CONTENDER,
) -> Fighter:
    attributes = Attributes({"mental": {"heart": 70}})
    attributes.freeze()
    fighter = Fighter(
        id=fighter_id,
        name=f"Legend {fighter_id}",
        nationality="USA",
        division="Welterweight",
        birth_date=SimDate(year=1960, week=1),
        potential=Potential(
            tier=tier,
            ceiling=85.0,
            growth_rate=1.0,
            peak_age_physical=28,
            peak_age_mental=30,
            resilience=0.5,
        ),
        personality=Personality(),
        attributes=attributes,
        base_attributes=attributes.copy(),
        phase=CareerPhase.RETIRED,
        retirement_date=SimDate(year=1997, week=20),
    )
    fighter.record.wins = wins
    fighter.record.losses = losses
    fighter.record.kos = kos
    fighter.rankings.peak = peak_rank
    for index in range(titles):
        fighter.titles.append(
            TitleReign(
                fighter_id=fighter_id,
                organization=("WBC", "WBA", "IBF", "WBO")[index % 4],
                division="Welterweight",
                won_date=SimDate(year=1988 + index, week=1),
                lost_date=SimDate(year=1989 + index, week=1),
                defenses=defenses if index == 0 else 0,
            )
        )
    return fighter


def test_short_career_is_ineligible() -> None:
    fighter = _build_retiree("F000001", wins=19, losses=0, kos=19, titles=3, peak_rank=1)

    assert not meets_eligibility(fighter)
    evaluation = evaluate_candidate(fighter)
    assert not evaluation.qualifies
    assert evaluation.category is None


def test_dominant_champion_is_first_ballot() -> None:
    fighter = _build_retiree(
        "F000001", wins=45, losses=2, kos=35, titles=3, defenses=10, peak_rank=1, tier=TalentTier.ELITE
    )

    evaluation = evaluate_candidate(fighter)

    assert evaluation.qualifies
    assert evaluation.category == FIRST_BALLOT
    assert evaluation.score >= 90


def test_solid_champion_is_modern_inductee() -> None:
    fighter = _build_retiree(
        "F000001", wins=30, losses=4, kos=20, titles=2, defenses=5, peak_rank=1, tier=TalentTier.WORLD_CLASS
    )

    evaluation = evaluate_candidate(fighter)

    assert evaluation.qualifies
    assert evaluation.category == MODERN
    assert 70 <= evaluation.score < 90


def test_good_contender_falls_short() -> None:
    fighter = _build_retiree("F000001", wins=25, losses=5, kos=10, titles=1, defenses=2, peak_rank=3)

    evaluation = evaluate_candidate(fighter)

    assert not evaluation.qualifies
    assert evaluation.score < 70


def test_annual_vote_inducts_once_after_waiting_period() -> None:
    universe = create_universe(initial_population=0, rng=random.Random(8))
    legend = _build_retiree(
        "F000001", wins=45, losses=2, kos=35, titles=3, defenses=10, peak_rank=1, tier=TalentTier.ELITE
    )
    universe.retired_fighters[legend.id] = legend

    universe.current_date = SimDate(year=1999, week=52)
    assert process_hall_of_fame(universe) == []

    universe.current_date = SimDate(year=2000, week=51)
    assert process_hall_of_fame(universe) == []

    universe.current_date = SimDate(year=2000, week=52)
    events = process_hall_of_fame(universe)
    assert len(events) == 1
    assert isinstance(events[0], HallOfFameInductionEvent)
    assert universe.hall_of_fame.is_inducted(legend.id)
    assert universe.hall_of_fame.inductees[0].year == 2000

    universe.current_date = SimDate(year=2001, week=52)
    assert process_hall_of_fame(universe) == []
    assert len(universe.hall_of_fame.inductees) == 1
