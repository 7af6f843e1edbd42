import random

from boxing_universe.models import (
    Attributes,
    Fighter,
    Injury,
    Personality,
    Potential,
    SimDate,
    TalentTier,
    Universe,
)
from boxing_universe.modules.collaborators import FightCard, FightOutcome
from boxing_universe.modules.economics import PurseLedger, fight_purse
from boxing_universe.modules.matchmaking import DivisionMatchmaker, is_available
from boxing_universe.modules.rankings_engine import update_division_rankings
from boxing_universe.modules.titles import crown_champion
from boxing_universe.modules.universe_setup import create_universe

DIVISION = "Cruiserweight"


class _ZeroRng(random.Random):
    def random(self) -> float:
        return 0.0


def _build_fighter(fighter_id: str, wins: int = 0) -> Fighter:
    attributes = Attributes({"power": {"powerLeft": 70}})
    fighter = Fighter(
        id=fighter_id,
        name=f"Boxer {fighter_id}",
        nationality="USA",
        division=DIVISION,
        birth_date=SimDate(year=1983, week=1),
        potential=Potential(
            tier=TalentTier.CONTENDER,
            ceiling=80.0,
            growth_rate=1.0,
            peak_age_physical=28,
            peak_age_mental=30,
            resilience=0.5,
        ),
        personality=Personality(),
        attributes=attributes,
        base_attributes=attributes.copy(),
    )
    fighter.record.wins = wins
    return fighter


def _build_universe(count: int, wins: int = 0) -> Universe:
    universe = create_universe(initial_population=0, rng=random.Random(2))
    universe.current_date = SimDate(year=2010, week=20)
    for index in range(1, count + 1):
        universe.add_fighter(_build_fighter(f"F{index:06d}", wins=wins + index))
    return universe


def test_injured_or_resting_fighters_are_unavailable() -> None:
    fighter = _build_fighter("F000001")
    assert is_available(fighter)

    fighter.last_fight_date = SimDate(year=2010, week=18)
    fighter.weeks_inactive = 2
    assert not is_available(fighter)

    fighter.weeks_inactive = 10
    fighter.injuries.append(Injury(kind="cut", weeks_remaining=3))
    assert not is_available(fighter)


def test_each_fighter_is_booked_at_most_once() -> None:
    universe = _build_universe(30, wins=3)
    update_division_rankings(universe, DIVISION)

    cards = DivisionMatchmaker().generate_weekly_fights(universe, _ZeroRng())

    booked = [fighter_id for card in cards for fighter_id in (card.fighter_a_id, card.fighter_b_id)]
    assert cards
    assert len(booked) == len(set(booked))
    assert all(card.division == DIVISION for card in cards)


def test_vacant_titles_go_to_top_contenders() -> None:
    universe = _build_universe(12, wins=5)
    update_division_rankings(universe, DIVISION)
    ranked = universe.divisions[DIVISION].rankings

    cards = DivisionMatchmaker().generate_weekly_fights(universe, _ZeroRng())

    lineal = cards[0]
    assert lineal.is_title_fight
    assert lineal.title_info.vacant
    assert lineal.title_info.organizations == ("LINEAL",)
    assert {lineal.fighter_a_id, lineal.fighter_b_id} == set(ranked[:2])
    assert lineal.rounds == 12


def test_champion_defends_against_top_contender() -> None:
    universe = _build_universe(8, wins=5)
    champion = universe.fighters["F000008"]
    crown_champion(universe, champion, "WBC", SimDate(year=2010, week=1))
    crown_champion(universe, champion, "LINEAL", SimDate(year=2010, week=1))
    update_division_rankings(universe, DIVISION)

    cards = DivisionMatchmaker().generate_weekly_fights(universe, _ZeroRng())

    defense = next(card for card in cards if champion.id in (card.fighter_a_id, card.fighter_b_id))
    assert defense.is_title_fight
    assert set(defense.title_info.organizations) == {"WBC", "LINEAL"}
    assert not defense.title_info.vacant
    assert defense.fighter_b_id == universe.divisions[DIVISION].rankings[0]


def test_purse_ledger_credits_both_fighters() -> None:
    universe = _build_universe(2)
    red, blue = universe.fighters["F000001"], universe.fighters["F000002"]
    red.popularity = 10
    blue.popularity = 20
    card = FightCard(fighter_a_id=red.id, fighter_b_id=blue.id, division=DIVISION, fight_type="regular", rounds=8)
    outcome = FightOutcome(card=card, winner_id=red.id, loser_id=blue.id, method="Decision", round=8)

    events = PurseLedger().process_week(universe, [outcome])

    purse = fight_purse(10, 20, title_fight=False)
    assert purse == 14000.0
    assert red.earnings == 8400.0
    assert blue.earnings == 5600.0
    assert len(events) == 1
    assert events[0].fights == 1
    assert events[0].total_purses == purse


def test_purse_ledger_is_quiet_without_fights() -> None:
    universe = _build_universe(2)

    assert PurseLedger().process_week(universe, []) == []
