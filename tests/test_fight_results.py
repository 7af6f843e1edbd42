import random

from boxing_universe.events import FightResultEvent, TitleChangeEvent, UpsetEvent
from boxing_universe.models import (
    Attributes,
    Fighter,
    Personality,
    Potential,
    SimDate,
    TalentTier,
    Universe,
)
from boxing_universe.modules.collaborators import FightCard, FightOutcome, TitleInfo
from boxing_universe.modules.fight_results import (
    apply_fight_result,
    apply_fight_results,
    popularity_change,
)
from boxing_universe.modules.titles import crown_champion
from boxing_universe.modules.universe_setup import create_universe

DIVISION = "Super Lightweight"


class _QuietRng(random.Random):
    """Never rolls an injury."""

    def random(self) -> float:
        return 0.999


def _build_fighter(fighter_id: str) -> Fighter:
    attributes = Attributes({"power": {"powerLeft": 70}})
    return Fighter(
        id=fighter_id,
        name=f"Boxer {fighter_id}",
        nationality="UK",
        division=DIVISION,
        birth_date=SimDate(year=1984, week=12),
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
        popularity=20,
    )


def _build_universe() -> tuple[Universe, Fighter, Fighter]:
    universe = create_universe(initial_population=0, rng=random.Random(6))
    universe.current_date = SimDate(year=2011, week=30)
    red = _build_fighter("F000001")
    blue = _build_fighter("F000002")
    universe.add_fighter(red)
    universe.add_fighter(blue)
    return universe, red, blue


def _outcome(
    winner: str | None,
    loser: str | None,
    method: str,
    *,
    round_number: int = 10,
    title_info: TitleInfo | None = None,
    upset: bool = False,
) -> FightOutcome:
    card = FightCard(
        fighter_a_id="F000001",
        fighter_b_id="F000002",
        division=DIVISION,
        fight_type="title" if title_info else "ranked",
        rounds=12 if title_info else 10,
        title_info=title_info,
    )
    return FightOutcome(card=card, winner_id=winner, loser_id=loser, method=method, round=round_number, is_upset=upset)


def test_popularity_change_rewards_early_knockouts() -> None:
    assert popularity_change(won=True, method="Decision", round_number=10, title_fight=False, upset=False) == 2
    assert popularity_change(won=True, method="KO", round_number=2, title_fight=False, upset=False) == 7
    assert popularity_change(won=True, method="KO", round_number=2, title_fight=True, upset=True) == 17
    assert popularity_change(won=False, method="TKO", round_number=5, title_fight=True, upset=False) == -7


def test_knockout_updates_records_and_suspends_loser() -> None:
    universe, red, blue = _build_universe()
    blue.rankings.record_rank(5)

    events = apply_fight_result(universe, _outcome("F000001", "F000002", "KO", round_number=3), rng=_QuietRng())

    assert red.record.wins == 1 and red.record.kos == 1
    assert blue.record.losses == 1 and blue.record.ko_losses == 1
    assert red.consecutive_wins == 1 and blue.consecutive_losses == 1
    assert red.ranked_wins == 1
    assert red.popularity == 27
    assert blue.popularity == 16
    assert red.last_fight_date == universe.current_date
    assert red.weeks_inactive == 0 and red.fights_this_year == 1
    assert len(blue.suspensions) == 1
    assert 8 <= blue.suspensions[0].weeks_remaining <= 12
    assert red.suspensions == [] and red.injuries == []
    assert not blue.can_fight()
    assert universe.stats.fights_simulated == 1 and universe.stats.knockouts == 1
    assert isinstance(events[0], FightResultEvent)
    assert events[0].winner_id == "F000001"


def test_draw_resets_streaks() -> None:
    universe, red, blue = _build_universe()
    red.consecutive_wins = 4
    blue.consecutive_losses = 2

    apply_fight_result(universe, _outcome(None, None, "Draw"), rng=_QuietRng())

    assert red.record.draws == 1 and blue.record.draws == 1
    assert red.consecutive_wins == 0 and blue.consecutive_losses == 0
    assert universe.stats.draws == 1


def test_vacant_title_crowns_winner() -> None:
    universe, red, blue = _build_universe()

    events = apply_fight_result(
        universe,
        _outcome("F000002", "F000001", "Decision", title_info=TitleInfo(("WBA",), vacant=True)),
        rng=_QuietRng(),
    )

    assert universe.sanctioning_bodies["WBA"].champions[DIVISION] == "F000002"
    assert blue.open_title("WBA") is not None
    changes = [event for event in events if isinstance(event, TitleChangeEvent)]
    assert len(changes) == 1
    assert changes[0].new_champion_id == "F000002"
    assert changes[0].previous_champion_id is None


def test_title_changes_hands_and_closes_old_reign() -> None:
    universe, red, blue = _build_universe()
    crown_champion(universe, red, "WBC", SimDate(year=2010, week=1))
    crown_champion(universe, red, "LINEAL", SimDate(year=2010, week=1))

    events = apply_fight_result(
        universe,
        _outcome("F000002", "F000001", "TKO", round_number=9, title_info=TitleInfo(("WBC", "LINEAL"))),
        rng=_QuietRng(),
    )

    assert universe.sanctioning_bodies["WBC"].champions[DIVISION] == "F000002"
    assert universe.divisions[DIVISION].champion_id == "F000002"
    assert red.open_titles() == []
    assert all(reign.lost_date == universe.current_date for reign in red.titles)
    assert len(blue.open_titles()) == 2
    changes = [event for event in events if isinstance(event, TitleChangeEvent)]
    assert {event.organization for event in changes} == {"WBC", "LINEAL"}
    assert all(event.previous_champion_id == "F000001" for event in changes)


def test_beating_the_champion_counts_as_ranked_win() -> None:
    universe, red, blue = _build_universe()
    crown_champion(universe, red, "LINEAL", SimDate(year=2010, week=1))
    assert red.rankings.current is None

    apply_fight_result(
        universe,
        _outcome("F000002", "F000001", "Decision", title_info=TitleInfo(("LINEAL",))),
        rng=_QuietRng(),
    )

    assert blue.ranked_wins == 1


def test_beating_unranked_fighter_is_not_a_ranked_win() -> None:
    universe, red, blue = _build_universe()

    apply_fight_result(universe, _outcome("F000001", "F000002", "Decision"), rng=_QuietRng())

    assert red.ranked_wins == 0



def test_successful_defense_counts() -> None:
    universe, red, _ = _build_universe()
    crown_champion(universe, red, "IBF", SimDate(year=2010, week=1))

    events = apply_fight_result(
        universe,
        _outcome("F000001", "F000002", "Decision", title_info=TitleInfo(("IBF",))),
        rng=_QuietRng(),
    )

    reign = red.open_title("IBF")
    assert reign is not None
    assert reign.defenses == 1
    assert reign.last_defense_date == universe.current_date
    assert universe.sanctioning_bodies["IBF"].current_reign(DIVISION).defenses == 1
    assert not any(isinstance(event, TitleChangeEvent) for event in events)


def test_title_draw_retains_belt_without_counting_defense() -> None:
    universe, red, _ = _build_universe()
    crown_champion(universe, red, "WBO", SimDate(year=2010, week=1))

    apply_fight_result(
        universe,
        _outcome(None, None, "Draw", title_info=TitleInfo(("WBO",))),
        rng=_QuietRng(),
    )

    reign = red.open_title("WBO")
    assert reign is not None
    assert reign.defenses == 0
    assert reign.last_defense_date == universe.current_date
    assert universe.sanctioning_bodies["WBO"].champions[DIVISION] == "F000001"


def test_upset_is_recorded() -> None:
    universe, red, blue = _build_universe()

    events = apply_fight_result(universe, _outcome("F000002", "F000001", "KO", upset=True), rng=_QuietRng())

    assert any(isinstance(event, UpsetEvent) for event in events)
    assert universe.history.upsets[-1].winner_id == "F000002"


def test_unknown_fighter_is_skipped_and_rest_applied() -> None:
    universe, red, blue = _build_universe()
    ghost_card = FightCard(
        fighter_a_id="F999999",
        fighter_b_id="F000002",
        division=DIVISION,
        fight_type="regular",
        rounds=8,
    )
    ghost = FightOutcome(card=ghost_card, winner_id="F999999", loser_id="F000002", method="Decision", round=8)

    events = apply_fight_results(
        universe,
        [ghost, _outcome("F000001", "F000002", "Decision")],
        rng=_QuietRng(),
    )

    assert len([event for event in events if isinstance(event, FightResultEvent)]) == 1
    assert red.record.wins == 1
    assert blue.record.losses == 1
    assert universe.stats.fights_simulated == 1
