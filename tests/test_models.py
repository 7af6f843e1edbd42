import random

import pytest

from boxing_universe.constants import CURRENT_UNIVERSE_VERSION
from boxing_universe.models import (
    Attributes,
    CareerPhase,
    CareerStateError,
    Fighter,
    Personality,
    Potential,
    SimDate,
    TalentTier,
    TitleReign,
    Universe,
)
from boxing_universe.modules.universe_setup import create_universe


def _build_fighter(fighter_id: str = "F000001", division: str = "Welterweight") -> Fighter:
    attributes = Attributes(
        {
            "power": {"powerLeft": 72, "knockoutPower": 65},
            "mental": {"heart": 80, "experience": 40},
        }
    )
    return Fighter(
        id=fighter_id,
        name="Test Fighter",
        nationality="USA",
        division=division,
        birth_date=SimDate(year=1978, week=10),
        potential=Potential(
            tier=TalentTier.WORLD_CLASS,
            ceiling=84.0,
            growth_rate=1.05,
            peak_age_physical=28,
            peak_age_mental=31,
            resilience=0.6,
        ),
        personality=Personality(ambition=70, work_ethic=60),
        attributes=attributes,
        base_attributes=attributes.copy(),
    )


def test_attributes_clamp_on_every_write() -> None:
    attributes = Attributes({"power": {"powerLeft": 120, "powerRight": 10}})

    assert attributes.get("power", "powerLeft") == 99.0
    assert attributes.get("power", "powerRight") == 30.0
    assert attributes.adjust("power", "powerLeft", 5) == 99.0
    assert attributes.adjust("power", "powerRight", -50) == 30.0


def test_attributes_reject_unknown_category() -> None:
    with pytest.raises(ValueError):
        Attributes({"charisma": {"smile": 50}})


def test_frozen_attributes_raise_on_write() -> None:
    attributes = Attributes({"speed": {"handSpeed": 70}})
    attributes.freeze()

    with pytest.raises(CareerStateError):
        attributes.set("speed", "handSpeed", 71)
    assert attributes.get("speed", "handSpeed") == 70.0


def test_sim_date_advance_wraps_year() -> None:
    date = SimDate(year=2000, week=52)

    assert date.advance() == SimDate(year=2001, week=1)
    assert SimDate(year=2002, week=3).weeks_since(SimDate(year=2001, week=50)) == 5
    assert str(SimDate(year=2001, week=4)) == "Y2001 W04"


def test_fighter_age_respects_birth_week() -> None:
    fighter = _build_fighter()

    assert fighter.age_at(SimDate(year=2008, week=9)) == 29
    assert fighter.age_at(SimDate(year=2008, week=10)) == 30


def test_fighter_round_trip_preserves_career_state() -> None:
    fighter = _build_fighter()
    fighter.record.wins = 12
    fighter.record.kos = 7
    fighter.rankings.record_rank(4)
    fighter.titles.append(
        TitleReign(
            fighter_id=fighter.id,
            organization="WBC",
            division=fighter.division,
            won_date=SimDate(year=2006, week=12),
            defenses=2,
        )
    )

    restored = Fighter.from_dict(fighter.to_dict())

    assert restored == fighter
    assert restored.is_champion
    assert restored.world_titles == 1


def test_retired_fighter_loads_with_frozen_attributes() -> None:
    fighter = _build_fighter()
    fighter.phase = CareerPhase.RETIRED

    restored = Fighter.from_dict(fighter.to_dict())

    assert restored.attributes.frozen
    with pytest.raises(CareerStateError):
        restored.attributes.set("power", "powerLeft", 80)


def test_add_fighter_rejects_duplicates_and_unknown_divisions() -> None:
    universe = create_universe(initial_population=0, rng=random.Random(1))
    universe.add_fighter(_build_fighter("F000001"))

    with pytest.raises(ValueError):
        universe.add_fighter(_build_fighter("F000001"))
    with pytest.raises(ValueError):
        universe.add_fighter(_build_fighter("F000002", division="Strawweight"))


def test_move_to_retired_detaches_fighter_from_rankings() -> None:
    universe = create_universe(initial_population=0, rng=random.Random(1))
    fighter = _build_fighter()
    universe.add_fighter(fighter)
    division = universe.divisions[fighter.division]
    division.rankings = [fighter.id]
    division.mandatory_challenger_id = fighter.id
    universe.sanctioning_bodies["WBC"].rankings[fighter.division] = [fighter.id]
    fighter.body_rankings["WBC"] = 1

    fighter.phase = CareerPhase.RETIRED
    universe.move_to_retired(fighter)

    assert fighter.id not in universe.fighters
    assert universe.retired_fighters[fighter.id] is fighter
    assert fighter.id not in division.fighter_ids
    assert division.rankings == []
    assert division.mandatory_challenger_id is None
    assert universe.sanctioning_bodies["WBC"].rankings[fighter.division] == []
    assert fighter.body_rankings == {}


def test_move_to_retired_requires_retired_phase() -> None:
    universe = create_universe(initial_population=0, rng=random.Random(1))
    fighter = _build_fighter()
    universe.add_fighter(fighter)

    with pytest.raises(CareerStateError):
        universe.move_to_retired(fighter)


def test_universe_round_trip() -> None:
    universe = create_universe(initial_population=8, rng=random.Random(11))

    payload = universe.to_dict()
    restored = Universe.from_dict(payload)

    assert payload["version"] == CURRENT_UNIVERSE_VERSION
    assert restored.to_dict() == payload
    assert restored.population == 8


def test_universe_rejects_newer_document_version() -> None:
    payload = create_universe(initial_population=0, rng=random.Random(1)).to_dict()
    payload["version"] = CURRENT_UNIVERSE_VERSION + 1

    with pytest.raises(ValueError):
        Universe.from_dict(payload)
