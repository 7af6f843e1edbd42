import random

import pytest

from boxing_universe.constants import WEEKS_PER_YEAR
from boxing_universe.events import VisibleDeclineEvent
from boxing_universe.models import (
    Attributes,
    CareerPhase,
    CareerStateError,
    Fighter,
    Personality,
    Potential,
    SimDate,
    TalentTier,
)
from boxing_universe.modules.progression_engine import (
    advance_attributes,
    effective_ceiling,
    grow_experience,
    prime_status,
    work_ethic_modifier,
)


class _AlwaysRng:
    def random(self) -> float:
        return 0.0


def _build_fighter(
    attributes: dict[str, dict[str, float]],
    *,
    ceiling: float = 90.0,
    peak_physical: int = 28,
    peak_mental: int = 30,
    resilience: float = 0.75,
    work_ethic: int = 50,
) -> Fighter:
    bundle = Attributes(attributes)
    return Fighter(
        id="F000001",
        name="Progression Test",
        nationality="USA",
        division="Middleweight",
        birth_date=SimDate(year=1980, week=1),
        potential=Potential(
            tier=TalentTier.CONTENDER,
            ceiling=ceiling,
            growth_rate=1.0,
            peak_age_physical=peak_physical,
            peak_age_mental=peak_mental,
            resilience=resilience,
        ),
        personality=Personality(work_ethic=work_ethic),
        attributes=bundle,
        base_attributes=bundle.copy(),
    )


def _progress_weeks(fighter: Fighter, weeks: int, age: int = 20) -> list[float]:
    history = []
    for _ in range(weeks):
        advance_attributes(fighter, age, is_in_prime=False, is_past_prime=False, rng=random.Random(1))
        history.append(fighter.attributes.get("power", "powerLeft"))
    return history


def test_work_ethic_modifier_range() -> None:
    assert work_ethic_modifier(0) == pytest.approx(0.8)
    assert work_ethic_modifier(50) == pytest.approx(1.0)
    assert work_ethic_modifier(100) == pytest.approx(1.2)


def test_prime_takes_precedence_over_decline() -> None:
    fighter = _build_fighter({"power": {"powerLeft": 60}}, peak_physical=28, peak_mental=35)

    assert prime_status(fighter, 20) == (False, False)
    assert prime_status(fighter, 33) == (True, False)
    assert prime_status(fighter, 38) == (False, True)


def test_progression_stops_at_effective_ceiling() -> None:
    fighter = _build_fighter({"power": {"powerLeft": 70}}, ceiling=80.0)

    assert effective_ceiling(fighter, "power", "powerLeft") == pytest.approx(80.0)
    history = _progress_weeks(fighter, 3000)

    assert max(history) <= 80.0
    assert history[-1] == pytest.approx(80.0)


def test_ceiling_is_capped_by_base_snapshot() -> None:
    fighter = _build_fighter({"power": {"powerLeft": 60}}, ceiling=95.0)

    history = _progress_weeks(fighter, 4000)

    assert history[-1] == pytest.approx(69.0)


def test_prime_holds_attributes_steady() -> None:
    fighter = _build_fighter({"power": {"powerLeft": 60}, "speed": {"handSpeed": 70}})
    before = fighter.attributes.to_dict()

    for _ in range(WEEKS_PER_YEAR):
        advance_attributes(fighter, 28, is_in_prime=True, is_past_prime=False)

    assert fighter.attributes.to_dict() == before


def test_decline_never_drops_below_floor() -> None:
    fighter = _build_fighter({"speed": {"handSpeed": 31, "footSpeed": 45}}, resilience=0.0)

    for _ in range(2000):
        advance_attributes(fighter, 45, is_in_prime=False, is_past_prime=True, rng=random.Random(2))
        assert fighter.attributes.get("speed", "handSpeed") >= 30.0
        assert fighter.attributes.get("speed", "footSpeed") >= 30.0

    assert fighter.attributes.get("speed", "handSpeed") == pytest.approx(30.0)
    assert fighter.attributes.get("speed", "footSpeed") == pytest.approx(30.0)


def test_eight_years_up_then_ten_years_down() -> None:
    fighter = _build_fighter({"power": {"powerLeft": 60}}, ceiling=90.0, resilience=0.75)

    for _ in range(8 * WEEKS_PER_YEAR):
        advance_attributes(fighter, 20, is_in_prime=False, is_past_prime=False, rng=random.Random(3))
    after_growth = fighter.attributes.get("power", "powerLeft")

    assert 65.0 < after_growth <= 69.0

    for year in range(10):
        age = 28 + year + 1
        for _ in range(WEEKS_PER_YEAR):
            advance_attributes(fighter, age, is_in_prime=False, is_past_prime=True, rng=random.Random(4))
    after_decline = fighter.attributes.get("power", "powerLeft")

    assert after_decline < after_growth
    assert after_decline > 60.0


def test_visible_decline_needs_heavy_weekly_loss() -> None:
    speed = {"handSpeed": 90, "footSpeed": 90, "reflexes": 90, "firstStep": 90, "combinationSpeed": 90}
    stamina = {"cardio": 90, "recoveryRate": 90, "workRate": 90, "secondWind": 90, "paceControl": 90}
    fighter = _build_fighter({"speed": speed, "stamina": stamina}, resilience=0.0)

    events = advance_attributes(fighter, 36, is_in_prime=False, is_past_prime=True, rng=_AlwaysRng())

    assert len(events) == 1
    assert isinstance(events[0], VisibleDeclineEvent)
    assert events[0].weekly_loss >= 0.25

    quiet = _build_fighter({"power": {"powerLeft": 90}}, resilience=0.0)
    assert advance_attributes(quiet, 36, is_in_prime=False, is_past_prime=True, rng=_AlwaysRng()) == []


def test_experience_grows_with_fights() -> None:
    fighter = _build_fighter(
        {"mental": {"experience": 40}, "technical": {"fightIQ": 60, "footwork": 60}}
    )
    fighter.fights_this_year = 3

    grow_experience(fighter)

    assert fighter.attributes.get("mental", "experience") == pytest.approx(40.3)
    assert fighter.attributes.get("technical", "fightIQ") > 60.0
    assert fighter.attributes.get("technical", "footwork") == 60.0


def test_retired_fighter_cannot_progress() -> None:
    fighter = _build_fighter({"power": {"powerLeft": 60}})
    fighter.phase = CareerPhase.RETIRED
    fighter.attributes.freeze()

    with pytest.raises(CareerStateError):
        advance_attributes(fighter, 40, is_in_prime=False, is_past_prime=True)
