"""The weekly tick.

``WeekProcessor.process_week`` advances one universe by one simulated week,
running every stage in a fixed order and returning the events it produced.
Stages that lean on collaborators (fights, body rankings, prospects,
rankings, finances) are isolated: a failure is logged and that stage simply
yields nothing, so the tick always reaches the calendar advance.
"""

from __future__ import annotations

import logging
import random
from typing import Callable

from boxing_universe.events import Event
from boxing_universe.models import Universe
from boxing_universe.modules.body_rankings import process_body_rankings
from boxing_universe.modules.career_clock import (
    age_and_progress,
    count_down_layoffs,
    update_activity,
)
from boxing_universe.modules.career_phase import update_career_phases
from boxing_universe.modules.collaborators import (
    CombatResolver,
    EconomicsService,
    FightCard,
    FighterGenerator,
    FighterSnapshot,
    FightOutcome,
    Matchmaker,
)
from boxing_universe.modules.combat import RatingCombatResolver, run_fights_batch
from boxing_universe.modules.economics import PurseLedger
from boxing_universe.modules.fight_results import apply_fight_results
from boxing_universe.modules.generation import ProspectGenerator
from boxing_universe.modules.hall_of_fame import process_hall_of_fame
from boxing_universe.modules.matchmaking import DivisionMatchmaker
from boxing_universe.modules.population_engine import maintain_population
from boxing_universe.modules.rankings_engine import update_all_rankings
from boxing_universe.modules.retirement_engine import process_retirements

logger = logging.getLogger(__name__)


class WeekProcessor:
    def __init__(
        self,
        universe: Universe,
        *,
        matchmaker: Matchmaker | None = None,
        combat: CombatResolver | None = None,
        generator: FighterGenerator | None = None,
        economics: EconomicsService | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.universe = universe
        self.matchmaker = matchmaker or DivisionMatchmaker()
        self.combat = combat or RatingCombatResolver()
        self.generator = generator or ProspectGenerator(universe)
        self.economics = economics or PurseLedger()
        self.rng = rng or random.Random()

    def process_week(self) -> list[Event]:
        universe = self.universe
        events: list[Event] = []

        events.extend(age_and_progress(universe, rng=self.rng))
        events.extend(count_down_layoffs(universe))
        update_activity(universe)

        outcomes: list[FightOutcome] = []
        fight_events = self._isolated("fights", lambda: self._run_fights(outcomes))
        events.extend(fight_events)

        events.extend(process_retirements(universe, rng=self.rng))
        events.extend(self._isolated("body rankings", lambda: process_body_rankings(universe)))
        events.extend(
            self._isolated(
                "prospects",
                lambda: maintain_population(universe, self.generator, rng=self.rng),
            )
        )
        events.extend(self._isolated("rankings", lambda: update_all_rankings(universe)))
        update_career_phases(universe)
        events.extend(process_hall_of_fame(universe))
        events.extend(
            self._isolated("financial", lambda: self.economics.process_week(universe, outcomes))
        )

        universe.last_week_results = [outcome.to_dict() for outcome in outcomes]
        logger.debug(
            "Week %s processed: %d fights, %d events, %d active fighters",
            universe.current_date,
            len(outcomes),
            len(events),
            universe.population,
        )
        universe.advance_week()
        return events

    def run(self, weeks: int) -> list[Event]:
        """Process *weeks* consecutive ticks and return every event in order."""
        if weeks < 0:
            raise ValueError("weeks must be >= 0.")
        events: list[Event] = []
        for _ in range(weeks):
            events.extend(self.process_week())
        return events

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _isolated(self, stage: str, action: Callable[[], list[Event]]) -> list[Event]:
        try:
            return list(action() or [])
        except Exception:
            logger.exception("Stage '%s' failed in week %s; continuing", stage, self.universe.current_date)
            return []

    def _bookable(self, cards: list[FightCard]) -> list[tuple[FightCard, FighterSnapshot, FighterSnapshot]]:
        """Keep cards whose fighters exist, can fight, and are not already booked."""
        booked: set[str] = set()
        bouts: list[tuple[FightCard, FighterSnapshot, FighterSnapshot]] = []
        for card in cards:
            fighter_a = self.universe.fighters.get(card.fighter_a_id)
            fighter_b = self.universe.fighters.get(card.fighter_b_id)
            if (
                fighter_a is None
                or fighter_b is None
                or fighter_a.id == fighter_b.id
                or not fighter_a.can_fight()
                or not fighter_b.can_fight()
                or fighter_a.id in booked
                or fighter_b.id in booked
            ):
                logger.warning(
                    "Dropping unbookable card %s vs %s", card.fighter_a_id, card.fighter_b_id
                )
                continue
            booked.update((fighter_a.id, fighter_b.id))
            bouts.append(
                (card, FighterSnapshot.from_fighter(fighter_a), FighterSnapshot.from_fighter(fighter_b))
            )
        return bouts

    def _run_fights(self, outcomes: list[FightOutcome]) -> list[Event]:
        cards = self.matchmaker.generate_weekly_fights(self.universe, self.rng)
        bouts = self._bookable(cards)
        if not bouts:
            return []
        resolved = run_fights_batch(
            self.combat,
            bouts,
            rng=self.rng,
            max_workers=self.universe.config.combat_workers,
        )
        outcomes.extend(resolved)
        return apply_fight_results(self.universe, resolved, rng=self.rng)
