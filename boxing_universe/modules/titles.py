"""Title bookkeeping shared by fight application and retirement.

A belt is either a sanctioning-body title (``WBC``/``WBA``/``IBF``/``WBO``)
or the division's lineal title.  Every reign is recorded twice: on the
fighter (``Fighter.titles``) and in the owning registry
(``SanctioningBody.reigns`` or ``Division.champion_history``).
"""

from __future__ import annotations

from boxing_universe.constants import LINEAL_TITLE
from boxing_universe.events import TitleChangeEvent
from boxing_universe.models import Fighter, SimDate, TitleReign, Universe


def current_holder(universe: Universe, organization: str, division: str) -> str | None:
    if organization == LINEAL_TITLE:
        found = universe.divisions.get(division)
        return None if found is None else found.champion_id
    body = universe.sanctioning_bodies.get(organization)
    if body is None:
        return None
    return body.champions.get(division)


def registry_reign(universe: Universe, organization: str, division: str) -> TitleReign | None:
    if organization == LINEAL_TITLE:
        found = universe.divisions.get(division)
        return None if found is None else found.current_reign()
    body = universe.sanctioning_bodies.get(organization)
    return None if body is None else body.current_reign(division)


def _set_holder(universe: Universe, organization: str, division: str, fighter_id: str | None) -> None:
    if organization == LINEAL_TITLE:
        found = universe.divisions[division]
        found.champion_id = fighter_id
        found.champion_defenses = 0
        return
    universe.sanctioning_bodies[organization].champions[division] = fighter_id


def strip_title(
    universe: Universe,
    organization: str,
    division: str,
    date: SimDate,
    reason: str,
) -> Fighter | None:
    """Close the current reign for a belt and leave it vacant.

    Returns the former holder, if any.
    """
    holder_id = current_holder(universe, organization, division)
    if holder_id is None:
        return None
    reign = registry_reign(universe, organization, division)
    if reign is not None:
        reign.close(date, reason)
    holder = universe.get_fighter(holder_id)
    if holder is not None:
        personal = holder.open_title(organization)
        if personal is not None:
            personal.close(date, reason)
    _set_holder(universe, organization, division, None)
    return holder


def crown_champion(
    universe: Universe,
    fighter: Fighter,
    organization: str,
    date: SimDate,
) -> None:
    division = fighter.division
    if current_holder(universe, organization, division) is not None:
        raise ValueError(f"{organization} {division} title is not vacant.")
    if fighter.open_title(organization) is None:
        fighter.titles.append(
            TitleReign(
                fighter_id=fighter.id,
                organization=organization,
                division=division,
                won_date=date,
            )
        )
    registry = TitleReign(
        fighter_id=fighter.id,
        organization=organization,
        division=division,
        won_date=date,
    )
    if organization == LINEAL_TITLE:
        universe.divisions[division].champion_history.append(registry)
    else:
        universe.sanctioning_bodies[organization].reigns.append(registry)
    _set_holder(universe, organization, division, fighter.id)


def record_defense(
    universe: Universe,
    fighter: Fighter,
    organization: str,
    date: SimDate,
    *,
    counts: bool = True,
) -> None:
    """Register a successful defense; a retained draw refreshes only the timer."""
    for reign in (fighter.open_title(organization), registry_reign(universe, organization, fighter.division)):
        if reign is None:
            continue
        if counts:
            reign.record_defense(date)
        else:
            reign.last_defense_date = date
    if counts and organization == LINEAL_TITLE:
        universe.divisions[fighter.division].champion_defenses += 1


def weeks_since_defense(reign: TitleReign, today: SimDate) -> int:
    anchor = reign.last_defense_date or reign.won_date
    return today.weeks_since(anchor)


def vacate_all_titles(
    universe: Universe,
    fighter: Fighter,
    date: SimDate,
    reason: str,
) -> list[TitleChangeEvent]:
    events: list[TitleChangeEvent] = []
    for reign in list(fighter.open_titles()):
        organization = reign.organization
        if current_holder(universe, organization, reign.division) == fighter.id:
            strip_title(universe, organization, reign.division, date, reason)
        else:
            reign.close(date, reason)
        events.append(
            TitleChangeEvent(
                organization=organization,
                division=reign.division,
                new_champion_id=None,
                new_champion_name=None,
                previous_champion_id=fighter.id,
                previous_champion_name=fighter.name,
                reason=reason,
            )
        )
    return events
