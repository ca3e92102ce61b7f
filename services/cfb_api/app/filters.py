"""SQL filter construction for the listing endpoints.

Every listing endpoint builds its `WHERE` clause the same way: a fixed base
predicate, then one fragment per optional request parameter that was supplied,
appended in a fixed per-endpoint order.

Fragments are stored as (template, value) pairs and only numbered when the
clause is built, so the placeholder for fragment *n* is always `:p<n>` and the
parameter list always has exactly as many entries as there are placeholders.
Templates reference their placeholder as `{0}`; a template may use it more than
once (see the `team` filters, which match either side of a game).

Required-parameter rules live here too so that handlers can check them before
any SQL is built.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .errors import MissingFilterError

YEAR_REQUIRED = "A year parameter must be specified."
PLAY_FILTER_REQUIRED = (
    "Either a week, a team, an offensive team, or a defensive team must be specified."
)
TEAM_STATS_FILTER_REQUIRED = "Must specify a gameId or a year with either a week or a team."


@dataclass(frozen=True)
class Predicate:
    """One predicate fragment and the value bound to its placeholder."""

    template: str
    value: Any


@dataclass(frozen=True)
class FilterField:
    """Maps an optional request parameter to the fragment it contributes."""

    name: str
    template: str


GAME_FILTERS = (
    FilterField("week", "g.week = {0}"),
    FilterField("team", "(LOWER(away.school) = LOWER({0}) OR LOWER(home.school) = LOWER({0}))"),
    FilterField("home", "LOWER(home.school) = LOWER({0})"),
    FilterField("away", "LOWER(away.school) = LOWER({0})"),
)

# shared by drives and plays
DRIVE_FILTERS = (
    FilterField("week", "g.week = {0}"),
    FilterField("team", "(LOWER(offense.school) = LOWER({0}) OR LOWER(defense.school) = LOWER({0}))"),
    FilterField("offense", "LOWER(offense.school) = LOWER({0})"),
    FilterField("defense", "LOWER(defense.school) = LOWER({0})"),
)

TEAM_STAT_FILTERS = (
    FilterField("year", "g.season = {0}"),
    FilterField("week", "g.week = {0}"),
    FilterField("team", "LOWER(t.school) = LOWER({0})"),
)


def is_present(value: Any) -> bool:
    """Whether a raw query parameter counts as supplied (not None, not empty)."""
    return value is not None and value != ""


class FilterBuilder:
    """Accumulates predicate fragments and renders them as a `WHERE` clause."""

    def __init__(self):
        self._predicates: list[Predicate] = []

    def where(self, template: str, value: Any) -> "FilterBuilder":
        """Append a fragment unconditionally."""
        self._predicates.append(Predicate(template, value))
        return self

    def where_present(self, template: str, value: Any) -> "FilterBuilder":
        """Append a fragment only if `value` was supplied."""
        if is_present(value):
            self.where(template, value)
        return self

    def apply(self, fields: Iterable[FilterField], values: Mapping[str, Any]) -> "FilterBuilder":
        """Append fragments for each supplied field, in declaration order."""
        for field in fields:
            self.where_present(field.template, values.get(field.name))
        return self

    def build(self) -> tuple[str, list[Any]]:
        """Render the clause.

        Returns:
            tuple: `(predicate, params)` where `predicate` is `""` when no
            fragments were added, otherwise `"WHERE ..."` with fragments joined
            by `AND`; `params` lists the bound values in placeholder order.
        """
        if not self._predicates:
            return "", []

        fragments = [
            p.template.format(f":p{i}") for i, p in enumerate(self._predicates, start=1)
        ]
        return "WHERE " + " AND ".join(fragments), [p.value for p in self._predicates]


def season_filter(
    year: Any,
    season_type: Any,
    fields: Iterable[FilterField],
    values: Mapping[str, Any],
    default_season_type: str,
) -> tuple[str, list[Any]]:
    """Filter used by the game, drive and play listings.

    Base predicate is season + season type, followed by `fields` in order.
    """
    builder = FilterBuilder()
    builder.where("g.season = {0}", year)
    builder.where("season_type = {0}", season_type if is_present(season_type) else default_season_type)
    return builder.apply(fields, values).build()


def team_stats_filter(
    game_id: Any,
    season_type: Any,
    values: Mapping[str, Any],
    default_season_type: str,
) -> tuple[str, list[Any]]:
    """Filter for the per-game team stats listing.

    A game id, when supplied, is the only predicate. Otherwise the base is the
    season type, followed by year, week and team.
    """
    builder = FilterBuilder()
    if is_present(game_id):
        return builder.where("g.id = {0}", game_id).build()

    builder.where(
        "g.season_type = {0}", season_type if is_present(season_type) else default_season_type
    )
    return builder.apply(TEAM_STAT_FILTERS, values).build()


def require_year(year: Any) -> None:
    """Raise `MissingFilterError` unless a year was supplied."""
    if not is_present(year):
        raise MissingFilterError(YEAR_REQUIRED)


def require_play_filters(year: Any, values: Mapping[str, Any]) -> None:
    """Play listings need a year plus at least one of week/team/offense/defense."""
    require_year(year)
    if not any(is_present(values.get(name)) for name in ("week", "team", "offense", "defense")):
        raise MissingFilterError(PLAY_FILTER_REQUIRED)


def require_team_stats_filters(game_id: Any, year: Any, week: Any, team: Any) -> None:
    """Team stats need a game id, or a year with a week or a team."""
    if is_present(game_id):
        return
    if not (is_present(year) and (is_present(week) or is_present(team))):
        raise MissingFilterError(TEAM_STATS_FILTER_REQUIRED)
