"""Reshaping of query rows into response payloads."""

from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any


def group_team_stats(rows: Iterable[Mapping[str, Any]]) -> list[dict]:
    """Fold flat team-stat rows into one entry per game.

    Each input row carries `id`, `home_away`, `school`, `name` and `stat`.
    Games, teams within a game, and stats within a team all keep the order in
    which they first appear in `rows`. `homeAway` comes from the first row seen
    for a team in a given game.

    Args:
        rows: Query rows, e.g. the result of `run_query`.

    Returns:
        list: `[{"id", "teams": [{"school", "homeAway", "stats": [{"category", "stat"}]}]}]`;
        empty when `rows` is empty.
    """
    games: dict[Any, dict[Any, dict]] = {}
    for row in rows:
        teams = games.setdefault(row["id"], {})
        team = teams.get(row["school"])
        if team is None:
            team = teams[row["school"]] = {
                "school": row["school"],
                "homeAway": row["home_away"],
                "stats": [],
            }
        team["stats"].append({"category": row["name"], "stat": row["stat"]})

    return [{"id": game_id, "teams": list(teams.values())} for game_id, teams in games.items()]


def clock(value: Any) -> Any:
    """Render a playclock interval as `{"minutes", "seconds"}`.

    Postgres `interval` columns arrive as `timedelta`; anything else (None, or
    a driver that returns strings) is passed through untouched.
    """
    if not isinstance(value, timedelta):
        return value
    minutes, seconds = divmod(int(value.total_seconds()), 60)
    return {"minutes": minutes, "seconds": seconds}


def with_clocks(rows: Iterable[Mapping[str, Any]], columns: Iterable[str]) -> list[dict]:
    """Copy rows into plain dicts, converting the given interval columns."""
    columns = tuple(columns)
    out = []
    for row in rows:
        record = dict(row)
        for col in columns:
            if col in record:
                record[col] = clock(record[col])
        out.append(record)
    return out
