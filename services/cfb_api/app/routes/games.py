"""Game, drive, play and per-game team stat routes.

All endpoints are read-only listings over the game tables:
- `/games`        one row per game with both teams' scores
- `/drives`       one row per drive
- `/plays`        one row per play
- `/games/teams`  team stat lines grouped by game, then by team

Query parameters arrive as free-form strings and are passed to the database as
bound values. Missing required filters raise `MissingFilterError` before any
SQL is run; database failures raise `QueryError` from `run_query`.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db, run_query
from ..filters import (
    DRIVE_FILTERS,
    GAME_FILTERS,
    require_play_filters,
    require_team_stats_filters,
    require_year,
    season_filter,
    team_stats_filter,
)
from ..settings import settings
from ..transforms import group_team_stats, with_clocks

router = APIRouter(tags=["games"])

SEASON_TYPE_DESCRIPTION = "'regular' or 'postseason'. Defaults to 'regular'."

DRIVE_CLOCK_COLUMNS = ("start_time", "end_time", "elapsed")
PLAY_CLOCK_COLUMNS = ("clock",)


@router.get("/games")
def list_games(
    db: Session = Depends(get_db),
    year: str | None = Query(None, description="Required. Year filter for games."),
    season_type: str | None = Query(None, alias="seasonType", description=SEASON_TYPE_DESCRIPTION),
    week: str | None = Query(None, description="Week filter for games."),
    team: str | None = Query(None, description="Name of a team to filter on (home or away)."),
    home: str | None = Query(None, description="Name of home team to filter on."),
    away: str | None = Query(None, description="Name of away team to filter on."),
):
    """List games for a season.

    Team names match case-insensitively. Results are ordered by season, week
    and start date.

    Returns:
        list: Game records with venue, both team names, points and line scores.

    Raises:
        MissingFilterError: 400 if `year` is missing.
    """
    require_year(year)

    where_sql, params = season_filter(
        year,
        season_type,
        GAME_FILTERS,
        {"week": week, "team": team, "home": home, "away": away},
        settings.default_season_type,
    )

    return run_query(
        db,
        f"""
            SELECT g.id, g.season, g.week, g.season_type, g.start_date, g.neutral_site,
                   g.conference_game, g.attendance, v.name AS venue,
                   home.school AS home_team, gt.points AS home_points, gt.line_scores AS home_line_scores,
                   away.school AS away_team, gt2.points AS away_points, gt2.line_scores AS away_line_scores
            FROM game g
                INNER JOIN game_team gt ON g.id = gt.game_id AND gt.home_away = 'home'
                INNER JOIN team home ON gt.team_id = home.id
                INNER JOIN game_team gt2 ON g.id = gt2.game_id AND gt2.home_away = 'away'
                INNER JOIN team away ON gt2.team_id = away.id
                LEFT JOIN venue v ON g.venue_id = v.id
            {where_sql}
            ORDER BY g.season, g.week, g.start_date
        """,
        params,
    )


@router.get("/drives")
def list_drives(
    db: Session = Depends(get_db),
    year: str | None = Query(None, description="Required. Year filter for drives."),
    season_type: str | None = Query(None, alias="seasonType", description=SEASON_TYPE_DESCRIPTION),
    week: str | None = Query(None, description="Week filter for drives."),
    team: str | None = Query(None, description="Name of team to filter on (offense or defense)."),
    offense: str | None = Query(None, description="Name of offense team to filter on."),
    defense: str | None = Query(None, description="Name of defense team to filter on."),
):
    """List drives for a season, ordered by drive id.

    `start_time`, `end_time` and `elapsed` are rendered as
    `{"minutes": m, "seconds": s}`.

    Raises:
        MissingFilterError: 400 if `year` is missing.
    """
    require_year(year)

    where_sql, params = season_filter(
        year,
        season_type,
        DRIVE_FILTERS,
        {"week": week, "team": team, "offense": offense, "defense": defense},
        settings.default_season_type,
    )

    rows = run_query(
        db,
        f"""
            SELECT offense.school AS offense, defense.school AS defense, g.id AS game_id, d.id,
                   d.scoring, d.start_period, d.start_yardline, d.start_time, d.end_period,
                   d.end_yardline, d.end_time, d.elapsed, d.plays, d.yards, dr.name AS drive_result
            FROM game g
                INNER JOIN drive d ON g.id = d.game_id
                INNER JOIN team offense ON d.offense_id = offense.id
                INNER JOIN team defense ON d.defense_id = defense.id
                INNER JOIN drive_result dr ON d.result_id = dr.id
            {where_sql}
            ORDER BY d.id
        """,
        params,
    )
    return with_clocks(rows, DRIVE_CLOCK_COLUMNS)


@router.get("/plays")
def list_plays(
    db: Session = Depends(get_db),
    year: str | None = Query(None, description="Required. Year filter for plays."),
    season_type: str | None = Query(None, alias="seasonType", description=SEASON_TYPE_DESCRIPTION),
    week: str | None = Query(None, description="Week filter for plays."),
    team: str | None = Query(None, description="Name of team to filter on (offense or defense)."),
    offense: str | None = Query(None, description="Name of offense team to filter on."),
    defense: str | None = Query(None, description="Name of defense team to filter on."),
):
    """List plays, ordered by drive then play id.

    A whole season of plays is too large to return, so at least one of `week`,
    `team`, `offense` or `defense` must accompany `year`.

    Raises:
        MissingFilterError: 400 if `year` is missing, or if none of the
            narrowing filters is supplied.
    """
    values = {"week": week, "team": team, "offense": offense, "defense": defense}
    require_play_filters(year, values)

    where_sql, params = season_filter(
        year, season_type, DRIVE_FILTERS, values, settings.default_season_type
    )

    rows = run_query(
        db,
        f"""
            SELECT p.id, offense.school AS offense, defense.school AS defense, d.id AS drive_id,
                   p.period, p.clock, p.yard_line, p.down, p.distance, p.yards_gained,
                   pt.text AS play_type, p.play_text
            FROM game g
                INNER JOIN drive d ON g.id = d.game_id
                INNER JOIN play p ON d.id = p.drive_id
                INNER JOIN team offense ON p.offense_id = offense.id
                INNER JOIN team defense ON p.defense_id = defense.id
                INNER JOIN play_type pt ON p.play_type_id = pt.id
            {where_sql}
            ORDER BY d.id, p.id
        """,
        params,
    )
    return with_clocks(rows, PLAY_CLOCK_COLUMNS)


@router.get("/games/teams")
def list_team_stats(
    db: Session = Depends(get_db),
    game_id: str | None = Query(None, alias="gameId", description="Game id filter."),
    year: str | None = Query(None, description="Year filter."),
    season_type: str | None = Query(None, alias="seasonType", description=SEASON_TYPE_DESCRIPTION),
    week: str | None = Query(None, description="Week filter."),
    team: str | None = Query(None, description="Team filter."),
):
    """Team statistics broken down by game.

    Either `gameId` alone, or `year` together with `week` and/or `team`.
    When `gameId` is given all other filters are ignored.

    Returns:
        list: `[{"id", "teams": [{"school", "homeAway", "stats": [{"category", "stat"}]}]}]`.

    Raises:
        MissingFilterError: 400 if neither a game id nor a year with week/team is supplied.
    """
    require_team_stats_filters(game_id, year, week, team)

    where_sql, params = team_stats_filter(
        game_id,
        season_type,
        {"year": year, "week": week, "team": team},
        settings.default_season_type,
    )

    rows = run_query(
        db,
        f"""
            SELECT g.id, gt.home_away, t.school, tst.name, gts.stat
            FROM team t
                INNER JOIN game_team gt ON t.id = gt.team_id
                INNER JOIN game g ON gt.game_id = g.id
                INNER JOIN game_team_stat gts ON gts.game_team_id = gt.id
                INNER JOIN team_stat_type tst ON gts.type_id = tst.id
            {where_sql}
            ORDER BY g.id, gt.id, gts.id
        """,
        params,
    )
    return group_team_stats(rows)
