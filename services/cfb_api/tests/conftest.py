"""Shared fixtures for the stats API tests.

Route tests run the real SQL against an in-memory SQLite database that mirrors
the game tables used by the API. The `get_db` dependency is overridden so no
Postgres server is needed.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from services.cfb_api.app.db import get_db
from services.cfb_api.app.main import app

SCHEMA = [
    "CREATE TABLE team (id INTEGER PRIMARY KEY, school TEXT NOT NULL)",
    "CREATE TABLE venue (id INTEGER PRIMARY KEY, name TEXT NOT NULL)",
    """CREATE TABLE game (
        id INTEGER PRIMARY KEY, season INTEGER, week INTEGER, season_type TEXT,
        start_date TEXT, neutral_site BOOLEAN, conference_game BOOLEAN,
        attendance INTEGER, venue_id INTEGER
    )""",
    """CREATE TABLE game_team (
        id INTEGER PRIMARY KEY, game_id INTEGER, team_id INTEGER, home_away TEXT,
        points INTEGER, line_scores TEXT
    )""",
    "CREATE TABLE drive_result (id INTEGER PRIMARY KEY, name TEXT)",
    """CREATE TABLE drive (
        id INTEGER PRIMARY KEY, game_id INTEGER, offense_id INTEGER, defense_id INTEGER,
        result_id INTEGER, scoring BOOLEAN, start_period INTEGER, start_yardline INTEGER,
        start_time TEXT, end_period INTEGER, end_yardline INTEGER, end_time TEXT,
        elapsed TEXT, plays INTEGER, yards INTEGER
    )""",
    "CREATE TABLE play_type (id INTEGER PRIMARY KEY, text TEXT)",
    """CREATE TABLE play (
        id INTEGER PRIMARY KEY, drive_id INTEGER, offense_id INTEGER, defense_id INTEGER,
        play_type_id INTEGER, period INTEGER, clock TEXT, yard_line INTEGER, down INTEGER,
        distance INTEGER, yards_gained INTEGER, play_text TEXT
    )""",
    "CREATE TABLE team_stat_type (id INTEGER PRIMARY KEY, name TEXT)",
    "CREATE TABLE game_team_stat (id INTEGER PRIMARY KEY, game_team_id INTEGER, type_id INTEGER, stat TEXT)",
]

SEED = [
    "INSERT INTO team VALUES (1, 'Clemson'), (2, 'Texas A&M'), (3, 'Alabama'), (4, 'Georgia')",
    "INSERT INTO venue VALUES (1, 'Memorial Stadium'), (2, 'Kyle Field')",
    """INSERT INTO game VALUES
        (10, 2018, 1, 'regular', '2018-09-01 19:00', 0, 0, 80000, 1),
        (11, 2018, 2, 'regular', '2018-09-08 19:00', 0, 0, 101000, 2),
        (12, 2018, 2, 'regular', '2018-09-08 15:30', 0, 1, 92000, NULL),
        (13, 2018, 1, 'postseason', '2019-01-07 20:00', 1, 0, 74000, NULL),
        (14, 2017, 1, 'regular', '2017-09-02 12:00', 0, 1, 90000, NULL)""",
    """INSERT INTO game_team VALUES
        (100, 10, 1, 'home', 48, NULL), (101, 10, 4, 'away', 7, NULL),
        (110, 11, 2, 'home', 26, NULL), (111, 11, 1, 'away', 28, NULL),
        (120, 12, 3, 'home', 35, NULL), (121, 12, 4, 'away', 28, NULL),
        (130, 13, 3, 'home', 16, NULL), (131, 13, 1, 'away', 44, NULL),
        (140, 14, 4, 'home', 31, NULL), (141, 14, 3, 'away', 24, NULL)""",
    "INSERT INTO drive_result VALUES (1, 'TD'), (2, 'PUNT')",
    """INSERT INTO drive VALUES
        (1000, 10, 1, 4, 1, 1, 1, 75, '15:00', 1, 100, '12:30', '2:30', 6, 75),
        (1001, 10, 4, 1, 2, 0, 1, 25, '12:30', 1, 30, '10:00', '2:30', 3, 5),
        (1100, 11, 2, 1, 2, 0, 1, 75, '15:00', 1, 70, '13:00', '2:00', 3, -5),
        (1101, 11, 1, 2, 1, 1, 1, 60, '13:00', 1, 100, '11:00', '2:00', 5, 40),
        (1400, 14, 4, 3, 1, 1, 1, 75, '15:00', 1, 100, '11:00', '4:00', 8, 75)""",
    "INSERT INTO play_type VALUES (1, 'Rush'), (2, 'Pass Reception')",
    """INSERT INTO play VALUES
        (5000, 1000, 1, 4, 1, 1, '15:00', 75, 1, 10, 5, 'Etienne run for 5 yds'),
        (5001, 1000, 1, 4, 2, 1, '14:30', 70, 2, 5, 70, 'Lawrence pass complete for 70 yds, TD'),
        (5002, 1001, 4, 1, 1, 1, '12:30', 25, 1, 10, 2, 'Swift run for 2 yds'),
        (5100, 1100, 2, 1, 1, 1, '15:00', 75, 1, 10, -5, 'Williams run for loss of 5'),
        (5101, 1101, 1, 2, 2, 1, '13:00', 60, 1, 10, 40, 'Bryant pass complete for 40 yds')""",
    "INSERT INTO team_stat_type VALUES (1, 'totalYards'), (2, 'turnovers')",
    """INSERT INTO game_team_stat VALUES
        (1, 100, 1, '512'), (2, 100, 2, '0'),
        (3, 101, 1, '204'), (4, 101, 2, '3'),
        (5, 110, 1, '501'), (6, 111, 1, '413'), (7, 111, 2, '1'),
        (8, 120, 1, '398'), (9, 121, 1, '377')""",
]


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with eng.begin() as conn:
        for stmt in SCHEMA + SEED:
            conn.execute(text(stmt))
    yield eng
    eng.dispose()


@pytest.fixture()
def client(engine):
    """TestClient whose requests run against the seeded SQLite database."""
    TestingSession = sessionmaker(bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class RecordingSession:
    """Stand-in session that records statements and optionally fails."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.statements = []

    def execute(self, statement, params=None):
        self.statements.append((str(statement), params))
        if self.error is not None:
            raise self.error
        raise AssertionError("RecordingSession only supports failing queries")

    def close(self):
        pass


@pytest.fixture()
def make_client():
    """Factory for a TestClient bound to a given stand-in session."""
    clients = []

    def _make(session, raise_server_exceptions=True):
        app.dependency_overrides[get_db] = lambda: session
        c = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()
    app.dependency_overrides.clear()
