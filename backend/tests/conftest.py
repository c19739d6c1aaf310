import os
import sys

# Add the parent directory (backend) to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
import sqlite3
import tempfile
from fastapi.testclient import TestClient

from core.database import build_engine, get_engine
from main import app

SEED_SQL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT,
    age INTEGER,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE curator_dialog (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    dialog_line VARCHAR(255) NOT NULL,
    is_deleted VARCHAR(5) DEFAULT 'false'
);
INSERT INTO users (name, email, age) VALUES ('Ada', 'ada@example.com', 36);
INSERT INTO users (name, email, age) VALUES ('Linus', 'linus@example.com', 28);
INSERT INTO curator_dialog (dialog_line, is_deleted) VALUES ('Hello there!', 'false');
INSERT INTO curator_dialog (dialog_line, is_deleted) VALUES ('Welcome!', 'false');
"""


@pytest.fixture
def temp_sqlite_db():
    fd, path = tempfile.mkstemp(suffix=".db")
    try:
        conn = sqlite3.connect(path)
        conn.executescript(SEED_SQL)
        conn.commit()
        conn.close()
        yield path
    finally:
        os.close(fd)
        os.remove(path)


@pytest.fixture
def engine(temp_sqlite_db):
    eng = build_engine(f"sqlite:///{temp_sqlite_db}")
    yield eng
    eng.dispose()


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
