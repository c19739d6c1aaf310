#!/usr/bin/env python3
"""
Seed a database with demo tables for CRUD Panel development.
Usage (from the repository root):
    python scripts/seed_demo_db.py                     # creates scripts/demo.db (SQLite)
    python scripts/seed_demo_db.py postgresql+psycopg2://user:pw@localhost/db
Then point DATABASE_URL at the same URL.
"""
import random
import sys
from pathlib import Path

from sqlalchemy import create_engine, text

DB_PATH = Path(__file__).parent / "demo.db"

# {pk} is the auto-assigned integer primary key for the target dialect
DDL = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id                  {pk},
        unique_user_string  VARCHAR(255) NOT NULL UNIQUE
    )""",
    """
    CREATE TABLE IF NOT EXISTS curator_dialog (
        id                  {pk},
        dialog_line         VARCHAR(255) NOT NULL,
        context_description VARCHAR(255) NOT NULL,
        is_deleted          VARCHAR(5) DEFAULT 'false'
    )""",
    """
    CREATE TABLE IF NOT EXISTS degradations (
        id          {pk},
        start_index INTEGER NOT NULL,
        end_index   INTEGER NOT NULL,
        user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        created_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )""",
    """
    CREATE TABLE IF NOT EXISTS donations (
        id              {pk},
        user_id         INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        nametag         VARCHAR(255) NOT NULL,
        donated_string  VARCHAR(255) NOT NULL,
        created_at      TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )""",
    """
    CREATE TABLE IF NOT EXISTS pixel_dust (
        id  {pk},
        x   INTEGER NOT NULL,
        y   INTEGER NOT NULL
    )""",
]

DIALOG = [
    ("Hello there!", "Greeting message"),
    ("How are you?", "Question about wellbeing"),
    ("Welcome!", "Welcome message"),
]
NAMETAGS = ["Supporter", "Fan", "Loyal", "Patron"]
MESSAGES = ["Thank you for the great content!", "Keep up the amazing work!", "Love what you do!"]


def seed(url: str):
    engine = create_engine(url)
    pk = "INTEGER PRIMARY KEY AUTOINCREMENT" if engine.dialect.name == "sqlite" else "SERIAL PRIMARY KEY"

    with engine.begin() as conn:
        for stmt in DDL:
            conn.execute(text(stmt.format(pk=pk)))

        for i in range(1, 4):
            conn.execute(text(
                "INSERT INTO users (unique_user_string) VALUES (:s) ON CONFLICT (unique_user_string) DO NOTHING"
            ), {"s": f"user_{i:03d}"})

        for line, context in DIALOG:
            conn.execute(text(
                "INSERT INTO curator_dialog (dialog_line, context_description, is_deleted) VALUES (:l, :c, 'false')"
            ), {"l": line, "c": context})

        for start in range(0, 600, 200):
            conn.execute(text(
                "INSERT INTO degradations (start_index, end_index, user_id) VALUES (:s, :e, :u)"
            ), {"s": start, "e": start + 100, "u": random.randint(1, 3)})

        for i, msg in enumerate(MESSAGES, start=1):
            conn.execute(text(
                "INSERT INTO donations (user_id, nametag, donated_string) VALUES (:u, :n, :m)"
            ), {"u": i, "n": f"{random.choice(NAMETAGS)}{i}", "m": msg})

        for x, y in [(100, 200), (300, 400), (500, 600)]:
            conn.execute(text("INSERT INTO pixel_dust (x, y) VALUES (:x, :y)"), {"x": x, "y": y})

    engine.dispose()
    print(f"✅ Demo database seeded: {url}")
    print("   Tables: users, curator_dialog, degradations, donations, pixel_dust")


if __name__ == "__main__":
    seed(sys.argv[1] if len(sys.argv) > 1 else f"sqlite:///{DB_PATH}")
