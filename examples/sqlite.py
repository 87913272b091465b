"""Creates a small sqlite database, then reads it back into records."""

import logging
from dataclasses import dataclass

from ormy import Ormy, column
from ormy.backend import create_connection_pool


@dataclass
class Data:
    name: str = ""
    value: int = column("amount", default=0)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    db = Ormy(create_connection_pool("sqlite3:///tmp/example.db"))
    db.execute("CREATE TABLE IF NOT EXISTS data (name VARCHAR(256) PRIMARY KEY, amount INTEGER DEFAULT 0)")
    for name, value in (("testing", 52), ("test", 39), ("other_thing", 20)):
        db.execute("INSERT OR REPLACE INTO data (name, amount) VALUES ($1, $2)", name, value)

    rows = []
    db.select("SELECT name, amount, length(name) AS ignored FROM data WHERE name LIKE $1", "test%").all(rows, Data)
    for row in rows:
        print(f"{row.name}: {row.value}")

    largest = Data()
    if db.query("SELECT name, amount FROM data WHERE amount > :floor").add_parameter("floor", 40).select().one(largest):
        print(f"Largest: {largest}")
