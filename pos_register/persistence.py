"""SQLite catalog and inventory stores."""

from __future__ import annotations

import sqlite3
from contextlib import closing, contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Iterator

import structlog

from pos_register.config import DB_PATH, DB_TIMEOUT_SECONDS
from pos_register.data import (
    BASE_CATEGORY_ID,
    CATEGORIES,
    ENTREE_CATEGORY_ID,
    INGREDIENT_SEED,
    MENU_SEED,
    RECIPE_SEED,
    check_menu_name,
)
from pos_register.errors import TransactionFailure
from pos_register.models import MenuComponent, OrderSnapshot, RecipeEntry, money

logger = structlog.get_logger(__name__)

_MENU_COLUMNS = "menu_item_id, name, price_cents, category_id, is_active"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _cents(value: Decimal) -> int:
    return int(money(value) * 100)


def _quantity(value: float) -> Decimal:
    return Decimal(str(value))


def connect(db_path: str | Path = DB_PATH, timeout: float = DB_TIMEOUT_SECONDS, **kwargs: object) -> sqlite3.Connection:
    db_file = Path(db_path)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file, timeout=timeout, **kwargs)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def bootstrap_schema(db_path: str | Path = DB_PATH) -> None:
    """Create persistence schema if it does not already exist."""
    with closing(connect(db_path)) as conn, conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL UNIQUE
            );

            CREATE TABLE IF NOT EXISTS menu_item (
                menu_item_id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                price_cents INTEGER NOT NULL CHECK (price_cents >= 0),
                category_id INTEGER NOT NULL,
                is_active INTEGER NOT NULL DEFAULT 1,
                FOREIGN KEY(category_id) REFERENCES categories(id)
            );

            CREATE TABLE IF NOT EXISTS inventory (
                ingredient_id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                unit TEXT NOT NULL,
                current_quantity REAL NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS recipe (
                menu_item_id INTEGER NOT NULL,
                ingredient_id INTEGER NOT NULL,
                qty_per_item REAL NOT NULL CHECK (qty_per_item >= 0),
                PRIMARY KEY (menu_item_id, ingredient_id),
                FOREIGN KEY(menu_item_id) REFERENCES menu_item(menu_item_id) ON DELETE CASCADE,
                FOREIGN KEY(ingredient_id) REFERENCES inventory(ingredient_id)
            );

            CREATE TABLE IF NOT EXISTS orders (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                total_cents INTEGER NOT NULL,
                source TEXT NOT NULL DEFAULT 'tui',
                status TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS order_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_id INTEGER NOT NULL,
                line_index INTEGER NOT NULL,
                display_name TEXT NOT NULL,
                quantity INTEGER NOT NULL CHECK (quantity >= 1),
                unit_price_cents INTEGER NOT NULL,
                FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE
            );

            CREATE INDEX IF NOT EXISTS idx_menu_item_category
                ON menu_item(category_id, name);

            CREATE INDEX IF NOT EXISTS idx_order_items_order_id_line
                ON order_items(order_id, line_index);
            """
        )


def seed_catalog(db_path: str | Path = DB_PATH) -> None:
    """Load the static catalog; existing rows (and stock levels) are left alone."""
    with closing(connect(db_path)) as conn, conn:
        conn.executemany(
            "INSERT OR IGNORE INTO categories (id, name) VALUES (?, ?)",
            [(meta.category_id, meta.name) for meta in CATEGORIES.values()],
        )
        for seed in MENU_SEED:
            check_menu_name(seed.name)
            conn.execute(
                "INSERT OR IGNORE INTO menu_item (name, price_cents, category_id, is_active) VALUES (?, ?, ?, ?)",
                (seed.name, seed.price_cents, seed.category_id, int(seed.active)),
            )
        conn.executemany(
            "INSERT OR IGNORE INTO inventory (ingredient_id, name, unit, current_quantity) VALUES (?, ?, ?, ?)",
            [(row.ingredient_id, row.name, row.unit, float(row.current_quantity)) for row in INGREDIENT_SEED],
        )
        for name, rows in RECIPE_SEED.items():
            menu_row = conn.execute("SELECT menu_item_id FROM menu_item WHERE name = ?", (name,)).fetchone()
            if menu_row is None:
                raise ValueError(f"Recipe refers to unknown menu item {name!r}")
            conn.executemany(
                "INSERT OR IGNORE INTO recipe (menu_item_id, ingredient_id, qty_per_item) VALUES (?, ?, ?)",
                [(menu_row["menu_item_id"], ingredient_id, float(qty)) for ingredient_id, qty in rows.items()],
            )
    logger.info("catalog_seeded", db_path=str(db_path))


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise TransactionFailure(f"Store {action} failed: {exc}") from exc


def _menu_component(row: sqlite3.Row) -> MenuComponent:
    return MenuComponent(
        id=int(row["menu_item_id"]),
        name=row["name"],
        unit_price=money(Decimal(row["price_cents"]) / 100),
        category_id=int(row["category_id"]),
        active=bool(row["is_active"]),
    )


class SqliteCatalogStore:
    """Catalog reads; every call uses its own short-lived connection."""

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = db_path

    def find_menu_component(self, name: str) -> MenuComponent | None:
        with closing(connect(self.db_path)) as conn:
            row = conn.execute(f"SELECT {_MENU_COLUMNS} FROM menu_item WHERE name = ?", (name,)).fetchone()
        return _menu_component(row) if row is not None else None

    def list_category(self, category_id: int) -> list[MenuComponent]:
        with closing(connect(self.db_path)) as conn:
            rows = conn.execute(
                f"SELECT {_MENU_COLUMNS} FROM menu_item WHERE category_id = ? AND is_active = 1 ORDER BY name",
                (category_id,),
            ).fetchall()
        return [_menu_component(row) for row in rows]

    def list_entrees(self) -> list[MenuComponent]:
        return self.list_category(ENTREE_CATEGORY_ID)

    def list_bases(self) -> list[MenuComponent]:
        return self.list_category(BASE_CATEGORY_ID)

    def recipe_for(self, menu_component_id: int) -> list[RecipeEntry]:
        with closing(connect(self.db_path)) as conn:
            rows = conn.execute(
                """
                SELECT r.menu_item_id, r.ingredient_id, r.qty_per_item, i.name, i.unit
                FROM recipe r JOIN inventory i ON r.ingredient_id = i.ingredient_id
                WHERE r.menu_item_id = ?
                ORDER BY r.ingredient_id
                """,
                (menu_component_id,),
            ).fetchall()
        return [
            RecipeEntry(
                menu_component_id=int(row["menu_item_id"]),
                ingredient_id=int(row["ingredient_id"]),
                quantity_per_unit=_quantity(row["qty_per_item"]),
                ingredient_name=row["name"],
                unit=row["unit"],
            )
            for row in rows
        ]


class SqliteInventoryStore:
    """Inventory writes inside an explicit ``BEGIN IMMEDIATE`` transaction.

    ``BEGIN IMMEDIATE`` takes the database write lock before the first read,
    so concurrent settlements on other connections serialize instead of
    overwriting each other. Waiting for the lock is bounded by ``timeout``.
    Every ``sqlite3.Error`` surfaces as :class:`TransactionFailure`.
    """

    def __init__(self, db_path: str | Path = DB_PATH, timeout: float = DB_TIMEOUT_SECONDS) -> None:
        self.db_path = db_path
        self.timeout = timeout
        self._conn: sqlite3.Connection | None = None

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise TransactionFailure("No open inventory transaction")
        return self._conn

    def _close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def begin_transaction(self) -> None:
        if self._conn is not None:
            raise TransactionFailure("Inventory transaction already open")
        with _translate_errors("begin"):
            conn = connect(self.db_path, timeout=self.timeout, isolation_level=None)
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error:
                conn.close()
                raise
        self._conn = conn

    def quantity_on_hand(self, ingredient_id: int) -> Decimal:
        conn = self._require_conn()
        with _translate_errors("read"):
            row = conn.execute(
                "SELECT current_quantity FROM inventory WHERE ingredient_id = ?", (ingredient_id,)
            ).fetchone()
        if row is None:
            raise TransactionFailure(f"Ingredient {ingredient_id} not found")
        return _quantity(row["current_quantity"])

    def apply_delta(self, ingredient_id: int, delta: Decimal) -> Decimal:
        conn = self._require_conn()
        with _translate_errors("update"):
            cur = conn.execute(
                "UPDATE inventory SET current_quantity = current_quantity + ? WHERE ingredient_id = ?",
                (float(delta), ingredient_id),
            )
        if cur.rowcount == 0:
            raise TransactionFailure(f"Ingredient {ingredient_id} not found")
        return self.quantity_on_hand(ingredient_id)

    def record_order(self, snapshot: OrderSnapshot) -> int | None:
        conn = self._require_conn()
        with _translate_errors("order insert"):
            cur = conn.execute(
                "INSERT INTO orders (created_at, total_cents, source, status) VALUES (?, ?, 'tui', 'PAID')",
                (_utc_now_iso(), _cents(snapshot.total)),
            )
            order_id = int(cur.lastrowid)
            conn.executemany(
                """
                INSERT INTO order_items (order_id, line_index, display_name, quantity, unit_price_cents)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (order_id, idx, line.display_name, line.quantity, _cents(line.unit_price))
                    for idx, line in enumerate(snapshot.lines)
                ],
            )
        return order_id

    def commit(self) -> None:
        conn = self._require_conn()
        with _translate_errors("commit"):
            conn.execute("COMMIT")
        self._close()

    def rollback(self) -> None:
        if self._conn is None:
            return
        try:
            with _translate_errors("rollback"):
                if self._conn.in_transaction:
                    self._conn.execute("ROLLBACK")
        finally:
            self._close()


def inventory_levels(db_path: str | Path = DB_PATH) -> dict[int, Decimal]:
    """Committed stock per ingredient id."""
    with closing(connect(db_path)) as conn:
        rows = conn.execute("SELECT ingredient_id, current_quantity FROM inventory ORDER BY ingredient_id").fetchall()
    return {int(row["ingredient_id"]): _quantity(row["current_quantity"]) for row in rows}


def update_order_status(
    order_id: int,
    status: str,
    db_path: str | Path = DB_PATH,
    timeout: float = DB_TIMEOUT_SECONDS,
) -> None:
    """Update status for a persisted paid order; raises ``TransactionFailure`` if the write fails."""
    with _translate_errors("order status update"), closing(connect(db_path, timeout=timeout)) as conn, conn:
        conn.execute("UPDATE orders SET status = ? WHERE id = ?", (status, order_id))
