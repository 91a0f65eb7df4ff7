"""Entry point for the register Textual app."""

from __future__ import annotations

import structlog

from pos_register.config import DB_PATH, DB_TIMEOUT_SECONDS, settlement_policy
from pos_register.logs import configure_logging
from pos_register.persistence import SqliteCatalogStore, SqliteInventoryStore, bootstrap_schema, seed_catalog
from pos_register.register import Register
from pos_register.register_app import RegisterApp


def main() -> None:
    """Run the Textual application."""
    log_file = configure_logging()
    bootstrap_schema(DB_PATH)
    seed_catalog(DB_PATH)

    policy = settlement_policy()
    structlog.get_logger(__name__).info(
        "register_starting",
        db_path=str(DB_PATH),
        log_path=str(log_file),
        unresolved=policy.unresolved.value,
        allow_negative_stock=policy.allow_negative_stock,
    )
    register = Register(
        SqliteCatalogStore(DB_PATH),
        SqliteInventoryStore(DB_PATH, timeout=DB_TIMEOUT_SECONDS),
        policy,
    )
    RegisterApp(register, DB_PATH).run()


if __name__ == "__main__":
    main()
