#!/usr/bin/env python
"""Fail (exit 1) unless the migration tree has exactly one head."""
import sys
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def migration_heads(root: Path = PROJECT_ROOT) -> list[str]:
    ini = root / "alembic.ini"
    if not ini.exists():
        raise FileNotFoundError(f"no alembic.ini in {root}")
    cfg = Config(str(ini))
    cfg.set_main_option("script_location", str(root / "alembic"))
    return list(ScriptDirectory.from_config(cfg).get_heads())


def main() -> int:
    try:
        heads = migration_heads()
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    if len(heads) != 1:
        print(f"Error: expected 1 Alembic head, found {len(heads)}: {heads}")
        return 1
    print(f"Alembic head OK: {heads[0]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
