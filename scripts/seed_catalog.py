#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from fastfood.core.config import IS_PROD  # noqa: E402
from fastfood.core.database import SessionLocal, engine  # noqa: E402
from fastfood.services.catalog_seed import ensure_products_table, seed_catalog  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Popula o catálogo de produtos para uso local.")
    parser.add_argument("--file", type=Path, help="JSON com uma lista de produtos (name, price, category, description)")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Permite executar com ENV=prod",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    if IS_PROD and not args.force:
        print("Seed desabilitado em produção. Use --force.")
        return 1

    try:
        ensure_products_table(engine)
    except RuntimeError as exc:
        print(str(exc))
        return 1

    catalog = None
    if args.file:
        catalog = json.loads(args.file.read_text(encoding="utf-8"))

    db = SessionLocal()
    try:
        created, updated = seed_catalog(db, catalog)
    except ValueError as exc:
        print(str(exc))
        return 1
    finally:
        db.close()

    print(f"Catálogo: {created} criados, {updated} atualizados")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
