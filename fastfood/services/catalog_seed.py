from __future__ import annotations

from decimal import Decimal

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from fastfood.domain import to_money
from fastfood.models.product import Product

DEFAULT_CATALOG: list[dict] = [
    {"name": "X-Burger", "category": "lanche", "price": "18.90", "description": "Pão, carne e queijo"},
    {"name": "X-Bacon", "category": "lanche", "price": "22.50", "description": "Pão, carne, queijo e bacon"},
    {"name": "Batata Frita", "category": "acompanhamento", "price": "9.90", "description": "Porção média"},
    {"name": "Refrigerante Lata", "category": "bebida", "price": "6.00", "description": "350ml"},
    {"name": "Sorvete", "category": "sobremesa", "price": "7.50", "description": "Casquinha de baunilha"},
]


def ensure_products_table(engine: Engine) -> None:
    if not inspect(engine).has_table("products"):
        raise RuntimeError("Tabela products não encontrada. Rode as migrations primeiro.")


def upsert_product(
    db: Session,
    *,
    name: str,
    price: Decimal | str,
    category: str = "",
    description: str = "",
) -> tuple[Product, bool]:
    value = to_money(price)
    if value <= 0:
        raise ValueError(f"Preço inválido para {name}: {price}")

    existing = db.query(Product).filter(Product.name == name).first()
    if existing:
        existing.price = value
        existing.category = category
        existing.description = description
        return existing, False

    product = Product(name=name, price=value, category=category, description=description)
    db.add(product)
    db.flush()
    return product, True


def seed_catalog(db: Session, catalog: list[dict] | None = None) -> tuple[int, int]:
    """Insert or refresh ``catalog`` entries by product name; returns (created, updated)."""
    created = updated = 0
    try:
        for entry in catalog if catalog is not None else DEFAULT_CATALOG:
            _, was_created = upsert_product(
                db,
                name=entry["name"],
                price=entry["price"],
                category=entry.get("category", ""),
                description=entry.get("description", ""),
            )
            if was_created:
                created += 1
            else:
                updated += 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    return created, updated
