from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class Product:
    id: int
    name: str
    price: Decimal
    category: str = ""
    description: str = ""

