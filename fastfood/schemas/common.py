from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# amounts go over the wire as JSON numbers
Money = Annotated[Decimal, PlainSerializer(lambda value: float(value), return_type=float, when_used="json")]
