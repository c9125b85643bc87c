from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text, func

from fastfood.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    category = Column(String(30), index=True, nullable=False, default="")
    description = Column(Text, default="", nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
