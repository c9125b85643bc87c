from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from fastfood.core.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)

    # 0 = pedido sem cliente cadastrado
    customer_id = Column(Integer, index=True, nullable=False, default=0)
    cpf = Column(String(14), index=True, nullable=False)

    # received / in_progress / ready / completed / cancelled
    status = Column(String(20), index=True, nullable=False, default="received")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
    payment = relationship("Payment", back_populates="order", uselist=False, cascade="all, delete-orphan")
