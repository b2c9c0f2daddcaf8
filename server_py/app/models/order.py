from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base

ORDER_STATUSES = ("pending", "confirmed", "preparing", "ready", "completed", "cancelled")


class Order(Base):
    __tablename__ = "order"

    order_id = Column(String(64), primary_key=True, index=True)
    truck_id = Column(String(64), ForeignKey("food_truck.truck_id"), nullable=False, index=True)

    # Клиент
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=True, index=True)

    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String, default="pending")  # pending, confirmed, preparing, ready, completed, cancelled

    # Временные метки
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    truck = relationship("FoodTruck", back_populates="orders")
    lines = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.line_no",
    )


class OrderItem(Base):
    __tablename__ = "order_item"

    order_item_id = Column(String(64), primary_key=True, index=True)
    order_id = Column(String(64), ForeignKey("order.order_id", ondelete="CASCADE"), nullable=False, index=True)
    line_no = Column(Integer, nullable=False, default=0)  # порядок позиций как в запросе
    item_id = Column(String(64), nullable=False)
    item_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 3), nullable=False)
    subtotal = Column(Numeric(12, 3), nullable=False)

    order = relationship("Order", back_populates="lines")
