from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Boolean, Numeric, ForeignKey, JSON, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base


class MenuVersion(Base):
    __tablename__ = "menu_version"

    menu_id = Column(String(64), primary_key=True, index=True)
    truck_id = Column(String(64), ForeignKey("food_truck.truck_id", ondelete="CASCADE"), nullable=False, index=True)
    version_no = Column(Integer, default=1)
    # Версия действует, пока effective_from <= now < effective_to (или effective_to пустой)
    effective_from = Column(DateTime, default=datetime.utcnow, nullable=False)
    effective_to = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    truck = relationship("FoodTruck", back_populates="menus")
    items = relationship("MenuItem", back_populates="menu", cascade="all, delete-orphan")


class MenuItem(Base):
    __tablename__ = "menu_item"
    __table_args__ = (UniqueConstraint("menu_id", "item_id", name="uq_menu_item_menu_id_item_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    # item_id уникален только в пределах версии меню: у разных траков может быть свой "burger"
    item_id = Column(String(64), nullable=False, index=True)
    menu_id = Column(String(64), ForeignKey("menu_version.menu_id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 3), nullable=False)
    dietary_tags = Column(JSON, nullable=True)
    available = Column(Boolean, default=True)

    menu = relationship("MenuVersion", back_populates="items")
