from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float, Integer, Boolean, JSON
from sqlalchemy.orm import relationship
from app.core.database import Base

PRICE_TIERS = ("$", "$$", "$$$", "$$$$")


class FoodTruck(Base):
    __tablename__ = "food_truck"

    truck_id = Column(String(64), primary_key=True, index=True)
    name = Column(String, nullable=False)
    cuisine_tags = Column(JSON, default=list)  # ["Mexican", "Tacos"]
    price_tier = Column(String(4), default="$$")
    avg_rating = Column(Float, default=0.0)
    reviews_count = Column(Integer, default=0)
    is_open_now = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    menus = relationship("MenuVersion", back_populates="truck", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="truck")
    reviews = relationship("Review", back_populates="truck", cascade="all, delete-orphan")
    schedule = relationship("Schedule", back_populates="truck", cascade="all, delete-orphan")
    location_pings = relationship("TruckLocationPing", back_populates="truck", cascade="all, delete-orphan")
