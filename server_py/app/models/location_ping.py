from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base


class TruckLocationPing(Base):
    __tablename__ = "truck_location_ping"

    id = Column(Integer, primary_key=True, index=True)
    truck_id = Column(String(64), ForeignKey("food_truck.truck_id", ondelete="CASCADE"), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    recorded_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    truck = relationship("FoodTruck", back_populates="location_pings")
