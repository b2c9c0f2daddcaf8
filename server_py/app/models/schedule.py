from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class Schedule(Base):
    __tablename__ = "schedule"

    schedule_id = Column(String(64), primary_key=True, index=True)
    truck_id = Column(String(64), ForeignKey("food_truck.truck_id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(String(16), nullable=False)
    start_time = Column(String(8), nullable=False)  # "11:00"
    end_time = Column(String(8), nullable=False)
    typical_location = Column(String, nullable=True)

    truck = relationship("FoodTruck", back_populates="schedule")
