from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from app.core.database import Base


class Review(Base):
    __tablename__ = "review"

    review_id = Column(String(64), primary_key=True, index=True)
    truck_id = Column(String(64), ForeignKey("food_truck.truck_id", ondelete="CASCADE"), nullable=False, index=True)
    user_name = Column(String, nullable=False)
    rating = Column(Integer, nullable=False)
    text = Column(Text, nullable=True)
    status = Column(String(16), default="published")  # published, hidden
    upvotes = Column(Integer, default=0)
    downvotes = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    truck = relationship("FoodTruck", back_populates="reviews")
