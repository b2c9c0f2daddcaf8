from pydantic import BaseModel
from typing import Optional


class ReviewCreate(BaseModel):
    user_name: Optional[str] = None
    rating: Optional[int] = None
    text: Optional[str] = None
