from pydantic import BaseModel, Field
from typing import List, Optional

class OrderLineRequest(BaseModel):
    item_id: str
    quantity: int = 0

class OrderCreate(BaseModel):
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    items: List[OrderLineRequest] = Field(default_factory=list)

class OrderStatusUpdate(BaseModel):
    status: str
