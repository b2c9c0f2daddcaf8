from pydantic import BaseModel


class LocationPingCreate(BaseModel):
    latitude: float
    longitude: float
