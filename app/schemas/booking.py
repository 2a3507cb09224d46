import datetime as dt
from typing import Literal
from pydantic import BaseModel, Field

MAX_PASSENGERS = 6


class TicketBookingRequest(BaseModel):
    from_location: str = Field(alias="from", min_length=1)
    to_location: str = Field(alias="to", min_length=1)
    date: dt.date
    transport_type: Literal["train", "bus", "vehicle"] = "train"
    passengers: int = Field(default=1, ge=1, le=MAX_PASSENGERS)


class PackageBookingRequest(BaseModel):
    package_id: str


class HotelBookingRequest(BaseModel):
    hotel_id: str
