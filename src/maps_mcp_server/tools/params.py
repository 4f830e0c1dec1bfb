"""Structured parameter types shared by several tools."""

from typing import Literal

from pydantic import BaseModel, Field

TravelMode = Literal["driving", "walking", "bicycling", "transit"]


class SearchCenter(BaseModel):
    value: str = Field(description="Address, landmark name, or coordinates (coordinate format: lat,lng)")
    isCoordinates: bool = Field(default=False, description="Whether the input is coordinates")


class Coordinate(BaseModel):
    latitude: float = Field(description="Latitude")
    longitude: float = Field(description="Longitude")
