# This file defines response schemas for the catalog endpoints.
# List endpoints return bare JSON arrays; these models describe one element each.
# Prices are exposed as JSON numbers even though the catalog keeps them as decimals.

from __future__ import annotations

from pydantic import BaseModel, Field


class NamedItemV1(BaseModel):
    id: int
    name: str | None = None


class VehiclePriceV1(BaseModel):
    id: int
    amount: int = Field(ge=1, description="Number of time units the price covers.")
    unit: str = Field(description="One of months, days, hours, minutes.")
    price: float = Field(ge=0)


class VehicleV1(BaseModel):
    id: int
    name: str
    prices: list[VehiclePriceV1]
