"""
Property Schemas

Base pricing and stay policy that availability rules override.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class PropertyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    base_price: Decimal = Field(..., ge=0, allow_inf_nan=False, description="Nightly price when no rule overrides it")
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    min_nights: int = Field(default=1, ge=1)
    max_nights: Optional[int] = Field(None, ge=1, description="Leave empty for no maximum")

    @model_validator(mode='after')
    def validate_stay_bounds(self):
        if self.max_nights is not None and self.max_nights < self.min_nights:
            raise ValueError("max_nights must not be less than min_nights")
        return self


class PropertyCreate(PropertyBase):
    pass


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    base_price: Optional[Decimal] = Field(None, ge=0, allow_inf_nan=False)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    min_nights: Optional[int] = Field(None, ge=1)
    max_nights: Optional[int] = Field(None, ge=1)


class PropertyResponse(BaseModel):
    id: str
    name: str
    base_price: Optional[Decimal] = None
    currency: Optional[str] = None
    min_nights: Optional[int] = None
    max_nights: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
