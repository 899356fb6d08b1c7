"""
Property Model

Base pricing and stay policy of a rental property. Availability rules
override these per date.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from ..database import Base


class Property(Base):
    __tablename__ = "properties"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(String(64), nullable=False, index=True)
    name = Column(String(200), nullable=False)

    # Defaults used when no rule overrides the date
    base_price = Column(Numeric(10, 2), nullable=True)
    currency = Column(String(3), nullable=True)
    min_nights = Column(Integer, nullable=True, default=1)
    max_nights = Column(Integer, nullable=True)  # null = no maximum

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    rules = relationship("AvailabilityRule", back_populates="property", cascade="all, delete-orphan")

    def to_terms(self, default_currency: str = "BRL"):
        """Plain-value copy of the pricing/stay defaults"""
        from ..services.rule_evaluator import PropertyTerms

        return PropertyTerms(
            property_id=self.id,
            base_price=Decimal(str(self.base_price)) if self.base_price is not None else None,
            min_nights=self.min_nights,
            max_nights=self.max_nights,
            currency=self.currency or default_currency,
        )

    def __repr__(self):
        return f"<Property {self.name} base={self.base_price}>"
