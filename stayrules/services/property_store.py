"""
Property Store

Reads and writes the base pricing/stay policy of tenant properties.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..exceptions import InvalidPropertyError, PropertyNotFoundError
from ..models.property import Property
from ..schemas.property import PropertyCreate, PropertyUpdate

logger = logging.getLogger(__name__)


class PropertyStore:
    def __init__(self, db: Session, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id

    def find(self, property_id: str) -> Optional[Property]:
        return self.db.query(Property).filter(
            Property.id == property_id,
            Property.tenant_id == self.tenant_id
        ).first()

    def get(self, property_id: str) -> Property:
        prop = self.find(property_id)
        if not prop:
            raise PropertyNotFoundError(property_id)
        return prop

    def create(self, data: PropertyCreate) -> Property:
        prop = Property(tenant_id=self.tenant_id, **data.model_dump())
        self.db.add(prop)
        self.db.commit()
        self.db.refresh(prop)
        logger.info(f"Property created: {prop.id} ({prop.name})")
        return prop

    def update(self, property_id: str, data: PropertyUpdate) -> Property:
        prop = self.get(property_id)

        update_data = data.model_dump(exclude_unset=True)
        min_nights = update_data.get("min_nights", prop.min_nights)
        max_nights = update_data.get("max_nights", prop.max_nights)
        if min_nights is not None and max_nights is not None and max_nights < min_nights:
            raise InvalidPropertyError("max_nights must not be less than min_nights")

        for key, value in update_data.items():
            setattr(prop, key, value)

        self.db.commit()
        self.db.refresh(prop)
        logger.info(f"Property updated: {prop.id} fields={sorted(update_data)}")
        return prop
