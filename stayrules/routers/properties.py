"""
Properties API Router

Base pricing and stay policy per property.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.property import PropertyCreate, PropertyResponse, PropertyUpdate
from ..services.property_store import PropertyStore
from ..utils.dependencies import get_tenant_id

router = APIRouter(prefix="/api/properties", tags=["Properties"])


@router.post("", response_model=PropertyResponse, status_code=201)
async def create_property(
    data: PropertyCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Create a property with its base pricing"""
    return PropertyStore(db, tenant_id).create(data)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return PropertyStore(db, tenant_id).get(property_id)


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: str,
    data: PropertyUpdate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Update base price / stay defaults"""
    return PropertyStore(db, tenant_id).update(property_id, data)
