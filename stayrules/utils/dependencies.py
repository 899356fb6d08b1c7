from fastapi import Header, HTTPException

from .logging_config import tenant_id_var

TENANT_HEADER = "X-Tenant-ID"


async def get_tenant_id(x_tenant_id: str = Header(default="", alias=TENANT_HEADER)) -> str:
    """Tenant scope of the request; every store query filters on it"""
    tenant_id = x_tenant_id.strip()
    if not tenant_id:
        raise HTTPException(status_code=400, detail=f"{TENANT_HEADER} header is required")
    tenant_id_var.set(tenant_id)
    return tenant_id
