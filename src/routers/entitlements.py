from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status
from src.auth import AuthContext, require_admin
from src.db import supabase
from src.models.entitlements import EntitlementCreate, EntitlementResponse, EntitlementUpdate

router = APIRouter(prefix="/api/entitlements", tags=["entitlements"])


@router.get("/", response_model=list[EntitlementResponse])
async def list_entitlements(auth: AuthContext = Depends(require_admin)):
    """List the entitlement catalog."""
    result = supabase.table("entitlements").select("*").order("name").execute()
    return result.data


@router.post("/", response_model=EntitlementResponse, status_code=status.HTTP_201_CREATED)
async def create_entitlement(data: EntitlementCreate, auth: AuthContext = Depends(require_admin)):
    """Add an entitlement to the catalog."""
    if not data.name or not data.name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required")

    insert_data = {
        "name": data.name.strip(),
        "description": data.description,
    }

    result = supabase.table("entitlements").insert(insert_data).execute()

    return result.data[0]


@router.get("/{entitlement_id}", response_model=EntitlementResponse)
async def get_entitlement(entitlement_id: str, auth: AuthContext = Depends(require_admin)):
    """Get an entitlement by ID."""
    result = supabase.table("entitlements").select("*").eq("id", entitlement_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entitlement not found")

    return result.data[0]


@router.put("/{entitlement_id}", response_model=EntitlementResponse)
async def update_entitlement(
    entitlement_id: str,
    data: EntitlementUpdate,
    auth: AuthContext = Depends(require_admin),
):
    """Rename or re-describe an entitlement."""
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")
    if "name" in update_data:
        if not update_data["name"] or not update_data["name"].strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required")
        update_data["name"] = update_data["name"].strip()

    update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

    result = supabase.table("entitlements").update(update_data).eq("id", entitlement_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entitlement not found")

    return result.data[0]


@router.delete("/{entitlement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entitlement(entitlement_id: str, auth: AuthContext = Depends(require_admin)):
    """Remove an entitlement from the catalog."""
    result = supabase.table("entitlements").delete().eq("id", entitlement_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entitlement not found")

    return None
