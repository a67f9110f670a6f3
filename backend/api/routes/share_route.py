from fastapi import APIRouter, Depends, HTTPException
from backend.dependencies import get_current_user
from backend.api.models.share_model import ShareViewRequest
from backend.api.services.share_service import create_share, get_user_shares, deactivate_share, get_shared_workouts
router = APIRouter(prefix="/share", tags=["share"])
@router.post("/create")
async def create_share_link(user=Depends(get_current_user)):
    try:
        return {"success": True, "share": create_share(user["user_id"])}
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
@router.get("/list")
async def list_share_links(user=Depends(get_current_user)):
    try:
        return {"success": True, "shares": get_user_shares(user["user_id"])}
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
@router.post("/deactivate/{share_id}")
async def deactivate_share_link(share_id: str, user=Depends(get_current_user)):
    try:
        deactivated = deactivate_share(share_id, user["user_id"])
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    if not deactivated:
        raise HTTPException(status_code=404, detail="Share not found")
    return {"success": True, "message": "Share deactivated"}
@router.post("/view/{share_id}")
async def view_shared_workouts(share_id: str, payload: ShareViewRequest):
    try:
        return {"success": True, **get_shared_workouts(share_id, payload.password)}
    except PermissionError as pe:
        raise HTTPException(status_code=403, detail=str(pe))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
