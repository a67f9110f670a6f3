from fastapi import APIRouter, Depends, HTTPException
from backend.dependencies import get_current_user
from backend.api.models.menu_model import MenuCreate, MenuUpdate, MenuReorderRequest
from backend.api.services.menu_service import (create_menu, get_menus, get_menu_by_id, update_menu, delete_menu,
                                               delete_all_menus, update_menus_order, initialize_default_menus)
router = APIRouter(prefix="/menu", tags=["menu"])
@router.post("/create")
async def create_menu_entry(payload: MenuCreate, user=Depends(get_current_user)):
    try:
        return {"success": True, "menu": create_menu(user["user_id"], payload.model_dump())}
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Unexpected error: {e}")
@router.get("/list")
async def list_menus(user=Depends(get_current_user)):
    try:
        return {"success": True, "menus": get_menus(user["user_id"])}
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Unexpected error: {e}")
@router.get("/view/{menu_id}")
async def view_menu(menu_id: str, user=Depends(get_current_user)):
    try:
        menu = get_menu_by_id(user["user_id"], menu_id)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    if menu is None:
        raise HTTPException(status_code=404, detail="Menu not found")
    return {"success": True, "menu": menu}
@router.put("/update/{menu_id}")
async def update_menu_entry(menu_id: str, payload: MenuUpdate, user=Depends(get_current_user)):
    try:
        menu = update_menu(user["user_id"], menu_id, payload.model_dump(exclude_unset=True))
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    if menu is None:
        raise HTTPException(status_code=404, detail="Menu not found")
    return {"success": True, "menu": menu}
@router.delete("/delete/{menu_id}")
async def delete_menu_entry(menu_id: str, user=Depends(get_current_user)):
    try:
        deleted = delete_menu(user["user_id"], menu_id)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    if not deleted:
        raise HTTPException(status_code=404, detail="Menu not found")
    return {"success": True, "message": "Menu deleted"}
@router.delete("/delete_all")
async def delete_all(user=Depends(get_current_user)):
    try:
        return {"success": True, "deleted": delete_all_menus(user["user_id"])}
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
@router.post("/reorder")
async def reorder_menus(payload: MenuReorderRequest, user=Depends(get_current_user)):
    try:
        updated = update_menus_order(user["user_id"], [m.model_dump() for m in payload.menus])
        return {"success": True, "updated": updated}
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
@router.post("/init_defaults")
async def init_default_menus(user=Depends(get_current_user)):
    try:
        return {"success": True, "added": initialize_default_menus(user["user_id"])}
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
