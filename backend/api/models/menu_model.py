from pydantic import BaseModel
from typing import Optional, List
from backend.api.models.workout_model import MenuType


class MenuCreate(BaseModel):
    name: str
    category: List[str] = []
    type: MenuType = "weight"
    has_sides: bool = False
    order: int = 0


class MenuUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[List[str]] = None
    type: Optional[MenuType] = None
    has_sides: Optional[bool] = None
    order: Optional[int] = None


class MenuOrderItem(BaseModel):
    menu_id: str
    order: int


class MenuReorderRequest(BaseModel):
    menus: List[MenuOrderItem]
