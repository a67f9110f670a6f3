from fastapi import APIRouter, Depends, HTTPException
from backend.dependencies import get_current_user
from backend.api.models.workout_model import WorkoutCreate, WorkoutUpdate
from backend.api.models.stats_model import WeeklyStats, DashboardStats
from backend.api.services.workout_service import (create_workout, get_workouts, get_workout_by_id, update_workout,
                                                  delete_workout, get_recent_workouts, get_todays_workouts,
                                                  get_this_weeks_stats, get_last_weeks_stats, get_dashboard_stats)
router = APIRouter(prefix="/workout", tags=["workout"])
@router.post("/create")
async def create_workout_entry(payload: WorkoutCreate, user=Depends(get_current_user)):
    try:
        workout = create_workout(user["user_id"], payload.model_dump())
        return {"success": True, "workout": workout}
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Unexpected error: {e}")
@router.get("/list")
async def list_workouts(user=Depends(get_current_user)):
    try:
        return {"success": True, "workouts": get_workouts(user["user_id"])}
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Unexpected error: {e}")
@router.get("/recent")
async def recent_workouts(limit: int = 5, user=Depends(get_current_user)):
    try:
        return {"success": True, "workouts": get_recent_workouts(user["user_id"], limit)}
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Unexpected error: {e}")
@router.get("/today")
async def todays_workouts(user=Depends(get_current_user)):
    try:
        return {"success": True, "workouts": get_todays_workouts(user["user_id"])}
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Unexpected error: {e}")
@router.get("/view/{workout_id}")
async def view_workout(workout_id: str, user=Depends(get_current_user)):
    try:
        workout = get_workout_by_id(user["user_id"], workout_id)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    if workout is None:
        raise HTTPException(status_code=404, detail="Workout not found")
    return {"success": True, "workout": workout}
@router.put("/update/{workout_id}")
async def update_workout_entry(workout_id: str, payload: WorkoutUpdate, user=Depends(get_current_user)):
    try:
        workout = update_workout(user["user_id"], workout_id, payload.model_dump(exclude_unset=True))
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    if workout is None:
        raise HTTPException(status_code=404, detail="Workout not found")
    return {"success": True, "workout": workout}
@router.delete("/delete/{workout_id}")
async def delete_workout_entry(workout_id: str, user=Depends(get_current_user)):
    try:
        deleted = delete_workout(user["user_id"], workout_id)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=str(re))
    if not deleted:
        raise HTTPException(status_code=404, detail="Workout not found")
    return {"success": True, "message": "Workout deleted"}
@router.get("/stats/this_week", response_model=WeeklyStats)
async def this_week_stats(user=Depends(get_current_user)):
    try:
        return get_this_weeks_stats(user["user_id"])
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=f"Could not load this week's statistics, please retry: {re}")
@router.get("/stats/last_week", response_model=WeeklyStats)
async def last_week_stats(user=Depends(get_current_user)):
    try:
        return get_last_weeks_stats(user["user_id"])
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=f"Could not load last week's statistics, please retry: {re}")
@router.get("/stats/dashboard", response_model=DashboardStats)
async def dashboard_stats(user=Depends(get_current_user)):
    try:
        return get_dashboard_stats(user["user_id"])
    except RuntimeError as re:
        raise HTTPException(status_code=500, detail=f"Could not load statistics, please retry: {re}")
