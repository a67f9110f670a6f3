from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class VolumeByType(BaseModel):
    weight: float = 0
    bodyweight: float = 0
    time: float = 0
    distance: float = 0


class WeeklyStats(BaseModel):
    count: int = 0
    total_volume: float = Field(0, description="Sum of the stored total_volume of each workout")
    unique_days: int = 0
    unique_exercises: int = 0
    volume_by_type: VolumeByType = Field(default_factory=VolumeByType)
    warmup_total_minutes: int = 0
    cooldown_total_minutes: int = 0
    warmup_total_seconds: float = 0
    cooldown_total_seconds: float = 0
    fallback_dates: int = Field(0, description="Workouts whose date could not be read and fell back to now")
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None


class DashboardStats(BaseModel):
    this_week: WeeklyStats
    last_week: WeeklyStats
