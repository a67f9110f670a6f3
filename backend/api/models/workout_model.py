from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Union
from datetime import datetime

MenuType = Literal["weight", "bodyweight", "time", "distance"]


class ExerciseSet(BaseModel):
    id: Optional[str] = None
    weight: Optional[float] = None
    reps: Optional[float] = None
    duration: Optional[float] = Field(None, description="Seconds")
    time: Optional[float] = Field(None, description="Seconds, older clients")
    distance: Optional[float] = None
    side: Optional[Literal["left", "right", "both"]] = None


class WorkoutExercise(BaseModel):
    id: Optional[str] = None
    name: str
    type: Optional[Literal["weight", "time"]] = None
    menu_type: Optional[MenuType] = None
    has_side_option: bool = False
    category: Optional[str] = ""
    sets: List[ExerciseSet] = []
    notes: Optional[str] = None
    duration_seconds: Optional[float] = None


class WorkoutCreate(BaseModel):
    date: Union[datetime, str] = Field(..., description="ISO date or datetime of the session")
    exercises: List[WorkoutExercise] = []
    total_volume: Optional[float] = None
    notes: Optional[str] = ""
    start_time: Optional[Union[datetime, str]] = None
    end_time: Optional[Union[datetime, str]] = None
    duration: Optional[float] = Field(None, description="Minutes")
    warmup_duration: Optional[float] = Field(None, description="Seconds")
    cooldown_duration: Optional[float] = Field(None, description="Seconds")


class WorkoutUpdate(BaseModel):
    date: Optional[Union[datetime, str]] = None
    exercises: Optional[List[WorkoutExercise]] = None
    total_volume: Optional[float] = None
    notes: Optional[str] = None
    start_time: Optional[Union[datetime, str]] = None
    end_time: Optional[Union[datetime, str]] = None
    duration: Optional[float] = None
    warmup_duration: Optional[float] = None
    cooldown_duration: Optional[float] = None
