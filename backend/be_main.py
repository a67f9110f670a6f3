from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError
import uuid
from backend.dependencies import get_current_user
from backend.api.models.user_model import UserCreate, UserLogin
from backend.api.routes.workout_route import router as workout_router
from backend.api.routes.menu_route import router as menu_router
from backend.api.routes.share_route import router as share_router
from backend.db_connection import user_data, ensure_indexes
from backend.auth import hash_password, verify_password, create_access_token


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        ensure_indexes()
    except PyMongoError as e:
        print(f"⚠️ Could not ensure MongoDB indexes: {e}")
    yield

app = FastAPI(lifespan=lifespan)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _session(user_id: str, email: str, name: str) -> dict:
    token = create_access_token({"sub": email, "user_id": user_id})
    return {"token": token, "user_id": user_id, "name": name}


@app.post("/auth/signup")
def signup(user: UserCreate):
    email = _normalize_email(user.email)
    if not email or not user.password:
        raise HTTPException(status_code=400, detail="Email and password are required")
    if user_data.find_one({"email": email}):
        raise HTTPException(status_code=400, detail="Email already registered")
    user_id = str(uuid.uuid4())
    user_data.insert_one({
        "user_id": user_id,
        "name": user.name,
        "email": email,
        "password": hash_password(user.password),
    })
    print(f"🆕 User {user_id} signed up")
    return _session(user_id, email, user.name)


@app.post("/auth/login")
def login(user: UserLogin):
    email = _normalize_email(user.email)
    db_user = user_data.find_one({"email": email})
    if not db_user or not verify_password(user.password, db_user.get("password")):
        raise HTTPException(status_code=400, detail="Invalid credentials")
    return _session(db_user["user_id"], email, db_user.get("name", ""))


@app.get("/dashboard")
def dashboard(user=Depends(get_current_user)):
    return {
        "message": "Welcome",
        "user_id": user["user_id"]
    }


app.include_router(workout_router)
app.include_router(menu_router)
app.include_router(share_router)
