from pymongo import MongoClient, ASCENDING, DESCENDING
from backend.config import MONGO_URI, DB_NAME

client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=5000, tz_aware=True)
db = client[DB_NAME]

user_data = db["user_data"]
workouts_col = db["workouts"]
menus_col = db["menus"]
shares_col = db["shares"]


def ensure_indexes():
    workouts_col.create_index([("user_id", ASCENDING), ("date", DESCENDING)])
    workouts_col.create_index([("user_id", ASCENDING), ("workout_id", ASCENDING)], unique=True)
    menus_col.create_index([("user_id", ASCENDING), ("order", ASCENDING)])
    shares_col.create_index([("share_id", ASCENDING)], unique=True)
    shares_col.create_index([("user_id", ASCENDING)])
    user_data.create_index([("email", ASCENDING)], unique=True)
    print("MongoDB indexes ensured")
