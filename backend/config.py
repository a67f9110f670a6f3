import os
from dotenv import load_dotenv
load_dotenv()

MONGO_URI = os.getenv("MONGO_URI")
DB_NAME = os.getenv("DB_NAME", "workout_tracker")

SECRET_KEY = os.getenv("SECRET_KEY", "YOUR_SECRET_KEY")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# weeks start on Monday 00:00 at this fixed offset from UTC (JST by default)
LOCAL_UTC_OFFSET_HOURS = float(os.getenv("LOCAL_UTC_OFFSET_HOURS", "9"))

SHARE_DURATION_DAYS = int(os.getenv("SHARE_DURATION_DAYS", "30"))


def _keywords(env_name: str, default: str) -> tuple:
    raw = os.getenv(env_name, default)
    return tuple(k.strip().lower() for k in raw.split(",") if k.strip())


WARMUP_KEYWORDS = _keywords("WARMUP_KEYWORDS", "ウォームアップ,warmup,warm-up")
COOLDOWN_KEYWORDS = _keywords("COOLDOWN_KEYWORDS", "クールダウン,cooldown,cool-down")
