import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./medschedule.db")

# Connection pool settings (ignored for SQLite)
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "30"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
DB_LOG_SLOW_QUERIES = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
DB_SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS - comma separated list of dashboard origins
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:8081",
).split(",")

# Hour of the first dose when labelling dose slots (08:00 by default)
FIRST_DOSE_HOUR = int(os.getenv("FIRST_DOSE_HOUR", "8"))

# Max rows returned by the patient lookup used by schedule authors
PATIENT_SEARCH_LIMIT = int(os.getenv("PATIENT_SEARCH_LIMIT", "20"))

# Upper bounds for schedule and item numbers
MAX_SCHEDULE_DAYS = int(os.getenv("MAX_SCHEDULE_DAYS", "3650"))
MAX_TIMES_PER_DAY = int(os.getenv("MAX_TIMES_PER_DAY", "24"))
