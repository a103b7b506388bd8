import os
from dotenv import load_dotenv

load_dotenv()

TMDB_API_KEY = os.getenv("TMDB_API_KEY", "")
if not TMDB_API_KEY:
    raise RuntimeError("TMDB_API_KEY is missing. Add it to your .env file.")

TMDB_TIMEOUT = float(os.getenv("TMDB_TIMEOUT", "15"))

DEFAULT_JWT_SECRET = "replace-this-secret"
JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)

USERS_FILE = os.getenv("USERS_FILE", "data/users.json")
DATABASE_URL = os.getenv("DATABASE_URL", "")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5000").split(",")
    if o.strip()
]

PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
