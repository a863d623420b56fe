import os

# In a real deployment, load these from the environment
SECRET_KEY: str = os.getenv(
    "SECRET_KEY", "your-secret-key-for-jwt-!ChangeMe!"
)
ALGORITHM: str = "HS256"
# Admin sessions last six hours unless overridden
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "360"))

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://./shopdash.sqlite3")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
