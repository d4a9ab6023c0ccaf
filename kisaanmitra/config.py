import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./kisaanmitra.db")

# Configuration
SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-here")  # Change this in production
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS", "http://localhost,http://localhost:3000,http://localhost:8080"
    ).split(",")
    if origin.strip()
]

# Crop prediction / chat service
ADVISOR_API_URL = os.getenv("ADVISOR_API_URL", "http://localhost:8081")
ADVISOR_TIMEOUT = float(os.getenv("ADVISOR_TIMEOUT", "15"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
