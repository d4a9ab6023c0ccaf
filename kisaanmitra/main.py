import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kisaanmitra.config import CORS_ORIGINS, LOG_LEVEL
from kisaanmitra.db.init import init_db
from kisaanmitra.errors import register_exception_handlers
from kisaanmitra.api import (
    profiles, credits, marketplace, transactions, loans, advisor
)
from kisaanmitra.auth.jwt import router as auth_router
from kisaanmitra.auth.session import on_session_change

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="kisaanmitra",
    description="Backend API for the KisaanMitra farmer platform",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

def log_session_change(event, session):
    logger.info("Session event %s for user %s", event, session.user.username)

on_session_change(log_session_change)

# Initialize database
@app.on_event("startup")
async def startup_event():
    init_db()

# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
app.include_router(credits.router, prefix="/credits", tags=["credits"])
app.include_router(marketplace.router, prefix="/marketplace", tags=["marketplace"])
app.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
app.include_router(loans.router, prefix="/loans", tags=["loans"])
app.include_router(advisor.router, prefix="/advisor", tags=["advisor"])

@app.get("/")
def read_root():
    return {"message": "Welcome to KisaanMitra API"}
