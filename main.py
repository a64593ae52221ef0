import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.db.database import engine, Base
from app.api.v1.endpoints import auth, regions, users, polls, comments

from app.core.exception import register_exception_handlers
from app.core.constants import APIConfig, LoggingConfig

# Import models to register them with SQLAlchemy
from app.models import user, region, polls as poll_models

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", LoggingConfig.DEFAULT_LOG_LEVEL).upper(),
    format=LoggingConfig.LOG_FORMAT,
    datefmt=LoggingConfig.DATE_FORMAT
)
logging.getLogger("sqlalchemy.engine").setLevel(LoggingConfig.DATABASE_LOG_LEVEL)

# Create all tables in the database
Base.metadata.create_all(bind=engine)

# Create FastAPI app with centralized configuration
app = FastAPI(
    title=APIConfig.API_TITLE,
    description=APIConfig.API_DESCRIPTION,
    version=APIConfig.API_VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=APIConfig.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Register exception handlers
register_exception_handlers(app)

# Include routers with centralized prefix
app.include_router(auth.router, prefix=APIConfig.API_V1_PREFIX)
app.include_router(regions.router, prefix=APIConfig.API_V1_PREFIX)
app.include_router(users.router, prefix=APIConfig.API_V1_PREFIX)
app.include_router(polls.router, prefix=APIConfig.API_V1_PREFIX)
app.include_router(comments.router, prefix=APIConfig.API_V1_PREFIX)

@app.get("/")
def read_root():
    return {"message": "Welcome to the Regional Polls API!"}
