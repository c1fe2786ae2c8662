"""
Entry point of the Friends CRM API.

Creates the FastAPI application, configures logging and CORS, installs the
error handlers and mounts the routers.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from friends_crm.database import create_db_and_tables
from friends_crm.errors import register_exception_handlers
from friends_crm.routers import auth, dashboard, friends, health, interactions

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Friends CRM API")

origins = [
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.on_event("startup")
def startup():
    """
    Creates the database tables on startup.

    Skipped when ``TESTING`` is set; tests manage their own schema.
    """
    if os.getenv("TESTING", "false").lower() == "true":
        logger.info("Skipping table creation during testing")
        return
    create_db_and_tables()


@app.get("/")
def read_root():
    """
    Root route of the API.

    Returns a welcome message.
    """
    return {"message": "Welcome to the Friends CRM API!"}


app.include_router(health.router)
app.include_router(auth.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")
app.include_router(friends.router, prefix="/api")
app.include_router(interactions.router, prefix="/api")
