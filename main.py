from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
import os
import logging
from dotenv import load_dotenv

from db import init_db
from utils.auth_utils import CurrentProfile, get_current_profile
import profile_routes
import directory_routes
import admin_routes
from recommendation import routes as recommendation_routes

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logging.info("App starting")

app = FastAPI(title="Student Directory")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_db()

app.include_router(profile_routes.router)
app.include_router(directory_routes.router)
app.include_router(admin_routes.router)
app.include_router(recommendation_routes.router)


@app.get("/users/me", response_model=CurrentProfile, tags=["users"], summary="Current user")
def me(current: CurrentProfile = Depends(get_current_profile)):
    return current


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}
