from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import logging
import os

# Load environment variables before any module reads them
load_dotenv()

from database.connection import engine, Base
import models  # noqa: F401  registers every table on Base
from routes import admin, clues, teams, qr_codes, players, hunt
from services.errors import HuntError

logging.basicConfig(level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(
    title="Scavenger Hunt API",
    description="API for QR code scavenger hunts with per-team clue orders",
    version="1.0.0"
)

allowed_origins = [
    "http://localhost:3000",           # Local development frontend
    "http://localhost:3001",           # Alternative local dev port
]
extra_origins = os.getenv("ALLOWED_ORIGINS", "")
allowed_origins.extend(origin.strip() for origin in extra_origins.split(",") if origin.strip())

# In development, allow localhost with any port
LOCALHOST_ORIGIN_REGEX = r"^http://localhost(:\d+)?$"
origin_regex = LOCALHOST_ORIGIN_REGEX if os.getenv("ENVIRONMENT") == "development" else None

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_origin_regex=origin_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(HuntError)
def hunt_error_handler(request: Request, exc: HuntError):
    """Every engine rejection is answered with its code so clients can react to it"""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(admin.router, tags=["Admin"])
app.include_router(clues.router, tags=["Clues"])
app.include_router(teams.router, tags=["Teams"])
app.include_router(qr_codes.router, tags=["QR Codes"])
app.include_router(players.router, tags=["Players"])
app.include_router(hunt.router, tags=["Hunt"])


@app.get("/")
def root():
    """Root endpoint"""
    return {"message": "Scavenger Hunt API", "version": "1.0.0"}


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", 8000))
    uvicorn.run("main:app", host=host, port=port, reload=True)
