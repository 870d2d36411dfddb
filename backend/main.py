import os
import sys
import logging
from contextlib import asynccontextmanager

# Ensure this directory is in the path for uvicorn and other runners
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import LOG_LEVEL
from database import init_db
from routes.analyzer_routes import router as analyzer_router
from routes.workout_routes import router as workout_router

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        init_db()
    except Exception as e:
        logger.error(f"Database init skipped or failed: {e}")
    yield


app = FastAPI(title="Neural Adapt Wellness Analyzer", lifespan=lifespan)


@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analyzer_router)
app.include_router(workout_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
