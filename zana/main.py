from dotenv import load_dotenv

# Load env vars before any other imports to ensure they are available
load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from zana.config import get_settings
from zana.routes import api

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("groq").setLevel(logging.WARNING)
logger = logging.getLogger("uvicorn")

app = FastAPI(
    title="Zana AI Content Forensics",
    description="Multi-signal detection of machine-generated text and code, with auto-fix.",
    version="1.0.0"
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    client = request.client.host if request.client else "unknown"
    logger.info(f"Incoming request: {request.method} {request.url} from {client}")
    response = await call_next(request)
    return response

# Include API Routes
app.include_router(api.router)


@app.get("/")
async def root():
    return {"message": "Welcome to the Zana AI Content Forensics API"}
