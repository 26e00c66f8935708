from fastapi import APIRouter
from zana.routes import analyze, session

router = APIRouter()

router.include_router(analyze.router, prefix="/api", tags=["AI Content Forensics"])
router.include_router(session.router, prefix="/api", tags=["Session"])
