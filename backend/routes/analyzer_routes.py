import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.analyzer_finding import AnalyzerFinding
from providers.base import BaseProvider
from providers.openai_provider import get_provider
from services.analyzer_service import AnalyzerService
from services.store import Store
from services.user_service import get_demo_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/analyzer", tags=["Analyzer"])

FINDINGS_LIMIT = 20


@router.post("/run")
async def run_analyzer(db: Session = Depends(get_db), provider: BaseProvider = Depends(get_provider)):
    """Run one analyzer pass for the demo user and return its summary."""
    try:
        return await AnalyzerService(Store(db), provider).run()
    except Exception as e:
        logger.exception("Analyzer run failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/findings")
async def list_findings(db: Session = Depends(get_db)):
    store = Store(db)
    user = await get_demo_user(store)
    findings = await store.findings.find_many(
        user_id=user.id,
        order_by=AnalyzerFinding.created_at.desc(),
        limit=FINDINGS_LIMIT,
    )
    return [
        {
            "id": f.id,
            "type": f.type,
            "title": f.title,
            "message": f.message,
            "severity": f.severity,
            "created_at": f.created_at.isoformat() if f.created_at else None,
        }
        for f in findings
    ]
