"""
헬스 체크 API
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.database import get_db
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """DB 연결 확인"""
    try:
        current_time = db.execute(text("SELECT CURRENT_TIMESTAMP")).scalar()
    except SQLAlchemyError as e:
        logger.error(f"헬스 체크 DB 오류: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "DOWN",
                "postgres": "Connection Error",
                "error": str(e),
            },
        )

    return {
        "status": "UP",
        "postgres": "Connected",
        "time": current_time,
    }
