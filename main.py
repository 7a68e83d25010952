"""
App 진입점 (FastAPI 인스턴스 생성)
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api.v1 import achievements, profile, health
from app.core.config import settings
from app.core.database import init_db

# 로깅 설정
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

# uvicorn 로거 레벨 조정 (너무 많은 로그 방지)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("테이블 초기화 완료")
    yield


app = FastAPI(
    title="Growth Log API",
    description="아이 성장 기록 백엔드 API",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI 경로
    redoc_url="/redoc",  # ReDoc 경로
    openapi_url="/openapi.json",  # OpenAPI 스키마 경로
    lifespan=lifespan,
)

# CORS 설정 (인증 없음, 전체 허용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_validation_errors(exc: RequestValidationError) -> str:
    """검증 오류를 사람이 읽을 수 있는 한 줄 메시지로 변환"""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """요청 형식 오류는 422 대신 400으로 응답"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": _format_validation_errors(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """예상하지 못한 오류는 로그만 남기고 일반 메시지로 응답"""
    logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/")
async def root():
    """헬스 체크 엔드포인트"""
    return {"message": "Growth Log API Server", "status": "running"}


# 라우터 등록
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(achievements.router, prefix="/api", tags=["achievements"])
app.include_router(profile.router, prefix="/api", tags=["profile"])
