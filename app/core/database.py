"""
Postgres 연결 세션 관리
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.core.config import settings


def _engine_options(database_url: str) -> dict:
    """DB 종류별 엔진 옵션"""
    if database_url.startswith("sqlite"):
        # SQLite는 풀 크기 설정을 지원하지 않음 (로컬 개발/테스트용)
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_size": 10, "max_overflow": 20}


# PostgreSQL 설정
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,  # SQL 쿼리 로깅 (개발 환경에서만)
    **_engine_options(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """데이터베이스 세션 의존성"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """테이블 생성"""
    # 모델이 Base.metadata에 등록되도록 import
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
