from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings
from database.db import ConnectionProvider, engine, init_db
from services.roster import RosterManager

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# 드라이버 디버그 로그 비활성화
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

# ✅ 미들웨어 임포트
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ 라우터 임포트
from routers import students

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS 설정 (프론트엔드 연동 대비)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
app.add_middleware(TimingMiddleware)

# ✅ 전역 에러 핸들러 등록 (일관된 JSON 에러 포맷)
add_error_handlers(app)

# ✅ 프로세스당 하나의 명단 관리자 (첫 요청 시 DB에서 로딩)
app.state.roster = RosterManager(ConnectionProvider(engine))

# ✅ /v1 프리픽스 라우터 등록
app.include_router(students.router, prefix="/v1")

# ✅ 헬스체크 엔드포인트
@app.get("/health")
def health_check():
    return {"status": "ok", "env": settings.ENV, "roster": app.state.roster.state.value}

@app.on_event("startup")
def _create_tables():
    if settings.DB_CREATE_TABLES:
        init_db()
        logger.info("student 테이블 확인/생성 완료")

# ✅ 루트 엔드포인트
@app.get("/")
def root():
    return {"message": "Student Roster API - 학생 성적 명단 관리"}
