import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine                # SQLAlchemy 엔진 생성 도구
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base         # 모델의 Base 클래스

from config.settings import settings                # ✅ 환경변수 설정 파일 불러오기
from utils.exceptions import ConnectionProviderError

logger = logging.getLogger(__name__)

# ✅ 환경변수에서 DB 연결 URL을 불러와 엔진 생성 (실제 연결은 첫 사용 시점)
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


def init_db(bind: Engine = engine):
    """student 테이블이 없으면 생성"""
    import models.students  # noqa: F401  (테이블 메타데이터 등록)

    Base.metadata.create_all(bind=bind)


class ConnectionProvider:
    """
    필요할 때마다 DB 연결을 하나 빌려주는 제공자.

    - connection()은 with 블록 동안 트랜잭션이 열린 Connection을 돌려줍니다.
    - 블록이 정상 종료되면 commit, 예외가 나면 rollback 후 연결을 반납합니다.
    - 연결 자체를 얻지 못하면 ConnectionProviderError를 발생시킵니다.
    """

    def __init__(self, bind: Engine = engine):
        self.engine = bind

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        try:
            conn = self.engine.connect()
        except OperationalError as e:
            logger.error(f"DB 연결 실패: {self.engine.url.render_as_string(hide_password=True)}")
            raise ConnectionProviderError(f"DB에 연결할 수 없습니다: {e}") from e

        try:
            with conn.begin():
                yield conn
        finally:
            conn.close()
