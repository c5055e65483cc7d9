import os

# 설정 로딩 전에 테스트용 DB URL 지정 (MySQL 접속 시도 방지)
os.environ.setdefault("DB_URL_OVERRIDE", "sqlite://")

from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from database.db import ConnectionProvider, init_db
from services.roster import RosterManager


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def provider(engine):
    return ConnectionProvider(engine)


@pytest.fixture
def roster(provider):
    return RosterManager(provider)


@pytest.fixture
def seed(engine):
    """명단을 거치지 않고 student 테이블에 직접 행을 넣는 헬퍼"""
    def _seed(*rows):
        with engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO student (sno, name, korean, english, math, science) "
                    "VALUES (:sno, :name, :korean, :english, :math, :science)"
                ),
                [dict(r) for r in rows],
            )
    return _seed


def student_row(sno, name, korean=0, english=0, math=0, science=0):
    return {"sno": sno, "name": name, "korean": korean, "english": english, "math": math, "science": science}


# ==========================================================
# 가짜 DB (로딩 중단, 비정상 rowcount 재현용)
# ==========================================================
class FakeResult:
    def __init__(self, rows=(), rowcount=1, fail_after_rows=False):
        self.rows = list(rows)
        self.rowcount = rowcount
        self.fail_after_rows = fail_after_rows

    def mappings(self):
        return self

    def first(self):
        return self.rows[0] if self.rows else None

    def __iter__(self):
        for row in self.rows:
            yield row
        if self.fail_after_rows:
            raise OperationalError("SELECT * FROM student", {}, Exception("connection lost"))


class FakeConnection:
    def __init__(self, result: FakeResult):
        self.result = result
        self.statements = []

    def execute(self, statement, params=None):
        self.statements.append(str(statement))
        return self.result


class FakeProvider:
    def __init__(self, result: FakeResult):
        self.conn = FakeConnection(result)
        self.acquired = 0

    @contextmanager
    def connection(self):
        self.acquired += 1
        yield self.conn
