"""
services/roster.py

학생 명단(Roster) 관리자.

- 메모리 명단(학번 → StudentRecord)을 DB의 student 테이블과 동기화합니다.
- 명단은 처음 필요한 시점에 테이블 전체를 한 번에 읽어옵니다(UNLOADED 상태에서만).
- 모든 쓰기 작업은 점수 보정 + 합계/평균/등급 재계산 후 반영됩니다.
- 각 SQL은 ConnectionProvider에서 연결을 빌려 한 문장만 실행하고 즉시 반납합니다.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database.db import ConnectionProvider
from schemas.students import StudentCreate, StudentRecord
from services.grading import build_record
from utils.exceptions import (
    DuplicateStudentError,
    InvalidSortCriterionError,
    PersistenceError,
    RosterConsistencyError,
    RosterLoadError,
)

logger = logging.getLogger(__name__)


# ==========================================================
# SQL 문
# ==========================================================
SELECT_ALL_SQL = text("SELECT * FROM student")
INSERT_SQL = text(
    "INSERT INTO student (sno, name, korean, english, math, science) "
    "VALUES (:sno, :name, :korean, :english, :math, :science)"
)
UPDATE_SQL = text(
    "UPDATE student SET name = :name, korean = :korean, english = :english, "
    "math = :math, science = :science WHERE sno = :sno"
)
DELETE_SQL = text("DELETE FROM student WHERE sno = :sno")
SELECT_ONE_SQL = text("SELECT * FROM student WHERE sno = :sno")


class RosterState(str, enum.Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"
    LOAD_FAILED = "load_failed"     # 일부만 읽힌 상태일 수 있음


class SortCriterion(enum.IntEnum):
    NAME = 1          # 이름 오름차순
    STUDENT_ID = 2    # 학번 오름차순
    SCORE = 3         # 합계 내림차순, 동점이면 평균 내림차순


class WriteStatus(str, enum.Enum):
    APPLIED = "applied"
    NO_ROWS = "no_rows"     # DB 반영 0건 (명단 변경 없음)


@dataclass
class WriteResult:
    status: WriteStatus
    sno: str
    record: Optional[StudentRecord] = None

    @property
    def ok(self) -> bool:
        return self.status is WriteStatus.APPLIED


def _sort_key(criterion: SortCriterion):
    if criterion is SortCriterion.NAME:
        return lambda r: r.name
    if criterion is SortCriterion.STUDENT_ID:
        return lambda r: r.sno
    return lambda r: (r.total, r.average)


class RosterManager:
    """DB와 동기화되는 학생 명단"""

    def __init__(self, provider: ConnectionProvider):
        self.provider = provider
        self.state = RosterState.UNLOADED
        self._records: Dict[str, StudentRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> List[StudentRecord]:
        """현재 명단 순서 그대로의 사본"""
        return list(self._records.values())

    # ==========================================================
    # [1단계] 전체 로딩
    # ==========================================================
    def load(self) -> int:
        """
        student 테이블 전체를 읽어 명단을 채웁니다.

        실패하면 읽은 데까지는 명단에 남기고 LOAD_FAILED 상태로 바꾼 뒤
        RosterLoadError를 발생시킵니다. 반환값은 이번에 읽은 행 수입니다.
        """
        loaded = 0
        try:
            with self.provider.connection() as conn:
                for row in conn.execute(SELECT_ALL_SQL).mappings():
                    record = build_record(row)
                    self._records[record.sno] = record
                    loaded += 1
        except (SQLAlchemyError, PersistenceError, TypeError, ValueError) as e:
            # 연결/SQL 오류뿐 아니라 NULL 점수/이름 같은 잘못된 행도 로딩 실패로 처리
            self.state = RosterState.LOAD_FAILED
            logger.exception(f"학생 명단 로딩 실패 ({loaded}건까지 읽음)")
            raise RosterLoadError(f"학생 명단을 불러오지 못했습니다: {e}", loaded_count=loaded) from e

        self.state = RosterState.LOADED
        logger.info(f"학생 명단 로딩 완료: {loaded}건")
        return loaded

    def reload(self) -> int:
        """명단을 비우고 처음부터 다시 로딩"""
        self._records.clear()
        self.state = RosterState.UNLOADED
        return self.load()

    def _ensure_loaded(self):
        if self.state is RosterState.UNLOADED:
            self.load()

    # ==========================================================
    # [2단계] 추가 / 수정 / 삭제
    # ==========================================================
    def insert(self, data: StudentCreate) -> WriteResult:
        self._ensure_loaded()
        record = build_record(data)

        try:
            with self.provider.connection() as conn:
                affected = conn.execute(INSERT_SQL, self._params(record)).rowcount
        except IntegrityError as e:
            raise DuplicateStudentError(record.sno) from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"학생 추가 실패 (sno={record.sno}): {e}") from e

        if affected == 0:
            logger.warning(f"DB INSERT 0건: sno={record.sno}")
            return WriteResult(WriteStatus.NO_ROWS, record.sno)

        self._records[record.sno] = record
        logger.info(f"학생 추가: sno={record.sno}, total={record.total}, grade={record.grade}")
        return WriteResult(WriteStatus.APPLIED, record.sno, record)

    def update(self, data: StudentCreate) -> WriteResult:
        # 보정/재계산은 로딩 여부와 상관없이 먼저 수행
        record = build_record(data)
        self._ensure_loaded()

        try:
            with self.provider.connection() as conn:
                affected = conn.execute(UPDATE_SQL, self._params(record)).rowcount
                if affected and record.sno not in self._records:
                    # with 블록 안에서 발생시켜 UPDATE를 rollback
                    logger.error(f"DB에는 있으나 명단에 없는 학생 수정: sno={record.sno}")
                    raise RosterConsistencyError(f"명단에 없는 학번입니다: {record.sno}")
        except SQLAlchemyError as e:
            raise PersistenceError(f"학생 수정 실패 (sno={record.sno}): {e}") from e

        if affected == 0:
            logger.warning(f"DB UPDATE 0건: sno={record.sno}")
            return WriteResult(WriteStatus.NO_ROWS, record.sno)

        # dict 키를 그대로 두고 값만 교체하므로 명단 순서 유지
        self._records[record.sno] = record
        logger.info(f"학생 수정: sno={record.sno}, total={record.total}, grade={record.grade}")
        return WriteResult(WriteStatus.APPLIED, record.sno, record)

    def delete(self, sno: str) -> WriteResult:
        self._ensure_loaded()

        try:
            with self.provider.connection() as conn:
                affected = conn.execute(DELETE_SQL, {"sno": sno}).rowcount
                if affected > 1:
                    # with 블록 안에서 발생시켜 트랜잭션 rollback
                    raise RosterConsistencyError(f"학번 {sno} 삭제 시 {affected}건이 영향을 받았습니다")
        except SQLAlchemyError as e:
            raise PersistenceError(f"학생 삭제 실패 (sno={sno}): {e}") from e

        if affected == 0:
            logger.info(f"삭제할 학생 없음: sno={sno}")
            return WriteResult(WriteStatus.NO_ROWS, sno)

        removed = self._records.pop(sno, None)
        if removed is None:
            logger.warning(f"DB에서 삭제했으나 명단에 없던 학생: sno={sno}")
        else:
            logger.info(f"학생 삭제: sno={sno}")
        return WriteResult(WriteStatus.APPLIED, sno, removed)

    # ==========================================================
    # [3단계] 조회 / 정렬
    # ==========================================================
    def search(self, sno: str) -> Optional[StudentRecord]:
        """학번으로 조회. 없으면 None"""
        self._ensure_loaded()

        try:
            with self.provider.connection() as conn:
                row = conn.execute(SELECT_ONE_SQL, {"sno": sno}).mappings().first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"학생 조회 실패 (sno={sno}): {e}") from e

        if row is None:
            return None
        return self._records.get(row["sno"])

    def sort(self, criterion: Union[int, SortCriterion]):
        """명단 순서를 기준에 따라 재배열 (DB는 건드리지 않음)"""
        try:
            criterion = SortCriterion(criterion)
        except ValueError as e:
            raise InvalidSortCriterionError(criterion) from e

        ordered = sorted(
            self._records.values(),
            key=_sort_key(criterion),
            reverse=criterion is SortCriterion.SCORE,
        )
        self._records = {r.sno: r for r in ordered}

    def total_search(self, criterion: Union[int, SortCriterion]) -> List[StudentRecord]:
        """전체 명단을 정렬해서 반환"""
        self._ensure_loaded()
        self.sort(criterion)
        return self.records

    @staticmethod
    def _params(record: StudentRecord) -> dict:
        return record.model_dump(include={"sno", "name", "korean", "english", "math", "science"})

