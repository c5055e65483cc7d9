"""
utils/exceptions.py

학생 명단(Roster) 처리 중 발생하는 예외 모음.
- 0건 반영(soft failure)은 예외가 아니라 WriteResult 상태로 전달됩니다.
- 조회 결과 없음(not found)도 예외가 아니라 None 입니다.
"""


class RosterError(Exception):
    """명단 처리 예외의 최상위 클래스"""


class PersistenceError(RosterError):
    """SQL 실행 또는 DB 연결 실패 (현재 작업 중단, 자동 재시도 없음)"""


class ConnectionProviderError(PersistenceError):
    """DB 연결 획득 실패 (설정 오류로 간주)"""


class DuplicateStudentError(PersistenceError):
    """이미 존재하는 학번으로 INSERT 시도"""

    def __init__(self, sno: str):
        super().__init__(f"이미 존재하는 학번입니다: {sno}")
        self.sno = sno


class RosterLoadError(RosterError):
    """
    전체 명단 로딩 실패.
    명단은 실패 직전까지 읽은 행을 그대로 유지하며, 호출자가 reload() 여부를 결정합니다.
    """

    def __init__(self, message: str, loaded_count: int = 0):
        super().__init__(message)
        self.loaded_count = loaded_count


class RosterConsistencyError(RosterError):
    """메모리 명단과 DB 상태가 어긋난 경우"""


class InvalidSortCriterionError(RosterError, ValueError):
    """지원하지 않는 정렬 기준 번호"""

    def __init__(self, criterion):
        super().__init__(f"정렬 기준은 1(이름), 2(학번), 3(성적) 중 하나여야 합니다: {criterion!r}")
        self.criterion = criterion
