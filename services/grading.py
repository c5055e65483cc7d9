"""
services/grading.py

점수 보정(0~100)과 합계/평균/등급 계산 규칙.
명단 로딩, 추가, 수정 시 모두 build_record()를 거쳐 파생 필드를 다시 계산합니다.
"""

from typing import Mapping, Union

from schemas.students import StudentCreate, StudentRecord

SCORE_MIN = 0
SCORE_MAX = 100
SUBJECTS = ("korean", "english", "math", "science")
SUBJECT_COUNT = 4

# 평균 하한(이상) → 등급, 높은 구간부터 검사
GRADE_THRESHOLDS = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)


def clamp_score(value: int) -> int:
    """0 미만은 0, 100 초과는 100으로 보정"""
    if value < SCORE_MIN:
        return SCORE_MIN
    if value > SCORE_MAX:
        return SCORE_MAX
    return value


def calc_total(korean: int, english: int, math: int, science: int) -> int:
    return korean + english + math + science


def calc_average(total: int) -> float:
    # 유효 과목 수가 아니라 고정 과목 수(4)로 나눔
    return total / float(SUBJECT_COUNT)


def calc_grade(average: float) -> str:
    for lower_bound, letter in GRADE_THRESHOLDS:
        if average >= lower_bound:
            return letter
    return "F"


def build_record(data: Union[StudentCreate, Mapping]) -> StudentRecord:
    """
    입력(스키마 또는 DB 행 매핑)을 보정된 점수와 파생 필드를 가진 StudentRecord로 변환
    """
    if isinstance(data, Mapping):
        raw = dict(data)
    else:
        raw = data.model_dump()

    scores = {subject: clamp_score(int(raw[subject])) for subject in SUBJECTS}
    total = calc_total(**scores)
    average = calc_average(total)

    return StudentRecord(
        sno=raw["sno"],
        name=raw["name"],
        **scores,
        total=total,
        average=average,
        grade=calc_grade(average),
    )
