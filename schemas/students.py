from pydantic import BaseModel, ConfigDict, Field

# ✅ 수정용 (PUT) - 학번은 경로에서 받음
class StudentUpdate(BaseModel):
    name: str                                # 학생 이름
    korean: int = 0                          # 국어 (범위 밖 값은 0~100으로 보정됨)
    english: int = 0                         # 영어
    math: int = 0                            # 수학
    science: int = 0                         # 과학

# ✅ 입력용 (POST)
class StudentCreate(StudentUpdate):
    sno: str = Field(..., min_length=1, max_length=20)   # 학번

# ✅ 전체 출력용 (GET, 상세조회 등) - 합계/평균/등급 포함
class StudentRecord(StudentCreate):
    total: int = 0                           # 네 과목 합계
    average: float = 0.0                     # 평균 (합계 / 4.0)
    grade: str = "F"                         # 등급 (A~F)

    model_config = ConfigDict(from_attributes=True)
