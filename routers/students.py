from fastapi import APIRouter, Depends, Path, Query, Request

from schemas.students import StudentCreate, StudentUpdate
from services.roster import RosterManager

router = APIRouter(prefix="/students", tags=["학생 성적"])


def get_roster(request: Request) -> RosterManager:
    """프로세스당 하나인 명단 관리자 (main.py에서 app.state에 등록)"""
    return request.app.state.roster


def _not_found(message: str):
    return {
        "success": False,
        "error": {"code": 404, "message": message}
    }


# ==========================================================
# [1단계] 정적 라우터 (전체 조회/재로딩)
# ==========================================================

# ✅ [READ] 전체 학생 조회 (1: 이름순, 2: 학번순, 3: 성적순)
@router.get("/")
def read_students(sort: int = Query(2, description="1: 이름순, 2: 학번순, 3: 성적순"), roster: RosterManager = Depends(get_roster)):
    records = roster.total_search(sort)
    return {
        "success": True,
        "data": [r.model_dump() for r in records],
        "message": f"전체 학생 {len(records)}명 조회 완료"
    }


# ✅ [RELOAD] DB에서 명단 다시 읽기
@router.post("/reload")
def reload_students(roster: RosterManager = Depends(get_roster)):
    count = roster.reload()
    return {
        "success": True,
        "data": {"loaded": count, "state": roster.state.value},
        "message": "학생 명단을 다시 불러왔습니다"
    }


# ==========================================================
# [2단계] CRUD 라우터
# ==========================================================

# ✅ [CREATE] 학생 추가
@router.post("/")
def create_student(student: StudentCreate, roster: RosterManager = Depends(get_roster)):
    result = roster.insert(student)
    if not result.ok:
        return _not_found(f"학생 {student.sno} 추가가 반영되지 않았습니다")
    return {
        "success": True,
        "data": result.record.model_dump(),
        "message": "학생 정보가 성공적으로 추가되었습니다"
    }


# ✅ [READ] 학번으로 상세 조회
@router.get("/{sno}")
def read_student(sno: str = Path(..., max_length=20), roster: RosterManager = Depends(get_roster)):
    record = roster.search(sno)
    if record is None:
        return _not_found("학생 정보를 찾을 수 없습니다")
    return {
        "success": True,
        "data": record.model_dump(),
        "message": "학생 상세 정보 조회 성공"
    }


# ✅ [UPDATE] 학생 정보 수정
@router.put("/{sno}")
def update_student(updated: StudentUpdate, sno: str = Path(..., max_length=20), roster: RosterManager = Depends(get_roster)):
    result = roster.update(StudentCreate(sno=sno, **updated.model_dump()))
    if not result.ok:
        return _not_found("학생 정보를 찾을 수 없습니다")
    return {
        "success": True,
        "data": result.record.model_dump(),
        "message": "학생 정보가 성공적으로 수정되었습니다"
    }


# ✅ [DELETE] 학생 삭제
@router.delete("/{sno}")
def delete_student(sno: str = Path(..., max_length=20), roster: RosterManager = Depends(get_roster)):
    result = roster.delete(sno)
    if not result.ok:
        return _not_found("학생 정보를 찾을 수 없습니다")
    return {
        "success": True,
        "data": {"sno": sno},
        "message": "학생 정보가 성공적으로 삭제되었습니다"
    }
