import csv
import logging

from database.db import ConnectionProvider, init_db
from schemas.students import StudentCreate
from services.roster import RosterManager

logger = logging.getLogger(__name__)

CSV_PATH = "data/students.csv"  # ✅ 파일 경로 (sno,name,korean,english,math,science)

def import_students(roster: RosterManager, csv_path: str = CSV_PATH) -> int:
    """CSV의 각 행을 명단에 추가하고, 실제 반영된 건수를 반환"""
    applied = 0

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            student = StudentCreate(
                sno=row["sno"].strip(),                  # 학번
                name=row["name"].strip(),                # 학생 이름
                korean=int(row["korean"] or 0),          # 국어
                english=int(row["english"] or 0),        # 영어
                math=int(row["math"] or 0),              # 수학
                science=int(row["science"] or 0),        # 과학
            )
            if roster.insert(student).ok:
                applied += 1
            else:
                logger.warning(f"반영되지 않은 행: sno={student.sno}")

    return applied

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    count = import_students(RosterManager(ConnectionProvider()))
    print(f"✅ 학생 성적 CSV → DB 마이그레이션 완료 ({count}건)")
