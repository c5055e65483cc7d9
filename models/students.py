from sqlalchemy import Column, Integer, String
from database.db import Base

class Student(Base):
    __tablename__ = "student"  # 학생 성적 테이블

    sno = Column(String(20), primary_key=True)                 # 학번 (Primary Key, 변경 불가)
    name = Column(String(100), nullable=False)                 # 학생 이름
    korean = Column(Integer, nullable=False, default=0)        # 국어 점수
    english = Column(Integer, nullable=False, default=0)       # 영어 점수
    math = Column(Integer, nullable=False, default=0)          # 수학 점수
    science = Column(Integer, nullable=False, default=0)       # 과학 점수
