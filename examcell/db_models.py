from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from examcell.database import Base


# Invigilation duty side

class ClassroomDB(Base):
    __tablename__ = "classrooms"

    id = Column(Integer, primary_key = True, index = True)
    name = Column(String(50), nullable = False)
    num_benches = Column(Integer, nullable = False)
    # doubles as the number of invigilators the room takes
    students_per_bench = Column(Integer, nullable = False)
    total_capacity = Column(Integer, nullable = False)

    allocations = relationship("AllocationDB", back_populates = "classroom", cascade = "all, delete")


class TeacherDB(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key = True, index = True)
    name = Column(String(100), nullable = False)
    teaches_sem_3 = Column(Boolean, nullable = False, default = False)
    teaches_sem_5 = Column(Boolean, nullable = False, default = False)
    division = Column(String(1), nullable = False)


class AllocationDB(Base):
    __tablename__ = "allocations"

    id = Column(Integer, primary_key = True, index = True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable = True)
    classroom_id = Column(Integer, ForeignKey("classrooms.id"), nullable = False)
    semester = Column(Integer, nullable = False)
    allocation_date = Column(DateTime, server_default = func.now())

    teacher = relationship("TeacherDB")
    classroom = relationship("ClassroomDB", back_populates = "allocations")


# Seating side, filled from the flat files

class SeatingRoomDB(Base):
    __tablename__ = "classroom_list_2"

    sequence_number = Column(Integer, primary_key = True)
    classroom_name = Column(String(50), unique = True, nullable = False)
    no_of_benches = Column(Integer, nullable = False)
    capacity = Column(Integer, nullable = True)


class StudentDB(Base):
    """5th semester roster."""
    __tablename__ = "student_list"

    rno = Column(Integer, primary_key = True)
    usn = Column(String(20), nullable = False)
    name = Column(String(100), nullable = False)


class ThirdSemStudentDB(Base):
    __tablename__ = "student_list_3rd"

    rno = Column(Integer, primary_key = True)
    usn = Column(String(20), nullable = False)
    name = Column(String(100), nullable = False)


class SeatArrangementDB(Base):
    __tablename__ = "seat_arrangement"

    id = Column(Integer, primary_key = True, autoincrement = True)
    classroom_name = Column(String(50), nullable = False)
    third_sem_roll_numbers = Column(String(50), nullable = False)
    fifth_sem_roll_numbers = Column(String(50), nullable = False)
    third_sem_paper_count = Column(Integer, nullable = True)
    fifth_sem_paper_count = Column(Integer, nullable = True)


# Exam records

class BookletDB(Base):
    __tablename__ = "booklets"

    booklet_id = Column(String(50), primary_key = True)
    roll_number = Column(Integer, nullable = False)
    division = Column(String(1), nullable = False)
    course = Column(String(100), nullable = False)
    semester = Column(String(2), nullable = False)
    isa_exam_number = Column(String(2), nullable = False)


class AbsenteeDB(Base):
    __tablename__ = "absentees"

    id = Column(Integer, primary_key = True, index = True)
    roll_number = Column(Integer, nullable = False)
    division = Column(String(1), nullable = False)
    course = Column(String(100), nullable = False)
    semester = Column(String(2), nullable = False)
    isa_exam_number = Column(String(2), nullable = False)
    status = Column(String(10), nullable = False, default = "Absent")


class DutyRosterDB(Base):
    __tablename__ = "duty_allocation"

    id = Column(Integer, primary_key = True, index = True)
    exam_type = Column(String(10), nullable = False)
    date = Column(String(20), nullable = False)
    session = Column(String(20), nullable = False)
    faculty_name = Column(String(100), nullable = False)
    classroom = Column(String(50), nullable = False)


class TimetableEntryDB(Base):
    __tablename__ = "timetable_summary"

    id = Column(Integer, primary_key = True, index = True)
    exam_type = Column(String(10), nullable = False)
    semester = Column(String(2), nullable = False)
    department = Column(String(100), nullable = True)
    date = Column(String(20), nullable = False)
    day = Column(String(20), nullable = True)
    start_time = Column(String(10), nullable = True)
    end_time = Column(String(10), nullable = True)
    course_name = Column(String(200), nullable = False)
    course_code = Column(String(20), nullable = True)


class UserDB(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key = True, index = True)
    username = Column(String(50), unique = True, nullable = False)
    password = Column(String(100), nullable = False)
    role = Column(String(20), nullable = False)


class FacultyDB(Base):
    __tablename__ = "faculty"

    id = Column(Integer, primary_key = True, index = True)
    name = Column(String(100), nullable = False)
    designation = Column(String(50), nullable = False)
