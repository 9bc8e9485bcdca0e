"""Exam records: answer booklets, absentees, timetable, duty roster, login."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from examcell.database import get_db, transaction
from examcell.db_models import (
    AbsenteeDB,
    BookletDB,
    DutyRosterDB,
    FacultyDB,
    TimetableEntryDB,
    UserDB,
)
from examcell.exceptions import ValidationError
from examcell.schemas import (
    AbsenteeOut,
    BookletAssignRequest,
    BookletOut,
    DutyRosterOut,
    DutyRosterSaveRequest,
    FacultyOut,
    LoginRequest,
    MarkAttendanceRequest,
    MessageResponse,
    TimetableSaveRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ABSENT = "Absent"
INVIGILATOR_DESIGNATIONS = ("Assistant Professor", "Assistant Professor (P)", "T.A")


def booklet_id(isa_exam_number, division, roll):
    return f"ISA-M-{isa_exam_number}-{division}-{roll:03d}"


@router.post("/booklets/assign")
def assign_booklets(req: BookletAssignRequest, db: Session = Depends(get_db)):
    booklets = [
        BookletDB(
            booklet_id=booklet_id(req.isa_exam_number, req.division, roll),
            roll_number=roll,
            division=req.division,
            course=req.course,
            semester=req.semester,
            isa_exam_number=req.isa_exam_number,
        )
        for roll in range(req.start_roll, req.end_roll + 1)
    ]
    if not booklets:
        raise ValidationError("No valid booklets to assign")

    # each assignment replaces the previous booklet set
    with transaction(db):
        db.query(BookletDB).delete(synchronize_session=False)
        db.add_all(booklets)

    logger.info("Assigned %d booklets for division %s", len(booklets), req.division)
    return {"success": True, "message": "Booklets assigned successfully", "count": len(booklets)}


@router.get("/booklets", response_model=list[BookletOut])
def get_booklets(
    semester: str | None = None,
    division: str | None = None,
    course: str | None = None,
    isa_exam_number: str | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(BookletDB)
    if semester:
        query = query.filter(BookletDB.semester == semester)
    if division:
        query = query.filter(BookletDB.division == division)
    if course:
        query = query.filter(BookletDB.course == course)
    if isa_exam_number:
        query = query.filter(BookletDB.isa_exam_number == isa_exam_number)
    return query.order_by(BookletDB.roll_number).all()


@router.post("/absentees/mark", response_model=MessageResponse)
def mark_attendance(req: MarkAttendanceRequest, db: Session = Depends(get_db)):
    with transaction(db):
        for record in req.attendance_data:
            if record.status != ABSENT:
                continue
            db.add(AbsenteeDB(
                roll_number=record.roll_number,
                division=record.division,
                course=record.course,
                semester=record.semester,
                isa_exam_number=record.isa_exam_number,
                status=record.status,
            ))
    return MessageResponse(message="Attendance marked successfully")


def _absentee_query(db, semester=None, division=None, course=None):
    query = db.query(AbsenteeDB).filter(AbsenteeDB.status == ABSENT)
    if semester:
        query = query.filter(AbsenteeDB.semester == semester)
    if division:
        query = query.filter(AbsenteeDB.division == division)
    if course:
        query = query.filter(AbsenteeDB.course == course)
    return query


@router.get("/absentees", response_model=list[AbsenteeOut])
def get_absentees(
    semester: str | None = None,
    division: str | None = None,
    course: str | None = None,
    db: Session = Depends(get_db),
):
    return _absentee_query(db, semester, division, course).order_by(AbsenteeDB.id).all()


@router.get("/timetable/courses/{semester}")
def get_courses_with_absentees(semester: str, db: Session = Depends(get_db)):
    rows = (
        _absentee_query(db, semester=semester)
        .with_entities(AbsenteeDB.course)
        .distinct()
        .order_by(AbsenteeDB.course)
        .all()
    )
    return [{"Course": course} for (course,) in rows]


@router.post("/timetable/save", response_model=MessageResponse)
def save_timetable(req: TimetableSaveRequest, db: Session = Depends(get_db)):
    with transaction(db):
        db.add_all(
            TimetableEntryDB(
                exam_type=req.exam_type,
                semester=req.semester,
                department=entry.department,
                date=entry.date,
                day="",
                start_time=entry.start_time,
                end_time=entry.end_time,
                course_name=entry.course_name,
                course_code=entry.course_code,
            )
            for entry in req.entries
        )
    return MessageResponse(message="Timetable saved successfully")


@router.post("/duty-allocation/save", response_model=MessageResponse)
def save_duty_allocation(req: DutyRosterSaveRequest, db: Session = Depends(get_db)):
    dates = sorted({a.date for a in req.allocations})

    with transaction(db):
        (
            db.query(DutyRosterDB)
            .filter(DutyRosterDB.exam_type == req.exam_type, DutyRosterDB.date.in_(dates))
            .delete(synchronize_session=False)
        )
        db.add_all(
            DutyRosterDB(
                exam_type=req.exam_type,
                date=a.date,
                session=a.session,
                faculty_name=a.name,
                classroom=a.classroom,
            )
            for a in req.allocations
        )

    logger.info("Saved %d %s duty allocations over %d dates", len(req.allocations), req.exam_type, len(dates))
    return MessageResponse(message="Duty allocations saved successfully")


@router.get("/duty-allocation", response_model=list[DutyRosterOut])
def get_duty_allocation(exam_type: str | None = None, db: Session = Depends(get_db)):
    query = db.query(DutyRosterDB)
    if exam_type:
        query = query.filter(DutyRosterDB.exam_type == exam_type)
    return query.order_by(DutyRosterDB.date, DutyRosterDB.session, DutyRosterDB.id).all()


@router.delete("/duty-allocation/clear", response_model=MessageResponse)
def clear_duty_allocation(db: Session = Depends(get_db)):
    with transaction(db):
        db.query(DutyRosterDB).delete(synchronize_session=False)
    return MessageResponse(message="Duty allocations cleared successfully")


@router.post("/login")
def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = (
        db.query(UserDB)
        .filter(
            UserDB.username == req.username,
            UserDB.password == req.password,
            UserDB.role == req.role,
        )
        .first()
    )
    if user is None:
        return JSONResponse(status_code=401, content={"success": False, "message": "Invalid credentials"})
    return {"success": True, "role": user.role}


@router.get("/faculty", response_model=list[FacultyOut])
def get_faculty(db: Session = Depends(get_db)):
    return (
        db.query(FacultyDB)
        .filter(FacultyDB.designation.in_(INVIGILATOR_DESIGNATIONS))
        .order_by(FacultyDB.name)
        .all()
    )
