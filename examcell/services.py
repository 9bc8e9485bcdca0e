"""Store-backed operations behind the allocation endpoints."""
import logging

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from examcell.allocator import compute_seating_arrangement, parse_roll_number_range
from examcell.database import transaction
from examcell.db_models import (
    AllocationDB,
    ClassroomDB,
    SeatArrangementDB,
    SeatingRoomDB,
    StudentDB,
    TeacherDB,
    ThirdSemStudentDB,
)
from examcell.duty_allocator import mixing_violation, normalize_semester, plan_division
from examcell.exceptions import (
    ConstraintViolation,
    EmptyResultError,
    NotFoundError,
    ValidationError,
)
from examcell.models import DutyRoom, SeatingRecord, SeatingRoom

logger = logging.getLogger(__name__)

NO_ALLOCATIONS_MESSAGE = (
    "No valid allocations could be created. Check semester distribution rules."
)


def _occupancy_query(db: Session):
    current = func.count(AllocationDB.id)
    sem3 = func.sum(case((TeacherDB.teaches_sem_3.is_(True), 1), else_=0))
    sem5 = func.sum(case((TeacherDB.teaches_sem_5.is_(True), 1), else_=0))
    query = (
        db.query(ClassroomDB, current, sem3, sem5)
        .outerjoin(AllocationDB, AllocationDB.classroom_id == ClassroomDB.id)
        .outerjoin(TeacherDB, AllocationDB.teacher_id == TeacherDB.id)
        .group_by(ClassroomDB.id)
    )
    return query, current


def _to_duty_room(row):
    classroom, current, sem3, sem5 = row
    return DutyRoom(
        room_id=classroom.id,
        name=classroom.name,
        students_per_bench=classroom.students_per_bench,
        current_teachers=current,
        sem3_count=sem3,
        sem5_count=sem5,
    )


def room_snapshots(db: Session, available_only=True, order_by_load=True) -> list[DutyRoom]:
    """Classrooms with their current occupant counts, read in one query."""
    query, current = _occupancy_query(db)
    if available_only:
        query = query.having(current < ClassroomDB.students_per_bench)
    if order_by_load:
        query = query.order_by(current, ClassroomDB.name)
    else:
        query = query.order_by(ClassroomDB.name)
    return [_to_duty_room(row) for row in query.all()]


def room_snapshot(db: Session, classroom_id: int) -> DutyRoom | None:
    query, _ = _occupancy_query(db)
    row = query.filter(ClassroomDB.id == classroom_id).first()
    return _to_duty_room(row) if row else None


def unallocated_teachers(db: Session, semester=None, division=None) -> list[TeacherDB]:
    """Teachers with no allocation row at all, by name."""
    query = (
        db.query(TeacherDB)
        .outerjoin(AllocationDB, AllocationDB.teacher_id == TeacherDB.id)
        .filter(AllocationDB.id.is_(None))
    )
    if semester is not None:
        flag = TeacherDB.teaches_sem_3 if normalize_semester(semester) == "3" else TeacherDB.teaches_sem_5
        query = query.filter(flag.is_(True))
    if division is not None:
        query = query.filter(TeacherDB.division == division)
    return query.order_by(TeacherDB.name).all()


def allocate_division(db: Session, semester, division) -> list[tuple[int, int]]:
    try:
        semester = normalize_semester(semester)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    if not division:
        raise ValidationError("Division is required")

    with transaction(db):
        rooms = room_snapshots(db)
        teachers = unallocated_teachers(db, semester=semester, division=division)
        pairings = plan_division(rooms, [t.id for t in teachers], semester)

        if not pairings:
            logger.info(
                "No allocations for semester %s division %s (%d rooms, %d teachers)",
                semester, division, len(rooms), len(teachers),
            )
            raise EmptyResultError(NO_ALLOCATIONS_MESSAGE)

        db.add_all(
            AllocationDB(teacher_id=teacher_id, classroom_id=classroom_id, semester=int(semester))
            for teacher_id, classroom_id in pairings
        )

    logger.info("Created %d allocations for semester %s division %s", len(pairings), semester, division)
    return pairings


def teacher_semester(teacher: TeacherDB) -> str:
    return "3" if teacher.teaches_sem_3 else "5"


def manual_allocate(db: Session, teacher_id: int, classroom_id: int) -> AllocationDB:
    if not teacher_id or not classroom_id:
        raise ValidationError("Teacher ID and Classroom ID are required")

    with transaction(db):
        teacher = db.get(TeacherDB, teacher_id)
        if teacher is None:
            raise NotFoundError("Teacher not found")

        already_allocated = (
            db.query(AllocationDB.id).filter(AllocationDB.teacher_id == teacher.id).first()
        )
        if already_allocated:
            raise ConstraintViolation("Teacher is already allocated to a classroom")

        room = room_snapshot(db, classroom_id)
        if room is None:
            raise NotFoundError("Classroom not found")

        if room.is_full:
            raise ConstraintViolation("Classroom is already full")

        for flag, semester in ((teacher.teaches_sem_3, "3"), (teacher.teaches_sem_5, "5")):
            if not flag:
                continue
            violation = mixing_violation(room, semester)
            if violation:
                raise ConstraintViolation(violation)

        allocation = AllocationDB(
            teacher_id=teacher.id,
            classroom_id=room.room_id,
            semester=int(teacher_semester(teacher)),
        )
        db.add(allocation)

    logger.info("Manually allocated teacher %s to classroom %s", teacher_id, classroom_id)
    return allocation


def clear_classroom_allocations(db: Session, classroom_id: int) -> int:
    with transaction(db):
        deleted = (
            db.query(AllocationDB)
            .filter(AllocationDB.classroom_id == classroom_id)
            .delete(synchronize_session=False)
        )
    logger.info("Deleted %d allocations for classroom %s", deleted, classroom_id)
    return deleted


def clear_all_allocations(db: Session) -> int:
    with transaction(db):
        deleted = db.query(AllocationDB).delete(synchronize_session=False)
    return deleted


def allocation_overview(db: Session) -> dict:
    rows = (
        db.query(ClassroomDB, TeacherDB.name)
        .outerjoin(AllocationDB, AllocationDB.classroom_id == ClassroomDB.id)
        .outerjoin(TeacherDB, AllocationDB.teacher_id == TeacherDB.id)
        .order_by(ClassroomDB.name, AllocationDB.id)
        .all()
    )

    grouped = {}
    for classroom, teacher_name in rows:
        entry = grouped.setdefault(classroom.id, (classroom, []))
        if teacher_name:
            entry[1].append(teacher_name)

    allocated, unallocated = [], []
    for classroom, names in grouped.values():
        if names:
            allocated.append({
                "classroom_id": classroom.id,
                "classroom_name": classroom.name,
                "max_teachers": classroom.students_per_bench,
                "teacher_names": names,
                "current_teachers": len(names),
                "students_per_bench": classroom.students_per_bench,
            })
        else:
            unallocated.append({
                "classroom_id": classroom.id,
                "classroom_name": classroom.name,
                "students_per_bench": classroom.students_per_bench,
            })

    return {"allocated": allocated, "unallocated": unallocated}


def question_paper_counts(db: Session, classroom_id: int) -> dict:
    classroom = db.get(ClassroomDB, classroom_id)
    if classroom is None:
        raise NotFoundError("Classroom not found")
    room = room_snapshot(db, classroom_id)

    papers = {}
    if room.sem3_count > 0:
        papers["sem3"] = classroom.num_benches * room.sem3_count
    if room.sem5_count > 0:
        papers["sem5"] = classroom.num_benches * room.sem5_count

    return {"classroom_name": classroom.name, "papers": papers}


# Seating

def seating_inputs(db: Session):
    rooms = [
        SeatingRoom(r.sequence_number, r.classroom_name, r.no_of_benches, r.capacity)
        for r in db.query(SeatingRoomDB).order_by(SeatingRoomDB.sequence_number).all()
    ]
    third = [rno for (rno,) in db.query(ThirdSemStudentDB.rno).order_by(ThirdSemStudentDB.rno)]
    fifth = [rno for (rno,) in db.query(StudentDB.rno).order_by(StudentDB.rno)]
    return rooms, third, fifth


def refresh_seating_arrangement(db: Session) -> list[SeatingRecord]:
    """Recompute the seating plan and replace the stored snapshot with it."""
    with transaction(db):
        rooms, third, fifth = seating_inputs(db)
        arrangement = compute_seating_arrangement(rooms, third, fifth)

        db.query(SeatArrangementDB).delete(synchronize_session=False)
        db.add_all(
            SeatArrangementDB(
                classroom_name=record.classroom_name,
                third_sem_roll_numbers=record.third_sem_roll_numbers,
                fifth_sem_roll_numbers=record.fifth_sem_roll_numbers,
                third_sem_paper_count=record.third_sem_paper_count,
                fifth_sem_paper_count=record.fifth_sem_paper_count,
            )
            for record in arrangement
        )

    logger.info(
        "Seating arrangement rebuilt: %d rooms, %d third sem, %d fifth sem students",
        len(rooms), len(third), len(fifth),
    )
    return arrangement


def stored_seating_arrangement(db: Session) -> list[SeatArrangementDB]:
    return db.query(SeatArrangementDB).order_by(SeatArrangementDB.id).all()


def seat_lookup(db: Session, rno: int, semester) -> dict:
    try:
        semester = normalize_semester(semester)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    for row in stored_seating_arrangement(db):
        value = row.third_sem_roll_numbers if semester == "3" else row.fifth_sem_roll_numbers
        bounds = parse_roll_number_range(value)
        if bounds and bounds[0] <= rno <= bounds[1]:
            return {"rno": rno, "semester": semester, "classroom_name": row.classroom_name}

    raise NotFoundError("Seat not allocated yet")


def seating_capacity(db: Session) -> dict:
    total_benches = db.query(func.coalesce(func.sum(SeatingRoomDB.no_of_benches), 0)).scalar()
    third = db.query(ThirdSemStudentDB).count()
    fifth = db.query(StudentDB).count()

    return {
        "total_classrooms": db.query(SeatingRoomDB).count(),
        "total_benches": total_benches,
        "third_sem_students": third,
        "fifth_sem_students": fifth,
        "third_sem_shortage": max(0, third - total_benches),
        "fifth_sem_shortage": max(0, fifth - total_benches),
    }
