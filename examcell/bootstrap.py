import logging
from pathlib import Path

from sqlalchemy.orm import Session

from examcell import csv_loader
from examcell.database import Base, transaction
from examcell.db_models import (
    AllocationDB,
    ClassroomDB,
    SeatingRoomDB,
    StudentDB,
    TeacherDB,
    ThirdSemStudentDB,
)

logger = logging.getLogger(__name__)

# name, benches, invigilators per room
DEFAULT_CLASSROOMS = [
    ("CSC313", 40, 2),
    ("CLAB-1", 36, 2),
    ("CLAB-2", 38, 2),
    ("LAB-1", 37, 2),
    ("CLH209", 38, 2),
    ("CLH208", 22, 3),
    ("CLH310", 22, 3),
    ("CLH303", 36, 2),
    ("CLH204", 35, 2),
    ("CLH304", 34, 2),
    ("CLH210", 22, 3),
    ("CLH308", 36, 2),
    ("LAB-6", 34, 2),
    ("LAB-7", 34, 2),
]


def create_tables(bind):
    Base.metadata.create_all(bind = bind)


def seed_duty_classrooms(db: Session, classrooms=DEFAULT_CLASSROOMS) -> int:
    existing = {name for (name,) in db.query(ClassroomDB.name)}
    added = 0
    with transaction(db):
        for name, benches, per_bench in classrooms:
            if name in existing:
                continue
            db.add(ClassroomDB(
                name = name,
                num_benches = benches,
                students_per_bench = per_bench,
                total_capacity = benches * per_bench,
            ))
            added += 1
    logger.info("%d new duty classrooms inserted", added)
    return added


def load_teachers(db: Session, data_dir: Path) -> int:
    sem3 = csv_loader.read_teacher_list(data_dir / csv_loader.SEM3_TEACHER_FILE, 3)
    sem5 = csv_loader.read_teacher_list(data_dir / csv_loader.SEM5_TEACHER_FILE, 5)
    teachers = csv_loader.merge_teacher_lists(sem3, sem5)

    existing = {name for (name,) in db.query(TeacherDB.name)}
    new_teachers = [t for t in teachers if t["name"] not in existing]
    with transaction(db):
        db.add_all(TeacherDB(**t) for t in new_teachers)
    logger.info("%d new teachers inserted", len(new_teachers))
    return len(new_teachers)


def _replace_students(db: Session, model, students):
    if not students:
        logger.warning("No valid rows for %s, keeping existing data", model.__tablename__)
        return 0
    db.query(model).delete(synchronize_session = False)
    db.add_all(model(rno = s.rno, usn = s.usn, name = s.name) for s in students)
    return len(students)


def load_seating_data(db: Session, data_dir: Path) -> dict:
    """Reload seating rooms and both student rosters from the flat files."""
    rooms = csv_loader.read_classroom_list(data_dir / csv_loader.CLASSROOM_FILE)
    fifth = csv_loader.read_student_list(data_dir / csv_loader.FIFTH_SEM_FILE)
    third = csv_loader.read_student_list(data_dir / csv_loader.THIRD_SEM_FILE)

    counts = {"classrooms": 0, "fifth_sem_students": 0, "third_sem_students": 0}
    with transaction(db):
        if rooms:
            db.query(SeatingRoomDB).delete(synchronize_session = False)
            db.add_all(
                SeatingRoomDB(
                    sequence_number = r.sequence_number,
                    classroom_name = r.name,
                    no_of_benches = r.benches,
                    capacity = r.capacity,
                )
                for r in rooms
            )
            counts["classrooms"] = len(rooms)
        else:
            logger.warning("No valid classroom rows, keeping existing seating rooms")
        counts["fifth_sem_students"] = _replace_students(db, StudentDB, fifth)
        counts["third_sem_students"] = _replace_students(db, ThirdSemStudentDB, third)

    logger.info("Seating data loaded: %s", counts)
    return counts


def reset_allocations(db: Session) -> None:
    with transaction(db):
        db.query(AllocationDB).delete(synchronize_session = False)
    logger.info("Allocations cleared")


def initialize(db: Session, settings) -> None:
    data_dir = Path(settings.data_dir)
    seed_duty_classrooms(db)
    load_teachers(db, data_dir)
    if settings.reset_allocations_on_startup:
        reset_allocations(db)
    load_seating_data(db, data_dir)
