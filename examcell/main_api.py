import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from examcell import bootstrap, csv_loader, services
from examcell.config import get_settings
from examcell.database import SessionLocal, engine, get_db, transaction
from examcell.db_models import ClassroomDB, SeatingRoomDB, TeacherDB
from examcell.duty_allocator import normalize_semester
from examcell.exceptions import AppError, NotFoundError, ValidationError
from examcell.exports import export_seating_excel, export_seating_pdf
from examcell.records_api import router as records_router
from examcell.schemas import (
    AddSeatingRoomRequest,
    AllocateDivisionRequest,
    AvailableClassroomOut,
    ClassroomOut,
    DeleteSeatingRoomRequest,
    ManualAllocateRequest,
    MessageResponse,
    SeatingRecordOut,
    SeatingRoomOut,
    SeatLookupOut,
    TeacherDetailOut,
    TeacherOut,
    UpdateBenchesRequest,
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    bootstrap.create_tables(engine)
    if settings.seed_on_startup:
        db = SessionLocal()
        try:
            bootstrap.initialize(db, settings)
        finally:
            db.close()
    yield


app = FastAPI(title=settings.project_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Database operation failed"})


@app.get("/")
def root():
    return {"message": "Exam Cell API is running !"}


router = APIRouter()


# Invigilation duty

@router.get("/classrooms", response_model=list[ClassroomOut])
def get_classrooms(db: Session = Depends(get_db)):
    return db.query(ClassroomDB).order_by(ClassroomDB.id).all()


@router.get("/teachers/{semester}", response_model=list[TeacherOut])
def get_teachers(semester: str, db: Session = Depends(get_db)):
    try:
        semester = normalize_semester(semester)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    flag = TeacherDB.teaches_sem_3 if semester == "3" else TeacherDB.teaches_sem_5
    return db.query(TeacherDB).filter(flag.is_(True)).order_by(TeacherDB.name).all()


@router.post("/allocate-division", response_model=MessageResponse)
def allocate_division(req: AllocateDivisionRequest, db: Session = Depends(get_db)):
    pairings = services.allocate_division(db, req.semester, req.division)
    return MessageResponse(message=f"Created {len(pairings)} allocations")


@router.post("/manual-allocate", response_model=MessageResponse)
def manual_allocate(req: ManualAllocateRequest, db: Session = Depends(get_db)):
    """Put one teacher in one classroom.

    Answers 404 for an unknown teacher or classroom. Answers 400 when the room
    is full, the semester-mixing limit is hit, or the teacher already has a
    duty ("Teacher is already allocated to a classroom"), so every teacher
    holds at most one allocation.
    """
    services.manual_allocate(db, req.teacher_id, req.classroom_id)
    return MessageResponse(message="Teacher allocated successfully")


@router.get("/allocations")
def get_allocations(db: Session = Depends(get_db)):
    return services.allocation_overview(db)


@router.delete("/allocations/classroom/{classroom_id}", response_model=MessageResponse)
def delete_classroom_allocations(classroom_id: int, db: Session = Depends(get_db)):
    services.clear_classroom_allocations(db, classroom_id)
    return MessageResponse(message="Allocations deleted successfully")


@router.delete("/allocations", response_model=MessageResponse)
def delete_all_allocations(db: Session = Depends(get_db)):
    deleted = services.clear_all_allocations(db)
    return MessageResponse(message=f"Deleted {deleted} allocations")


@router.get("/teachers-info")
def get_teachers_info(db: Session = Depends(get_db)):
    teachers = db.query(TeacherDB).order_by(TeacherDB.id).all()
    return [
        {
            "id": t.id,
            "name": t.name,
            "teaches_sem_3": t.teaches_sem_3,
            "teaches_sem_5": t.teaches_sem_5,
        }
        for t in teachers
    ]


@router.get("/teachers-details", response_model=list[TeacherDetailOut])
def get_teachers_details():
    data_dir = settings.data_dir
    sem3 = csv_loader.read_teacher_list(data_dir / csv_loader.SEM3_TEACHER_FILE, 3)
    sem5 = csv_loader.read_teacher_list(data_dir / csv_loader.SEM5_TEACHER_FILE, 5)
    logger.info("Teacher details loaded: %d sem 3, %d sem 5", len(sem3), len(sem5))
    return sem3 + sem5


@router.get("/unallocated-teachers", response_model=list[TeacherOut])
def get_unallocated_teachers(db: Session = Depends(get_db)):
    return services.unallocated_teachers(db)


@router.get("/available-classrooms", response_model=list[AvailableClassroomOut])
def get_available_classrooms(db: Session = Depends(get_db)):
    return [
        AvailableClassroomOut(
            id=room.room_id,
            name=room.name,
            students_per_bench=room.students_per_bench,
            current_teachers=room.current_teachers,
            sem3_count=room.sem3_count,
            sem5_count=room.sem5_count,
        )
        for room in services.room_snapshots(db, order_by_load=False)
    ]


@router.get("/question-papers/{classroom_id}")
def get_question_papers(classroom_id: int, db: Session = Depends(get_db)):
    return services.question_paper_counts(db, classroom_id)


# Seating arrangement

seating_router = APIRouter()


@seating_router.get(
    "/seating-arrangement",
    response_model=list[SeatingRecordOut],
    response_model_exclude_none=True,
)
def get_seating_arrangement(db: Session = Depends(get_db)):
    return [record.as_dict() for record in services.refresh_seating_arrangement(db)]


@seating_router.get("/classroom-list", response_model=list[SeatingRoomOut])
def get_classroom_list(db: Session = Depends(get_db)):
    return db.query(SeatingRoomDB).order_by(SeatingRoomDB.sequence_number).all()


@seating_router.post("/add-classroom", response_model=MessageResponse)
def add_classroom(req: AddSeatingRoomRequest, db: Session = Depends(get_db)):
    existing = db.query(SeatingRoomDB).filter(SeatingRoomDB.classroom_name == req.classroom_name).first()
    if existing:
        raise ValidationError("Classroom with this name already exists.")

    last = db.query(func.max(SeatingRoomDB.sequence_number)).scalar()
    with transaction(db):
        db.add(SeatingRoomDB(
            sequence_number=(last or 0) + 1,
            classroom_name=req.classroom_name,
            no_of_benches=req.no_of_benches,
        ))

    return MessageResponse(message="Classroom added successfully!")


def _seating_room_or_404(db, classroom_name):
    room = db.query(SeatingRoomDB).filter(SeatingRoomDB.classroom_name == classroom_name).first()
    if room is None:
        raise NotFoundError("Classroom not found.")
    return room


@seating_router.post("/delete-classroom", response_model=MessageResponse)
def delete_classroom(req: DeleteSeatingRoomRequest, db: Session = Depends(get_db)):
    room = _seating_room_or_404(db, req.classroom_name)
    with transaction(db):
        db.delete(room)
    return MessageResponse(message="Classroom deleted successfully!")


@seating_router.put("/update-benches", response_model=MessageResponse)
def update_benches(req: UpdateBenchesRequest, db: Session = Depends(get_db)):
    room = _seating_room_or_404(db, req.classroom_name)
    with transaction(db):
        room.no_of_benches = req.new_no_of_benches
    return MessageResponse(message="Number of benches updated successfully!")


@seating_router.get("/seating-capacity")
def seating_capacity(db: Session = Depends(get_db)):
    return services.seating_capacity(db)


@seating_router.get("/seat-lookup", response_model=SeatLookupOut)
def seat_lookup(rno: int, semester: str, db: Session = Depends(get_db)):
    return services.seat_lookup(db, rno, semester)


def _stored_or_404(db):
    records = services.stored_seating_arrangement(db)
    if not records:
        raise NotFoundError("No seating arrangement found. Run /seating-arrangement first.")
    return records


@seating_router.get("/export/seating-arrangement/excel")
def export_seating_arrangement_excel(db: Session = Depends(get_db)):
    file_path = export_seating_excel(_stored_or_404(db), settings.export_dir)
    return FileResponse(
        path=str(file_path),
        filename=file_path.name,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )


@seating_router.get("/export/seating-arrangement/pdf")
def export_seating_arrangement_pdf(db: Session = Depends(get_db)):
    file_path = export_seating_pdf(_stored_or_404(db), settings.export_dir)
    return FileResponse(
        path=str(file_path),
        filename=file_path.name,
        media_type="application/pdf"
    )


@seating_router.post("/data/reload")
def reload_data(db: Session = Depends(get_db)):
    counts = bootstrap.load_seating_data(db, settings.data_dir)
    return {"success": True, "message": "All CSV data loaded successfully", **counts}


app.include_router(router, prefix=settings.api_prefix)
app.include_router(seating_router, prefix=settings.seating_prefix)
app.include_router(records_router, prefix=settings.api_prefix)
