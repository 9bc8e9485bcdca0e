from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from examcell.duty_allocator import normalize_semester


def _text(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    success: bool = True
    message: str


# Duty allocation

class AllocateDivisionRequest(BaseModel):
    semester: str
    division: str = Field(min_length=1, max_length=1)

    @field_validator("semester", mode="before")
    @classmethod
    def validate_semester(cls, value):
        return normalize_semester(value)


class ManualAllocateRequest(CamelModel):
    teacher_id: int = Field(alias="teacherId", ge=1)
    classroom_id: int = Field(alias="classroomId", ge=1)


class ClassroomOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    num_benches: int
    students_per_bench: int
    total_capacity: int


class TeacherOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    division: str
    teaches_sem_3: bool
    teaches_sem_5: bool


class AvailableClassroomOut(BaseModel):
    id: int
    name: str
    students_per_bench: int
    current_teachers: int
    sem3_count: int
    sem5_count: int


class TeacherDetailOut(BaseModel):
    name: str
    course: str
    division: str
    semester: int


# Seating

class SeatingRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    classroom_name: str
    third_sem_roll_numbers: str
    fifth_sem_roll_numbers: str
    third_sem_paper_count: int | None = None
    fifth_sem_paper_count: int | None = None


class SeatingRoomOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sequence_number: int
    classroom_name: str
    no_of_benches: int
    capacity: int | None = None


class AddSeatingRoomRequest(BaseModel):
    classroom_name: str = Field(min_length=1, max_length=50)
    no_of_benches: int = Field(ge=0)


class DeleteSeatingRoomRequest(BaseModel):
    classroom_name: str = Field(min_length=1)


class UpdateBenchesRequest(BaseModel):
    classroom_name: str = Field(min_length=1)
    new_no_of_benches: int = Field(ge=1)


class SeatLookupOut(BaseModel):
    rno: int
    semester: str
    classroom_name: str


# Exam records

class BookletAssignRequest(CamelModel):
    semester: str = Field(min_length=1)
    division: str = Field(min_length=1, max_length=1)
    course: str = Field(min_length=1)
    isa_exam_number: str = Field(alias="isaExamNumber", min_length=1)
    start_roll: int = Field(alias="startRoll", ge=1)
    end_roll: int = Field(alias="endRoll", ge=1)

    coerce_text = field_validator("semester", "isa_exam_number", mode="before")(_text)


class BookletOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    booklet_id: str
    roll_number: int
    division: str
    course: str
    semester: str
    isa_exam_number: str


class AttendanceRecord(CamelModel):
    roll_number: int = Field(alias="RollNumber")
    division: str = Field(alias="Division")
    course: str = Field(alias="Course")
    semester: str = Field(alias="Semester")
    isa_exam_number: str = Field(alias="ISAExamNumber")
    status: str = Field(alias="Status")

    coerce_text = field_validator("semester", "isa_exam_number", mode="before")(_text)


class MarkAttendanceRequest(CamelModel):
    attendance_data: list[AttendanceRecord] = Field(alias="attendanceData")


class AbsenteeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    roll_number: int
    division: str
    course: str
    semester: str
    isa_exam_number: str
    status: str


class TimetableEntryIn(CamelModel):
    department: str | None = None
    date: str
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")
    course_name: str = Field(alias="courseName")
    course_code: str | None = Field(default=None, alias="courseCode")


class TimetableSaveRequest(CamelModel):
    exam_type: str = Field(alias="examType", min_length=1)
    semester: str = Field(min_length=1)
    entries: list[TimetableEntryIn]

    coerce_text = field_validator("semester", mode="before")(_text)


class DutyRosterEntryIn(BaseModel):
    date: str
    session: str
    name: str
    classroom: str


class DutyRosterSaveRequest(CamelModel):
    exam_type: Literal["ISA1", "ISA2", "ESA"] = Field(alias="examType")
    allocations: list[DutyRosterEntryIn] = Field(min_length=1)


class DutyRosterOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    exam_type: str
    date: str
    session: str
    faculty_name: str
    classroom: str


class LoginRequest(BaseModel):
    username: str
    password: str
    role: str


class FacultyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    designation: str
