import logging
from pathlib import Path

import pandas as pd

from examcell.exceptions import DataFileError
from examcell.models import SeatingRoom, Student

logger = logging.getLogger(__name__)

CLASSROOM_FILE = "classroom_list.csv"
FIFTH_SEM_FILE = "student_list.csv"
THIRD_SEM_FILE = "student_list_3rd.csv"
SEM3_TEACHER_FILE = "teacher-list.csv"
SEM5_TEACHER_FILE = "teacher-list-sem-5.csv"

TEACHER_COLUMNS = ["name", "course", "division", "semester"]
STUDENT_SHEET_COLUMNS = {"rno", "usn", "name"}


def _require(path):
    path = Path(path)
    if not path.exists():
        raise DataFileError(f"Data file not found: {path.name}")
    return path


def _lines(path):
    with open(_require(path), encoding = "utf-8") as fh:
        return [line.strip() for line in fh if line.strip()]


def read_classroom_list(path):
    """Rows of `name benches capacity`; sequence follows the order of valid rows."""
    rooms = []
    for line in _lines(path):
        parts = line.split()
        if len(parts) < 3:
            logger.warning("Skipping invalid classroom row: %r", line)
            continue
        try:
            benches = int(parts[1])
            capacity = int(parts[2])
        except ValueError:
            logger.warning("Skipping classroom row with invalid numbers: %r", line)
            continue
        rooms.append(SeatingRoom(len(rooms) + 1, parts[0], benches, capacity))
    return rooms


def read_student_list(path):
    """Students from a `rno usn name...` text file or an .xlsx sheet."""
    path = _require(path)
    if path.suffix.lower() in (".xlsx", ".xls"):
        return student_import_excel(path)

    students = []
    for line in _lines(path):
        if line.startswith("data"):
            continue
        parts = line.split(None, 2)
        if len(parts) < 3:
            logger.warning("Skipping invalid student row: %r", line)
            continue
        rno, usn, name = parts
        try:
            rno = int(rno)
        except ValueError:
            logger.warning("Skipping student row with invalid roll number: %r", line)
            continue
        students.append(Student(rno = rno, usn = usn, name = name.rstrip(",").strip()))
    return students


def student_import_excel(file_path):
    df = pd.read_excel(file_path)

    missing = STUDENT_SHEET_COLUMNS - set(df.columns)
    if missing:
        raise DataFileError(f"Missing columns in {Path(file_path).name}: {sorted(missing)}")

    students = []
    for _, row in df.dropna(subset = ["rno"]).iterrows():
        students.append(
            Student(
                rno = int(row["rno"]),
                usn = str(row["usn"]),
                name = str(row["name"]).strip()
            )
        )

    return students


def read_teacher_list(path, semester):
    """Teacher file rows as dicts: name, course, division, semester."""
    df = pd.read_csv(
        _require(path),
        header = None,
        names = TEACHER_COLUMNS,
        usecols = range(len(TEACHER_COLUMNS)),
        dtype = str,
        skipinitialspace = True,
        skip_blank_lines = True,
    )
    df = df.dropna(subset = ["name", "division"])

    return [
        {
            "name": row["name"].strip(),
            "course": row["course"].strip() if isinstance(row["course"], str) else "",
            "division": row["division"].strip(),
            "semester": int(semester),
        }
        for _, row in df.iterrows()
    ]


def merge_teacher_lists(sem3_rows, sem5_rows):
    """One entry per teacher name; the first file a name appears in wins."""
    teachers = {}
    for row in sem3_rows:
        teachers.setdefault(row["name"], {
            "name": row["name"],
            "division": row["division"],
            "teaches_sem_3": True,
            "teaches_sem_5": False,
        })
    for row in sem5_rows:
        teachers.setdefault(row["name"], {
            "name": row["name"],
            "division": row["division"],
            "teaches_sem_3": False,
            "teaches_sem_5": True,
        })
    return list(teachers.values())
