import pytest
from sqlalchemy.exc import OperationalError

from conftest import add_classroom, add_teacher
from examcell.db_models import AllocationDB, DutyRosterDB


@pytest.fixture()
def failing_commit(db_session, monkeypatch):
    def commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", commit)


def test_batch_allocation_rolls_back_when_commit_fails(client, db_session, request):
    add_classroom(db_session, "CLH209", 2)
    add_classroom(db_session, "CLH208", 3)
    add_teacher(db_session, "Anita", sem3=True)
    add_teacher(db_session, "Bharat", sem3=True)
    request.getfixturevalue("failing_commit")

    response = client.post("/api/allocate-division", json={"semester": "3", "division": "A"})

    assert response.status_code == 500
    assert response.json() == {"error": "Database operation failed"}
    assert db_session.query(AllocationDB).count() == 0


def test_duty_roster_save_rolls_back_delete_and_inserts(client, db_session, request):
    db_session.add(DutyRosterDB(
        exam_type="ISA1", date="2024-10-01", session="FN", faculty_name="Anita", classroom="CLH208",
    ))
    db_session.commit()
    request.getfixturevalue("failing_commit")

    response = client.post("/api/duty-allocation/save", json={
        "examType": "ISA1",
        "allocations": [
            {"date": "2024-10-01", "session": "AN", "name": "Bharat", "classroom": "CLH209"},
            {"date": "2024-10-02", "session": "FN", "name": "Chaitra", "classroom": "CLH210"},
        ],
    })

    assert response.status_code == 500
    assert response.json() == {"error": "Database operation failed"}
    roster = db_session.query(DutyRosterDB).all()
    assert [(r.date, r.faculty_name) for r in roster] == [("2024-10-01", "Anita")]


def test_duty_roster_clear_rolls_back_when_commit_fails(client, db_session, request):
    db_session.add(DutyRosterDB(
        exam_type="ESA", date="2024-12-01", session="FN", faculty_name="Anita", classroom="CLH208",
    ))
    db_session.commit()
    request.getfixturevalue("failing_commit")

    response = client.delete("/api/duty-allocation/clear")

    assert response.status_code == 500
    assert db_session.query(DutyRosterDB).count() == 1
