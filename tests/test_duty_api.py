from conftest import add_classroom, add_teacher
from examcell.db_models import AllocationDB


def occupants(db, classroom_id):
    return db.query(AllocationDB).filter(AllocationDB.classroom_id == classroom_id).all()


def test_allocate_division_fills_emptiest_rooms_first(client, db_session):
    r1 = add_classroom(db_session, "CLH209", 2)
    r2 = add_classroom(db_session, "CLH208", 3)
    add_teacher(db_session, "Bharat", sem3=True)
    add_teacher(db_session, "Anita", sem3=True)
    add_teacher(db_session, "Chaitra", sem3=True)

    response = client.post("/api/allocate-division", json={"semester": "3", "division": "A"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Created 2 allocations"}

    # one teacher per room per call; rooms ordered by name on ties
    assert [a.teacher.name for a in occupants(db_session, r2.id)] == ["Anita"]
    assert [a.teacher.name for a in occupants(db_session, r1.id)] == ["Bharat"]
    assert all(a.semester == 3 for a in db_session.query(AllocationDB))


def test_allocate_division_respects_semester_mixing(client, db_session):
    two = add_classroom(db_session, "CLH209", 2)
    three = add_classroom(db_session, "CLH208", 3)
    for name in ("T1", "T2", "T3", "T4"):
        add_teacher(db_session, name, sem3=True)

    for _ in range(4):
        client.post("/api/allocate-division", json={"semester": "3", "division": "A"})

    assert len(occupants(db_session, two.id)) == 1
    assert len(occupants(db_session, three.id)) == 2

    response = client.post("/api/allocate-division", json={"semester": "3", "division": "A"})
    assert response.status_code == 400
    assert response.json()["error"].startswith("No valid allocations could be created")


def test_allocate_division_skips_teachers_already_allocated(client, db_session):
    add_classroom(db_session, "CLH209", 2)
    add_classroom(db_session, "CLH303", 2)
    add_teacher(db_session, "Anita", sem3=True)

    assert client.post("/api/allocate-division", json={"semester": "3", "division": "A"}).status_code == 200
    response = client.post("/api/allocate-division", json={"semester": "3", "division": "A"})

    assert response.status_code == 400
    assert db_session.query(AllocationDB).count() == 1


def test_allocate_division_filters_by_division_and_semester(client, db_session):
    add_classroom(db_session, "CLH209", 2)
    add_teacher(db_session, "Other division", division="B", sem3=True)
    add_teacher(db_session, "Other semester", sem5=True)

    response = client.post("/api/allocate-division", json={"semester": "3", "division": "A"})
    assert response.status_code == 400


def test_allocate_division_rejects_unknown_semester(client):
    response = client.post("/api/allocate-division", json={"semester": "4", "division": "A"})
    assert response.status_code == 400
    assert "semester" in response.json()["error"]


def test_manual_allocate_enforces_capacity_and_mixing(client, db_session):
    room = add_classroom(db_session, "CLH209", 2)
    a = add_teacher(db_session, "A", sem3=True)
    b = add_teacher(db_session, "B", sem3=True)
    c = add_teacher(db_session, "C", sem5=True)
    d = add_teacher(db_session, "D", sem5=True)

    ok = client.post("/api/manual-allocate", json={"teacherId": a.id, "classroomId": room.id})
    assert ok.status_code == 200
    assert ok.json()["message"] == "Teacher allocated successfully"

    mixed = client.post("/api/manual-allocate", json={"teacherId": b.id, "classroomId": room.id})
    assert mixed.status_code == 400
    assert "2-capacity" in mixed.json()["error"]

    assert client.post("/api/manual-allocate", json={"teacherId": c.id, "classroomId": room.id}).status_code == 200

    full = client.post("/api/manual-allocate", json={"teacherId": d.id, "classroomId": room.id})
    assert full.status_code == 400
    assert full.json() == {"error": "Classroom is already full"}
    assert len(occupants(db_session, room.id)) == 2


def test_manual_allocate_unknown_ids(client, db_session):
    room = add_classroom(db_session, "CLH209", 2)
    teacher = add_teacher(db_session, "A", sem3=True)

    missing_teacher = client.post("/api/manual-allocate", json={"teacherId": 999, "classroomId": room.id})
    assert missing_teacher.status_code == 404
    assert missing_teacher.json() == {"error": "Teacher not found"}

    missing_room = client.post("/api/manual-allocate", json={"teacherId": teacher.id, "classroomId": 999})
    assert missing_room.status_code == 404
    assert missing_room.json() == {"error": "Classroom not found"}

    missing_fields = client.post("/api/manual-allocate", json={"teacherId": teacher.id})
    assert missing_fields.status_code == 400


def test_manual_allocate_allows_other_room_sizes_up_to_capacity(client, db_session):
    room = add_classroom(db_session, "HALL", 4)
    teachers = [add_teacher(db_session, f"T{i}", sem3=True) for i in range(5)]

    codes = [
        client.post("/api/manual-allocate", json={"teacherId": t.id, "classroomId": room.id}).status_code
        for t in teachers
    ]
    assert codes == [200, 200, 200, 200, 400]


def test_manual_allocate_rejects_teacher_already_on_duty(client, db_session):
    first = add_classroom(db_session, "CLH209", 2)
    second = add_classroom(db_session, "CLH303", 2)
    teacher = add_teacher(db_session, "A", sem3=True)

    client.post("/api/manual-allocate", json={"teacherId": teacher.id, "classroomId": first.id})
    response = client.post("/api/manual-allocate", json={"teacherId": teacher.id, "classroomId": second.id})

    assert response.status_code == 400
    assert response.json() == {"error": "Teacher is already allocated to a classroom"}
    assert db_session.query(AllocationDB).count() == 1


def test_clear_classroom_allocations_frees_teachers(client, db_session):
    room = add_classroom(db_session, "CLH209", 2)
    add_teacher(db_session, "A", sem3=True)
    client.post("/api/allocate-division", json={"semester": "3", "division": "A"})

    response = client.delete(f"/api/allocations/classroom/{room.id}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Allocations deleted successfully"}
    assert occupants(db_session, room.id) == []

    unallocated = client.get("/api/unallocated-teachers").json()
    assert [t["name"] for t in unallocated] == ["A"]


def test_allocation_overview_and_available_rooms(client, db_session):
    busy = add_classroom(db_session, "CLH209", 2)
    add_classroom(db_session, "CLH303", 2)
    a = add_teacher(db_session, "A", sem3=True)
    client.post("/api/manual-allocate", json={"teacherId": a.id, "classroomId": busy.id})

    overview = client.get("/api/allocations").json()
    assert overview["allocated"] == [{
        "classroom_id": busy.id,
        "classroom_name": "CLH209",
        "max_teachers": 2,
        "teacher_names": ["A"],
        "current_teachers": 1,
        "students_per_bench": 2,
    }]
    assert [r["classroom_name"] for r in overview["unallocated"]] == ["CLH303"]

    available = {r["name"]: r for r in client.get("/api/available-classrooms").json()}
    assert available["CLH209"]["current_teachers"] == 1
    assert available["CLH209"]["sem3_count"] == 1
    assert available["CLH303"]["current_teachers"] == 0


def test_question_paper_counts(client, db_session):
    room = add_classroom(db_session, "CLH208", 3, num_benches=22)
    a = add_teacher(db_session, "A", sem3=True)
    b = add_teacher(db_session, "B", sem3=True)
    client.post("/api/manual-allocate", json={"teacherId": a.id, "classroomId": room.id})
    client.post("/api/manual-allocate", json={"teacherId": b.id, "classroomId": room.id})

    response = client.get(f"/api/question-papers/{room.id}")
    assert response.json() == {"classroom_name": "CLH208", "papers": {"sem3": 44}}

    assert client.get("/api/question-papers/999").status_code == 404


def test_teachers_by_semester(client, db_session):
    add_teacher(db_session, "A", sem3=True)
    add_teacher(db_session, "B", sem5=True)

    assert [t["name"] for t in client.get("/api/teachers/5").json()] == ["B"]
    assert client.get("/api/teachers/9").status_code == 400
