from examcell.db_models import SeatArrangementDB, SeatingRoomDB, StudentDB, ThirdSemStudentDB


def seed_seating(db, rooms, third, fifth):
    for seq, (name, benches) in enumerate(rooms, start=1):
        db.add(SeatingRoomDB(sequence_number=seq, classroom_name=name, no_of_benches=benches))
    for rno in third:
        db.add(ThirdSemStudentDB(rno=rno, usn=f"3SEM{rno}", name=f"Student {rno}"))
    for rno in fifth:
        db.add(StudentDB(rno=rno, usn=f"5SEM{rno}", name=f"Student {rno}"))
    db.commit()


def test_seating_arrangement_is_computed_and_stored(client, db_session):
    seed_seating(db_session, [("CLH208", 2), ("CLH209", 3)], [101, 102, 103, 201], [301])

    response = client.get("/seating-arrangement")
    assert response.status_code == 200
    assert response.json() == [
        {
            "classroom_name": "CLH208",
            "third_sem_roll_numbers": "101-102",
            "fifth_sem_roll_numbers": "301-301",
            "third_sem_paper_count": 4,
            "fifth_sem_paper_count": 3,
        },
        {
            "classroom_name": "CLH209",
            "third_sem_roll_numbers": "103-103",
            "fifth_sem_roll_numbers": "EMPTY",
            "third_sem_paper_count": 3,
        },
    ]

    stored = db_session.query(SeatArrangementDB).order_by(SeatArrangementDB.id).all()
    assert [s.classroom_name for s in stored] == ["CLH208", "CLH209"]
    assert stored[1].fifth_sem_paper_count is None


def test_seating_arrangement_replaces_previous_snapshot(client, db_session):
    seed_seating(db_session, [("CLH208", 2), ("CLH209", 3)], [101], [])
    client.get("/seating-arrangement")

    client.post("/delete-classroom", json={"classroom_name": "CLH209"})
    client.get("/seating-arrangement")

    assert db_session.query(SeatArrangementDB).count() == 1


def test_classroom_list_crud(client, db_session):
    seed_seating(db_session, [("CLH208", 22)], [], [])

    added = client.post("/add-classroom", json={"classroom_name": "LAB-6", "no_of_benches": 34})
    assert added.status_code == 200

    duplicate = client.post("/add-classroom", json={"classroom_name": "LAB-6", "no_of_benches": 10})
    assert duplicate.status_code == 400

    rooms = client.get("/classroom-list").json()
    assert [(r["sequence_number"], r["classroom_name"]) for r in rooms] == [(1, "CLH208"), (2, "LAB-6")]

    updated = client.put("/update-benches", json={"classroom_name": "LAB-6", "new_no_of_benches": 40})
    assert updated.status_code == 200
    assert client.get("/classroom-list").json()[1]["no_of_benches"] == 40

    assert client.put("/update-benches", json={"classroom_name": "NOPE", "new_no_of_benches": 4}).status_code == 404
    assert client.put("/update-benches", json={"classroom_name": "LAB-6"}).status_code == 400

    assert client.post("/delete-classroom", json={"classroom_name": "LAB-6"}).status_code == 200
    assert client.post("/delete-classroom", json={"classroom_name": "LAB-6"}).status_code == 404
    assert client.post("/delete-classroom", json={}).status_code == 400


def test_seat_lookup(client, db_session):
    seed_seating(db_session, [("CLH208", 2), ("CLH209", 3)], [101, 102, 103], [])
    client.get("/seating-arrangement")

    found = client.get("/seat-lookup", params={"rno": 103, "semester": "3"})
    assert found.status_code == 200
    assert found.json() == {"rno": 103, "semester": "3", "classroom_name": "CLH209"}

    assert client.get("/seat-lookup", params={"rno": 103, "semester": "5"}).status_code == 404


def test_seating_capacity(client, db_session):
    seed_seating(db_session, [("CLH208", 2), ("CLH209", 3)], [101, 102, 103, 104, 105, 106], [201])

    body = client.get("/seating-capacity").json()
    assert body["total_benches"] == 5
    assert body["third_sem_shortage"] == 1
    assert body["fifth_sem_shortage"] == 0


def test_exports_need_a_stored_arrangement(client, db_session):
    assert client.get("/export/seating-arrangement/excel").status_code == 404

    seed_seating(db_session, [("CLH208", 2)], [101], [201])
    client.get("/seating-arrangement")

    excel = client.get("/export/seating-arrangement/excel")
    assert excel.status_code == 200
    assert excel.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )

    pdf = client.get("/export/seating-arrangement/pdf")
    assert pdf.status_code == 200
    assert pdf.content.startswith(b"%PDF")


def test_seating_routes_are_served_without_api_prefix(client, db_session):
    seed_seating(db_session, [("CLH208", 2)], [101], [])

    assert client.get("/seating-arrangement").status_code == 200
    assert client.get("/classroom-list").status_code == 200
    assert client.get("/api/seating-arrangement").status_code == 404
