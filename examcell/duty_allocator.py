"""Invigilation duty rules.

A room's ``students_per_bench`` is the number of invigilators it takes.
Two-seat rooms may hold at most one teacher per semester track, three-seat
rooms at most two. Rooms of any other size are never picked by the batch
allocator, even when they still have space; only manual allocation can
fill them.
"""

SEMESTERS = ("3", "5")

# room size -> max teachers from one semester track
SEMESTER_MIXING_LIMITS = {
    2: 1,
    3: 2,
}


def normalize_semester(semester):
    value = str(semester).strip()
    if value not in SEMESTERS:
        raise ValueError(f"Semester must be one of {', '.join(SEMESTERS)}")
    return value


def mixing_violation(room, semester):
    """Return the broken rule for adding a `semester` teacher to `room`, or None."""
    limit = SEMESTER_MIXING_LIMITS.get(room.students_per_bench)
    if limit is None:
        return None
    if room.semester_count(semester) >= limit:
        if limit == 1:
            return (
                f"For {room.students_per_bench}-capacity rooms, cannot have more "
                "than one teacher from the same semester"
            )
        return (
            f"For {room.students_per_bench}-capacity rooms, cannot have more "
            "than two teachers from the same semester"
        )
    return None


def can_allocate(room, semester):
    """Batch rule: room has space, is a governed size, and the track has room."""
    if room.is_full:
        return False
    if room.students_per_bench not in SEMESTER_MIXING_LIMITS:
        return False
    return mixing_violation(room, semester) is None


def plan_division(rooms, teacher_ids, semester):
    """Pair teachers with rooms in a single greedy pass.

    `rooms` should already be ordered emptiest first; every decision uses the
    counts as they were when the rooms were read, so a room gets at most one
    teacher per call. Returns a list of (teacher_id, room_id).
    """
    semester = normalize_semester(semester)
    pairings = []
    teacher_index = 0

    for room in rooms:
        if teacher_index >= len(teacher_ids):
            break
        if can_allocate(room, semester):
            pairings.append((teacher_ids[teacher_index], room.room_id))
            teacher_index += 1

    return pairings
