from collections import deque

from examcell.models import SeatingRecord

# spare question papers handed to every room that seats at least one student
PAPER_OVERHEAD = 2
EMPTY_RANGE = "EMPTY"


def build_bands(roll_numbers):
    """Group roll numbers into hundreds bands, lowest band first.

    Returns a deque of (band_key, deque_of_roll_numbers).
    """
    grouped = {}
    for rno in roll_numbers:
        grouped.setdefault(rno // 100, []).append(rno)

    return deque(
        (key, deque(sorted(grouped[key])))
        for key in sorted(grouped)
    )


def draw_from_front_band(bands, benches):
    """Take up to `benches` roll numbers from the lowest remaining band only."""
    if not bands or benches <= 0:
        return []

    _, band = bands[0]
    drawn = []
    while band and len(drawn) < benches:
        drawn.append(band.popleft())

    if not band:
        bands.popleft()

    return drawn


def roll_number_range(drawn):
    if not drawn:
        return EMPTY_RANGE
    return f"{drawn[0]}-{drawn[-1]}"


def paper_count(drawn):
    if not drawn:
        return None
    return len(drawn) + PAPER_OVERHEAD


def compute_seating_arrangement(rooms, third_sem_rnos, fifth_sem_rnos):
    """Fill rooms in order, each room drawing one band per semester track."""
    third_bands = build_bands(third_sem_rnos)
    fifth_bands = build_bands(fifth_sem_rnos)

    arrangement = []
    for room in rooms:
        third = draw_from_front_band(third_bands, room.benches)
        fifth = draw_from_front_band(fifth_bands, room.benches)

        arrangement.append(
            SeatingRecord(
                classroom_name = room.name,
                third_sem_roll_numbers = roll_number_range(third),
                fifth_sem_roll_numbers = roll_number_range(fifth),
                third_sem_paper_count = paper_count(third),
                fifth_sem_paper_count = paper_count(fifth),
            )
        )

    return arrangement


def parse_roll_number_range(value):
    """Inverse of roll_number_range; None for the empty marker."""
    if not value or value == EMPTY_RANGE:
        return None
    first, _, last = value.partition("-")
    return int(first), int(last)
