class Student:
    def __init__(self, rno, usn, name):
        self.rno = rno
        self.usn = usn
        self.name = name

    @property
    def division(self):
        return self.rno // 100


class SeatingRoom:
    def __init__(self, sequence_number, name, benches, capacity=None):
        self.sequence_number = sequence_number
        self.name = name
        self.benches = benches
        self.capacity = capacity


class DutyRoom:
    """A classroom as seen by the duty allocator: capacity plus who is already in it."""
    def __init__(self, room_id, name, students_per_bench, current_teachers=0, sem3_count=0, sem5_count=0):
        self.room_id = room_id
        self.name = name
        self.students_per_bench = students_per_bench
        self.current_teachers = current_teachers or 0
        self.sem3_count = sem3_count or 0
        self.sem5_count = sem5_count or 0

    @property
    def is_full(self):
        return self.current_teachers >= self.students_per_bench

    def semester_count(self, semester):
        return self.sem3_count if str(semester) == "3" else self.sem5_count


class SeatingRecord:
    def __init__(self, classroom_name, third_sem_roll_numbers, fifth_sem_roll_numbers,
                 third_sem_paper_count=None, fifth_sem_paper_count=None):
        self.classroom_name = classroom_name
        self.third_sem_roll_numbers = third_sem_roll_numbers
        self.fifth_sem_roll_numbers = fifth_sem_roll_numbers
        self.third_sem_paper_count = third_sem_paper_count
        self.fifth_sem_paper_count = fifth_sem_paper_count

    def as_dict(self):
        record = {
            "classroom_name": self.classroom_name,
            "third_sem_roll_numbers": self.third_sem_roll_numbers,
            "fifth_sem_roll_numbers": self.fifth_sem_roll_numbers,
        }
        if self.third_sem_paper_count is not None:
            record["third_sem_paper_count"] = self.third_sem_paper_count
        if self.fifth_sem_paper_count is not None:
            record["fifth_sem_paper_count"] = self.fifth_sem_paper_count
        return record
