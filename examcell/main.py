import argparse
from pathlib import Path

from examcell import csv_loader
from examcell.allocator import compute_seating_arrangement
from examcell.config import get_settings


def main(argv=None):
    parser = argparse.ArgumentParser(description="Preview the seating arrangement from the flat files.")
    parser.add_argument("--data-dir", type=Path, default=get_settings().data_dir)
    args = parser.parse_args(argv)

    rooms = csv_loader.read_classroom_list(args.data_dir / csv_loader.CLASSROOM_FILE)
    fifth = csv_loader.read_student_list(args.data_dir / csv_loader.FIFTH_SEM_FILE)
    third = csv_loader.read_student_list(args.data_dir / csv_loader.THIRD_SEM_FILE)

    arrangement = compute_seating_arrangement(
        rooms,
        sorted(s.rno for s in third),
        sorted(s.rno for s in fifth),
    )

    print("\n--- Seating Arrangement ---")
    for r in arrangement:
        print(
            f"{r.classroom_name} | 3rd: {r.third_sem_roll_numbers} ({r.third_sem_paper_count or 0} papers)"
            f" | 5th: {r.fifth_sem_roll_numbers} ({r.fifth_sem_paper_count or 0} papers)"
        )


if __name__ == "__main__":
    main()
