from pathlib import Path

import pandas as pd
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

EXPORT_COLUMNS = [
    "classroom_name",
    "third_sem_roll_numbers",
    "third_sem_paper_count",
    "fifth_sem_roll_numbers",
    "fifth_sem_paper_count",
]


def seating_rows(records):
    return [
        {
            "classroom_name": r.classroom_name,
            "third_sem_roll_numbers": r.third_sem_roll_numbers,
            "third_sem_paper_count": r.third_sem_paper_count or 0,
            "fifth_sem_roll_numbers": r.fifth_sem_roll_numbers,
            "fifth_sem_paper_count": r.fifth_sem_paper_count or 0,
        }
        for r in records
    ]


def export_seating_excel(records, export_dir):
    export_dir = Path(export_dir)
    export_dir.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(seating_rows(records), columns=EXPORT_COLUMNS)
    file_path = export_dir / "seating_arrangement.xlsx"
    df.to_excel(file_path, index=False)
    return file_path


def export_seating_pdf(records, export_dir):
    export_dir = Path(export_dir)
    export_dir.mkdir(parents=True, exist_ok=True)
    file_path = export_dir / "seating_arrangement.pdf"

    c = canvas.Canvas(str(file_path), pagesize=A4)
    width, height = A4

    y = height - 50
    c.setFont("Helvetica-Bold", 14)
    c.drawString(50, y, "Seating Arrangement")
    y -= 30

    c.setFont("Helvetica", 10)
    c.drawString(50, y, "Classroom")
    c.drawString(150, y, "3rd Sem Rolls")
    c.drawString(260, y, "Papers")
    c.drawString(330, y, "5th Sem Rolls")
    c.drawString(440, y, "Papers")
    y -= 15

    c.line(50, y, 550, y)
    y -= 15

    for row in seating_rows(records):
        if y < 60:
            c.showPage()
            c.setFont("Helvetica", 10)
            y = height - 50

        c.drawString(50, y, row["classroom_name"][:18])
        c.drawString(150, y, row["third_sem_roll_numbers"])
        c.drawString(260, y, str(row["third_sem_paper_count"]))
        c.drawString(330, y, row["fifth_sem_roll_numbers"])
        c.drawString(440, y, str(row["fifth_sem_paper_count"]))
        y -= 15

    c.save()
    return file_path
