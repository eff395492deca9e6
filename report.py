# report.py
from typing import List
from xml.sax.saxutils import escape

from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.pagesizes import letter, landscape
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from models import CandidateRanking

HEADER = [
    "Rank", "Name", "Resume", "Email", "Phone", "Best Match",
    "Skills %", "Skill Result", "Experience", "Experience Result", "Matched Skills",
]
COL_WIDTHS = [32, 80, 80, 100, 70, 80, 40, 60, 45, 60, 115]

RESULT_COLORS = {
    "Select": colors.HexColor("#d1fae5"),
    "Highly Qualified": colors.HexColor("#d1fae5"),
    "Hold": colors.HexColor("#fef3c7"),
    "Qualified": colors.HexColor("#fef3c7"),
    "Reject": colors.HexColor("#fee2e2"),
    "Not Qualified": colors.HexColor("#fee2e2"),
}


def report_rows(rankings: List[CandidateRanking]) -> List[List[str]]:
    """Plain-text table body, one row per candidate in ranking order."""
    rows = []
    for idx, ranking in enumerate(rankings, start=1):
        c = ranking.candidate
        best = ranking.best_match
        rows.append([
            str(idx),
            c.name,
            c.file_name,
            c.email,
            c.phone,
            best.title if best else "",
            str(best.percentage) if best else "0",
            best.skill_result if best else "",
            c.experience or "-",
            best.experience_result if best else "",
            ", ".join(best.matched_skills) if best else "",
        ])
    return rows


def build_pdf_report(rankings: List[CandidateRanking], pdf_path: str) -> str:
    doc = SimpleDocTemplate(pdf_path, pagesize=landscape(letter))
    elements = []

    styles = getSampleStyleSheet()
    styleN = styles['Normal']
    styleN.wordWrap = 'CJK'  # Enable text wrapping

    elements.append(Paragraph("Ranked Candidates Report", styles['Title']))
    elements.append(Spacer(1, 12))

    rows = report_rows(rankings)
    data = [HEADER] + [[Paragraph(escape(cell), styleN) for cell in row] for row in rows]

    style = [
        ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.black),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
        ('GRID', (0, 0), (-1, -1), 0.25, colors.grey),
    ]
    # shade the skill verdict cell (column 7)
    for row_idx, row in enumerate(rows, start=1):
        shade = RESULT_COLORS.get(row[7])
        if shade is not None:
            style.append(('BACKGROUND', (7, row_idx), (7, row_idx), shade))

    table = Table(data, colWidths=COL_WIDTHS, repeatRows=1)
    table.setStyle(TableStyle(style))
    elements.append(table)

    doc.build(elements)
    return pdf_path
