from html import escape
from typing import Optional, Sequence

from app.schemas.student import StudentRecord
from app.services.notification.notifier import Notification


def render_total(count: int) -> str:
    return f"Total students: {count}"


def render_table(records: Sequence[StudentRecord], highlight: Optional[int] = None) -> str:
    """Render records as an HTML table; the row at `highlight` gets class="highlight"."""
    rows = []
    for index, record in enumerate(records):
        row_class = ' class="highlight"' if index == highlight else ""
        rows.append(
            f"<tr{row_class}><td>{escape(record.name)}</td><td>{record.marks}</td></tr>"
        )

    return (
        '<table class="students">'
        "<thead><tr><th>Name</th><th>Marks</th></tr></thead>"
        f'<tbody id="students-tbody">{"".join(rows)}</tbody>'
        "</table>"
    )


def render_page(records: Sequence[StudentRecord], notification: Optional[Notification] = None) -> str:
    highlight = notification.highlight if notification else None

    result = ""
    if notification is not None:
        result = (
            f'<div class="results-display {notification.kind}">'
            f'<p id="result-text">{escape(notification.message)}</p>'
            "</div>"
        )

    return (
        "<!DOCTYPE html>"
        '<html><head><meta charset="utf-8"><title>Student Marks</title></head>'
        "<body>"
        f'<p id="total-students">{render_total(len(records))}</p>'
        f"{render_table(records, highlight)}"
        f"{result}"
        "</body></html>"
    )
