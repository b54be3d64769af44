"""
PDF export of an owner's applications and interviews.

The owner's data is read in full before anything is rendered, since the
summary and page footers need totals. The rendered document is spooled to a
temporary file and only handed out once rendering has finished, as a stream
of fixed-size chunks.
"""
import logging
import tempfile
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import IO, Dict, Iterator, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus.doctemplate import LayoutError
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy import select
from sqlalchemy.orm import Session

from .. import schemas
from ..config.settings import Settings, get_settings
from ..models.db.application import Application
from ..models.db.interview import Interview
from ..utils.result import Err, ErrorKind, Ok, Result, storage_failure
from . import application_tracker

logger = logging.getLogger(__name__)

READ_INTENT = "Failed to read from the interviews table"
RENDER_INTENT = "Failed to generate the report"

PAGE_SIZES = {"A4": A4, "LETTER": LETTER}


@dataclass
class ApplicationSection:
    application: schemas.ApplicationListItem
    interviews: List[schemas.Interview] = field(default_factory=list)


@dataclass
class ReportData:
    owner_id: str
    generated_at: datetime
    sections: List[ApplicationSection]

    @property
    def total_applications(self) -> int:
        return len(self.sections)

    @property
    def total_interviews(self) -> int:
        return sum(len(s.interviews) for s in self.sections)

    @property
    def status_totals(self) -> Dict[str, int]:
        return dict(Counter(s.application.status for s in self.sections))


class ReportStream:
    """A finished document waiting to be read out in chunks."""

    def __init__(self, spool: IO[bytes], size: int, filename: str,
                 media_type: str = "application/pdf", chunk_size: int = 64 * 1024):
        self._spool = spool
        self.size = size
        self.filename = filename
        self.media_type = media_type
        self.chunk_size = chunk_size

    def iter_chunks(self) -> Iterator[bytes]:
        """Yield the document from the start; the spool is closed afterwards."""
        try:
            self._spool.seek(0)
            while True:
                chunk = self._spool.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            self._spool.close()

    def close(self) -> None:
        self._spool.close()


def load_report_data(db: Session, owner_id: str) -> Result[ReportData]:
    """Read every application of the owner with all of its interviews."""
    applications = application_tracker.get_all_applications(db, owner_id)
    if applications.is_err():
        return applications

    try:
        interviews = db.scalars(
            select(Interview)
            .join(Application, Interview.application_id == Application.id)
            .where(Application.user_id == owner_id)
            .order_by(Interview.interview_date, Interview.id)
        ).all()
    except Exception as e:
        db.rollback()
        return storage_failure(READ_INTENT, e)

    by_application = defaultdict(list)
    for interview in interviews:
        by_application[interview.application_id].append(schemas.Interview.model_validate(interview))

    sections = [
        ApplicationSection(application=item, interviews=by_application.get(item.id, []))
        for item in applications.value
    ]
    return Ok(ReportData(
        owner_id=owner_id,
        generated_at=datetime.now(timezone.utc),
        sections=sections,
    ))


class NumberedCanvas(canvas.Canvas):
    """Canvas that defers page footers until the page count is known."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(page_count)
            super().showPage()
        super().save()

    def _draw_footer(self, page_count: int) -> None:
        self.setFont("Helvetica", 8)
        self.setFillColor(colors.grey)
        self.drawRightString(
            self._pagesize[0] - 15 * mm, 10 * mm,
            f"Page {self._pageNumber} of {page_count}",
        )


def _text(value: Optional[str]) -> str:
    if not value:
        return "-"
    return escape(value).replace("\n", "<br/>")


def _summary_rows(data: ReportData) -> List[List[str]]:
    totals = data.status_totals
    known = {status.value for status in schemas.ApplicationStatus}
    rows = [["Status", "Applications"]]
    for status in schemas.ApplicationStatus:
        count = totals.get(status.value, 0)
        if count:
            rows.append([status.value.capitalize(), str(count)])
    # Stored statuses outside ApplicationStatus
    other = sum(count for status, count in totals.items() if status not in known)
    if other:
        rows.append(["Other", str(other)])
    rows.append(["Total applications", str(data.total_applications)])
    rows.append(["Total interviews", str(data.total_interviews)])
    return rows


def _summary_table(data: ReportData) -> Table:
    rows = _summary_rows(data)
    table = Table(rows, hAlign="LEFT", colWidths=[60 * mm, 30 * mm])
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("LINEBELOW", (0, -3), (-1, -3), 0.5, colors.grey),
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
    ]))
    return table


def _application_section(section: ApplicationSection, styles) -> list:
    application = section.application
    heading = Paragraph(
        f"{_text(application.company)}: {_text(application.position)}", styles["Heading2"]
    )
    details = Paragraph(
        f"Applied {application.application_date.isoformat()} | "
        f"Status: <b>{_text(application.status)}</b> | "
        f"Interviews: {application.interviews_count}",
        styles["Normal"],
    )
    flowables = [KeepTogether([heading, details])]

    if application.job_posting_url:
        flowables.append(Paragraph(f"Posting: {_text(application.job_posting_url)}", styles["Normal"]))

    if section.interviews:
        rows = [["Date", "Topic", "Participants"]]
        for interview in section.interviews:
            rows.append([
                interview.interview_date.strftime("%Y-%m-%d %H:%M"),
                Paragraph(_text(interview.topic), styles["BodyText"]),
                Paragraph(_text(interview.participants), styles["BodyText"]),
            ])
        table = Table(rows, hAlign="LEFT", colWidths=[32 * mm, 70 * mm, 70 * mm], repeatRows=1)
        table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]))
        flowables.extend([Spacer(1, 3 * mm), table])
    else:
        flowables.append(Paragraph("<i>No interviews recorded.</i>", styles["Normal"]))

    flowables.append(Spacer(1, 6 * mm))
    return flowables


def render_pdf(data: ReportData, sink: IO[bytes], title: str = "Job Applications Report",
               page_size: str = "A4") -> None:
    """Write the report for ``data`` as a PDF document into ``sink``."""
    styles = getSampleStyleSheet()
    doc = SimpleDocTemplate(
        sink,
        pagesize=PAGE_SIZES[page_size],
        title=title,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=20 * mm,
    )

    story = [
        Paragraph(escape(title), styles["Title"]),
        Paragraph(f"Generated {data.generated_at:%Y-%m-%d %H:%M} UTC", styles["Normal"]),
        Spacer(1, 6 * mm),
        _summary_table(data),
        Spacer(1, 8 * mm),
    ]
    if not data.sections:
        story.append(Paragraph("No applications recorded yet.", styles["Normal"]))
    for section in data.sections:
        story.extend(_application_section(section, styles))

    doc.build(story, canvasmaker=NumberedCanvas)


def render_failure(error: Exception) -> Err:
    """Layout errors keep their message; anything else gets the fixed unknown-error text."""
    if isinstance(error, LayoutError):
        return Err(f"{RENDER_INTENT}: {error}", ErrorKind.RENDER)
    return Err(f"{RENDER_INTENT}: unknown error", ErrorKind.UNKNOWN)


def generate_report(db: Session, owner_id: str, settings: Optional[Settings] = None) -> Result[ReportStream]:
    """
    Build the owner's PDF report.

    Returns Ok with a ReportStream only once the whole document has been
    rendered. A failed read or render returns a single Err and no bytes.
    """
    settings = settings or get_settings()

    data = load_report_data(db, owner_id)
    if data.is_err():
        return data

    spool = tempfile.SpooledTemporaryFile(max_size=settings.report_spool_max_bytes)
    try:
        render_pdf(data.value, spool, title=settings.report_title, page_size=settings.report_page_size)
        size = spool.tell()
    except Exception as e:
        spool.close()
        logger.exception("Report rendering failed for owner %s", owner_id)
        return render_failure(e)

    report = data.value
    logger.info(
        "Rendered report for owner %s: %d applications, %d interviews, %d bytes",
        owner_id, report.total_applications, report.total_interviews, size,
    )
    return Ok(ReportStream(
        spool,
        size=size,
        filename=f"job-applications-{report.generated_at:%Y%m%d}.pdf",
        chunk_size=settings.report_chunk_size,
    ))
