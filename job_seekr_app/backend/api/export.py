"""
Report export endpoint.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ..services import report_service
from ..models.db.database import get_db
from ..utils.api_helpers import unwrap_or_raise
from .auth import get_current_owner_id

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", summary="Download PDF report", response_class=StreamingResponse)
def export_report(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    """
    Render the current owner's applications and interviews as a PDF and stream it.
    A failed export is reported as a JSON error before any document bytes are sent.
    """
    report = unwrap_or_raise(report_service.generate_report(db, owner_id))
    logger.info("Streaming %s (%d bytes) to owner %s", report.filename, report.size, owner_id)
    return StreamingResponse(
        report.iter_chunks(),
        media_type=report.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{report.filename}"',
            "Content-Length": str(report.size),
        },
    )
