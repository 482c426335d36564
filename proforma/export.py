"""
PDF export of the pro forma result view.

Renders the same heading and labelled lines the result panel shows,
Letter size with 1 inch margins.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from fpdf import FPDF
from fpdf.errors import FPDFException

from proforma.calculations.proforma import result_rows
from proforma.schemas import ResultSet

logger = logging.getLogger(__name__)

HEADING = "Pro Forma Results"


@dataclass(frozen=True)
class ResultView:
    """Rendered content of the result panel."""

    heading: str = HEADING
    rows: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_results(cls, results: ResultSet) -> "ResultView":
        return cls(rows=result_rows(results))


def render_pdf(view: ResultView, margin: float = 1.0) -> FPDF:
    """Lay out a result view on a single Letter page."""
    pdf = FPDF(orientation="P", unit="in", format="letter")
    pdf.set_margins(margin, margin, margin)
    pdf.set_auto_page_break(auto=True, margin=margin)
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 18)
    pdf.cell(0, 0.45, view.heading, new_x="LMARGIN", new_y="NEXT")
    pdf.ln(0.15)

    for label, value in view.rows:
        pdf.set_font("Helvetica", "B", 11)
        pdf.cell(3.0, 0.3, f"{label}:")
        pdf.set_font("Helvetica", "", 11)
        pdf.cell(0, 0.3, value, new_x="LMARGIN", new_y="NEXT")

    return pdf


def export_pdf(
    view: Optional[ResultView],
    filename: str,
    output_dir: Optional[Path] = None,
    margin: float = 1.0,
) -> Optional[Path]:
    """
    Write a PDF snapshot of the result view.

    Args:
        view: Result view to render; None before any calculation
        filename: Output file name
        output_dir: Directory to write into (default: current directory)
        margin: Page margin in inches

    Returns:
        Path of the written file, or None if nothing was exported
    """
    if view is None:
        logger.warning("PDF export skipped: no result view to export.")
        return None

    path = Path(output_dir or ".") / filename
    try:
        render_pdf(view, margin=margin).output(str(path))
    except (FPDFException, OSError):
        logger.exception("PDF export failed")
        return None

    logger.info(f"Exported pro forma to {path}")
    return path


def pdf_bytes(view: Optional[ResultView], margin: float = 1.0) -> Optional[bytes]:
    """Render the result view to PDF bytes without touching the filesystem."""
    if view is None:
        logger.warning("PDF export skipped: no result view to export.")
        return None

    try:
        return bytes(render_pdf(view, margin=margin).output())
    except FPDFException:
        logger.exception("PDF export failed")
        return None
