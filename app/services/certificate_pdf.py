"""
Certificate PDF rendering

Draws the completion certificate with ReportLab and resolves the platform
logo (local upload, remote URL or data URL) into something ReportLab can
embed.
"""

import base64
import logging
import mimetypes
import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional

import httpx
from reportlab.graphics import renderPDF
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from svglib.svglib import svg2rlg

from app.core.config import settings
from app.core.http_client import get_with_retry


logger = logging.getLogger(__name__)


SVG_MIME_TYPE = "image/svg+xml"
HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6})$")
WATERMARK_COLOR = colors.Color(241 / 255, 245 / 255, 249 / 255)
TEXT_DARK = colors.Color(30 / 255, 41 / 255, 59 / 255)
TEXT_MUTED = colors.Color(100 / 255, 116 / 255, 139 / 255)
RULE_COLOR = colors.Color(203 / 255, 213 / 255, 225 / 255)


@dataclass
class CertificateData:
    """Everything printed on a certificate."""

    student_name: str
    course_name: str
    completion_date: str
    certificate_number: str
    instructor_name: str
    duration: str
    theme_color: str
    logo_data_url: Optional[str] = None


def parse_theme_color(value: Optional[str], default: str = "#2563eb") -> colors.Color:
    """
    Convert a ``#rrggbb`` string to a ReportLab colour.

    Anything that is not a six digit hex colour falls back to ``default``.
    """
    match = HEX_COLOR_PATTERN.match((value or "").strip())
    if not match:
        match = HEX_COLOR_PATTERN.match(default)
    return colors.HexColor(f"#{match.group(1)}")


def format_completion_date(value) -> str:
    """e.g. "March 05, 2025"."""
    return value.strftime("%B %d, %Y")


# ============== Logo resolution ==============

def _to_data_url(content: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


def _guess_image_type(path: str) -> str:
    mime_type, _ = mimetypes.guess_type(path)
    return mime_type or "image/png"


def _read_local_upload(path: str) -> Optional[bytes]:
    """
    Read ``/uploads/...`` style paths from the static directory.

    Paths resolving outside STATIC_DIR are refused.
    """
    static_root = Path(settings.STATIC_DIR).resolve()
    candidate = (static_root / path.lstrip("/")).resolve()
    if not candidate.is_relative_to(static_root):
        logger.warning("Refusing logo path outside the static directory: %s", path)
        return None
    if candidate.is_file():
        return candidate.read_bytes()
    return None


async def load_logo_data_url(logo_url: Optional[str]) -> Optional[str]:
    """
    Resolve the configured logo into a data URL.

    Relative paths are looked up under STATIC_DIR first and otherwise
    fetched from APP_URL. SVG logos are kept as ``image/svg+xml`` and drawn
    as vector graphics.

    Args:
        logo_url: Value of the ``logo_url`` setting.

    Returns:
        A ``data:image/...;base64,`` URL, or None when there is no usable logo.
        Failures are logged, never raised.
    """
    if not logo_url:
        return None

    if logo_url.startswith("data:"):
        return logo_url

    mime_type = _guess_image_type(logo_url)

    try:
        if logo_url.startswith("/"):
            if ".." in Path(logo_url).parts:
                logger.warning("Refusing logo path with parent references: %s", logo_url)
                return None
            content = _read_local_upload(logo_url)
            if content is not None:
                return _to_data_url(content, mime_type)
            url = f"{settings.APP_URL.rstrip('/')}{logo_url}"
        else:
            url = logo_url

        response = await get_with_retry(url)
        if response.status_code != 200:
            logger.warning("Logo fetch from %s returned %s", url, response.status_code)
            return None

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if content_type.startswith("image/"):
            mime_type = content_type
        return _to_data_url(response.content, mime_type)

    except (httpx.HTTPError, OSError) as exc:
        logger.warning("Could not load certificate logo %s: %s", logo_url, exc)
        return None


def _split_data_url(data_url: str) -> tuple[str, bytes]:
    """Return (mime type, decoded payload) of a base64 data URL."""
    header, _, payload = data_url.partition(",")
    mime_type = header[len("data:"):].split(";")[0]
    return mime_type, base64.b64decode(payload)


# ============== Rendering ==============

LOGO_BOX_WIDTH = 40 * mm
LOGO_BOX_HEIGHT = 20 * mm


def _draw_svg_logo(pdf: canvas.Canvas, content: bytes, page_height: float) -> None:
    drawing = svg2rlg(BytesIO(content))
    if drawing is None or not drawing.width or not drawing.height:
        raise ValueError("SVG logo could not be parsed")

    scale = min(LOGO_BOX_WIDTH / drawing.width, LOGO_BOX_HEIGHT / drawing.height)
    drawing.width *= scale
    drawing.height *= scale
    drawing.scale(scale, scale)
    renderPDF.draw(drawing, pdf, 20 * mm, page_height - 20 * mm - drawing.height)


def _draw_raster_logo(pdf: canvas.Canvas, content: bytes, page_height: float) -> None:
    image = ImageReader(BytesIO(content))
    img_width, img_height = image.getSize()
    scale = min(LOGO_BOX_WIDTH / img_width, LOGO_BOX_HEIGHT / img_height)
    pdf.drawImage(
        image,
        20 * mm,
        page_height - 20 * mm - img_height * scale,
        width=img_width * scale,
        height=img_height * scale,
        mask="auto",
    )


def _draw_logo(pdf: canvas.Canvas, data_url: str, page_height: float) -> None:
    """Logo in the top-left corner; a broken image is logged and skipped."""
    try:
        mime_type, content = _split_data_url(data_url)
        if mime_type == SVG_MIME_TYPE:
            _draw_svg_logo(pdf, content, page_height)
        else:
            _draw_raster_logo(pdf, content, page_height)
    except Exception as exc:
        logger.warning("Skipping unreadable certificate logo: %s", exc)


def render_certificate_pdf(data: CertificateData) -> bytes:
    """
    Render a certificate as a landscape A4 PDF.

    Args:
        data: Text and branding to print.

    Returns:
        The PDF document as bytes.
    """
    buffer = BytesIO()
    width, height = landscape(A4)
    theme = parse_theme_color(data.theme_color, settings.DEFAULT_THEME_COLOR)

    pdf = canvas.Canvas(buffer, pagesize=(width, height))
    pdf.setTitle(f"Certificate {data.certificate_number}")

    # Borders
    pdf.setStrokeColor(theme)
    pdf.setLineWidth(3)
    pdf.rect(10 * mm, 10 * mm, width - 20 * mm, height - 20 * mm)
    pdf.setStrokeColor(RULE_COLOR)
    pdf.setLineWidth(0.8)
    pdf.rect(15 * mm, 15 * mm, width - 30 * mm, height - 30 * mm)

    # Watermark
    pdf.setFillColor(WATERMARK_COLOR)
    pdf.setFont("Helvetica-Bold", 100)
    pdf.drawCentredString(width / 2, height / 2 - 20 * mm, "CERTIFIED")

    if data.logo_data_url:
        _draw_logo(pdf, data.logo_data_url, height)

    # Header
    pdf.setFillColor(theme)
    pdf.setFont("Helvetica-Bold", 40)
    pdf.drawCentredString(width / 2, height - 45 * mm, "CERTIFICATE")
    pdf.setFillColor(TEXT_MUTED)
    pdf.setFont("Helvetica", 16)
    pdf.drawCentredString(width / 2, height - 55 * mm, "OF COMPLETION")

    pdf.setFont("Helvetica", 13)
    pdf.drawCentredString(width / 2, height - 72 * mm, "This is to certify that")

    # Student name with rule
    pdf.setFillColor(TEXT_DARK)
    pdf.setFont("Helvetica-Bold", 30)
    pdf.drawCentredString(width / 2, height - 88 * mm, data.student_name)
    pdf.setStrokeColor(theme)
    pdf.setLineWidth(1)
    pdf.line(width / 2 - 70 * mm, height - 92 * mm, width / 2 + 70 * mm, height - 92 * mm)

    pdf.setFillColor(TEXT_MUTED)
    pdf.setFont("Helvetica", 13)
    pdf.drawCentredString(width / 2, height - 104 * mm, "has successfully completed the course")

    pdf.setFillColor(theme)
    pdf.setFont("Helvetica-Bold", 22)
    pdf.drawCentredString(width / 2, height - 118 * mm, data.course_name)

    # Date / duration / id row
    row_y = height - 140 * mm
    columns = (
        ("COMPLETION DATE", data.completion_date),
        ("DURATION", data.duration),
        ("CERTIFICATE ID", data.certificate_number),
    )
    for index, (label, value) in enumerate(columns):
        x = width * (index + 1) / 4
        pdf.setFillColor(TEXT_MUTED)
        pdf.setFont("Helvetica", 9)
        pdf.drawCentredString(x, row_y, label)
        pdf.setFillColor(TEXT_DARK)
        pdf.setFont("Helvetica-Bold", 12)
        pdf.drawCentredString(x, row_y - 6 * mm, value)

    # Instructor signature
    pdf.setStrokeColor(TEXT_DARK)
    pdf.line(width / 2 - 40 * mm, 40 * mm, width / 2 + 40 * mm, 40 * mm)
    pdf.setFillColor(TEXT_DARK)
    pdf.setFont("Helvetica-Bold", 12)
    pdf.drawCentredString(width / 2, 34 * mm, data.instructor_name)
    pdf.setFillColor(TEXT_MUTED)
    pdf.setFont("Helvetica", 9)
    pdf.drawCentredString(width / 2, 29 * mm, "Instructor")

    # Certificate number
    pdf.setFont("Helvetica", 8)
    pdf.drawRightString(width - 20 * mm, 20 * mm, f"No: {data.certificate_number}")

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
