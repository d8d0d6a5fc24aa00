"""
Certificate PDF Unit Tests

Tests for rendering and logo resolution.
"""

import base64
from datetime import date
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from reportlab.lib.units import mm

from app.core.config import settings
from app.services.certificate_pdf import (
    CertificateData,
    format_completion_date,
    load_logo_data_url,
    parse_theme_color,
    render_certificate_pdf,
)


SVG_LOGO = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="120" height="60">'
    b'<rect x="0" y="0" width="120" height="60" fill="#0f766e"/></svg>'
)


def make_data(**overrides) -> CertificateData:
    values = dict(
        student_name="Siti Rahma",
        course_name="Python for Data Analysis",
        completion_date="March 05, 2025",
        certificate_number="CERT-1700000000000-12ab34",
        instructor_name="Budi Santoso",
        duration="6 weeks",
        theme_color="#0f766e",
    )
    values.update(overrides)
    return CertificateData(**values)


class TestRendering:
    """Tests for render_certificate_pdf."""

    def test_renders_pdf_document(self):
        pdf = render_certificate_pdf(make_data())

        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_unreadable_logo_is_skipped(self):
        broken = "data:image/png;base64," + base64.b64encode(b"not an image").decode()

        pdf = render_certificate_pdf(make_data(logo_data_url=broken))

        assert pdf.startswith(b"%PDF")

    def test_invalid_theme_color_still_renders(self):
        pdf = render_certificate_pdf(make_data(theme_color="purple"))

        assert pdf.startswith(b"%PDF")

    def test_svg_logo_is_drawn_as_vector(self):
        logo = "data:image/svg+xml;base64," + base64.b64encode(SVG_LOGO).decode()

        with patch("app.services.certificate_pdf.renderPDF.draw") as draw:
            pdf = render_certificate_pdf(make_data(logo_data_url=logo))

        assert pdf.startswith(b"%PDF")
        draw.assert_called_once()
        drawing = draw.call_args.args[0]
        assert drawing.width == pytest.approx(40 * mm)
        assert drawing.height == pytest.approx(20 * mm)

    def test_svg_logo_renders_without_warnings(self, caplog):
        logo = "data:image/svg+xml;base64," + base64.b64encode(SVG_LOGO).decode()

        pdf = render_certificate_pdf(make_data(logo_data_url=logo))

        assert pdf.startswith(b"%PDF")
        assert "Skipping unreadable certificate logo" not in caplog.text

    def test_unparseable_svg_is_skipped(self):
        logo = "data:image/svg+xml;base64," + base64.b64encode(b"<svg").decode()

        pdf = render_certificate_pdf(make_data(logo_data_url=logo))

        assert pdf.startswith(b"%PDF")


class TestHelpers:
    """Tests for colour and date helpers."""

    def test_parse_theme_color(self):
        assert parse_theme_color("#0f766e").hexval() == "0x0f766e"
        assert parse_theme_color("0f766e").hexval() == "0x0f766e"

    def test_parse_theme_color_falls_back(self):
        assert parse_theme_color("nope", "#2563eb").hexval() == "0x2563eb"
        assert parse_theme_color(None, "#2563eb").hexval() == "0x2563eb"

    def test_format_completion_date(self):
        assert format_completion_date(date(2025, 3, 5)) == "March 05, 2025"


class TestLoadLogo:
    """Tests for load_logo_data_url."""

    @pytest.mark.asyncio
    async def test_no_logo(self):
        assert await load_logo_data_url(None) is None
        assert await load_logo_data_url("") is None

    @pytest.mark.asyncio
    async def test_data_url_passes_through(self):
        data_url = "data:image/png;base64,iVBORw0KGgo="

        assert await load_logo_data_url(data_url) == data_url

    @pytest.mark.asyncio
    async def test_svg_data_url_is_kept(self):
        data_url = "data:image/svg+xml;base64," + base64.b64encode(SVG_LOGO).decode()

        assert await load_logo_data_url(data_url) == data_url

    @pytest.mark.asyncio
    async def test_remote_svg_is_fetched(self, mock_httpx_response):
        response = mock_httpx_response(
            content=SVG_LOGO,
            headers={"content-type": "image/svg+xml; charset=utf-8"},
        )

        with patch(
            "app.services.certificate_pdf.get_with_retry",
            AsyncMock(return_value=response),
        ):
            result = await load_logo_data_url("https://cdn.example.com/logo.svg")

        assert result == "data:image/svg+xml;base64," + base64.b64encode(SVG_LOGO).decode()

    @pytest.mark.asyncio
    async def test_remote_logo_is_fetched(self, mock_httpx_response):
        response = mock_httpx_response(
            content=b"\x89PNG",
            headers={"content-type": "image/png"},
        )

        with patch(
            "app.services.certificate_pdf.get_with_retry",
            AsyncMock(return_value=response),
        ) as fetch:
            result = await load_logo_data_url("https://cdn.example.com/logo")

        fetch.assert_awaited_once_with("https://cdn.example.com/logo")
        assert result == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode()

    @pytest.mark.asyncio
    async def test_remote_logo_error_status(self, mock_httpx_response):
        with patch(
            "app.services.certificate_pdf.get_with_retry",
            AsyncMock(return_value=mock_httpx_response(status_code=404)),
        ):
            assert await load_logo_data_url("https://cdn.example.com/logo.png") is None

    @pytest.mark.asyncio
    async def test_connection_error_returns_none(self):
        with patch(
            "app.services.certificate_pdf.get_with_retry",
            AsyncMock(side_effect=httpx.ConnectError("refused")),
        ):
            assert await load_logo_data_url("https://cdn.example.com/logo.png") is None

    @pytest.mark.asyncio
    async def test_local_upload_is_read_from_static_dir(self, tmp_path, monkeypatch):
        uploads = tmp_path / "uploads"
        uploads.mkdir()
        (uploads / "logo.png").write_bytes(b"\x89PNG")
        monkeypatch.setattr(settings, "STATIC_DIR", str(tmp_path))

        with patch("app.services.certificate_pdf.get_with_retry", AsyncMock()) as fetch:
            result = await load_logo_data_url("/uploads/logo.png")

        fetch.assert_not_awaited()
        assert result == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode()

    @pytest.mark.asyncio
    async def test_missing_local_upload_is_fetched_from_app_url(
        self, tmp_path, monkeypatch, mock_httpx_response
    ):
        monkeypatch.setattr(settings, "STATIC_DIR", str(tmp_path))
        monkeypatch.setattr(settings, "APP_URL", "https://learn.example.com/")

        with patch(
            "app.services.certificate_pdf.get_with_retry",
            AsyncMock(return_value=mock_httpx_response(content=b"jpg", headers={})),
        ) as fetch:
            result = await load_logo_data_url("/uploads/logo.jpg")

        fetch.assert_awaited_once_with("https://learn.example.com/uploads/logo.jpg")
        assert result.startswith("data:image/jpeg;base64,")

    @pytest.mark.asyncio
    async def test_parent_references_are_refused(self, tmp_path, monkeypatch):
        static_dir = tmp_path / "static"
        static_dir.mkdir()
        (tmp_path / "secret.txt").write_bytes(b"do not leak")
        monkeypatch.setattr(settings, "STATIC_DIR", str(static_dir))

        with patch("app.services.certificate_pdf.get_with_retry", AsyncMock()) as fetch:
            result = await load_logo_data_url("/../secret.txt")

        assert result is None
        fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_symlink_out_of_static_dir_is_not_read(
        self, tmp_path, monkeypatch, mock_httpx_response
    ):
        static_dir = tmp_path / "static"
        static_dir.mkdir()
        (tmp_path / "secret.png").write_bytes(b"do not leak")
        (static_dir / "logo.png").symlink_to(tmp_path / "secret.png")
        monkeypatch.setattr(settings, "STATIC_DIR", str(static_dir))

        with patch(
            "app.services.certificate_pdf.get_with_retry",
            AsyncMock(return_value=mock_httpx_response(status_code=404)),
        ):
            result = await load_logo_data_url("/logo.png")

        assert result is None
