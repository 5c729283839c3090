"""
Export encoder unit tests

Run: pytest tests/unit/test_export.py -v
"""

import io
import json
import re

import pytest
from PIL import Image

from ui_mapper.core.errors import PreconditionError
from ui_mapper.export import (
    CSV_HEADER,
    ExportFormat,
    export_as_csv,
    export_as_jpeg,
    export_as_json,
    export_as_pdf,
    export_as_png,
    export_raster,
    regions_from_json,
    regions_to_csv,
    suggested_filename,
)
from ui_mapper.export.document import page_size_for


@pytest.fixture
def analyzed(make_raster, sample_regions):
    return make_raster(640, 480, regions=sample_regions, analyzed=True, name="login.png")


class TestPreconditions:
    """Map-mode gate for rendered formats"""

    @pytest.mark.parametrize("fmt", ["png", "jpeg", "pdf"])
    def test_unanalyzed_rejected(self, make_raster, fmt):
        with pytest.raises(PreconditionError):
            export_raster(make_raster(), fmt, schematic_enabled=True)

    @pytest.mark.parametrize("fmt", ["png", "jpeg", "pdf"])
    def test_map_mode_off_rejected(self, analyzed, fmt):
        with pytest.raises(PreconditionError):
            export_raster(analyzed, fmt, schematic_enabled=False)

    @pytest.mark.parametrize("fmt", ["csv", "json"])
    def test_data_formats_not_gated(self, make_raster, fmt):
        artifact = export_raster(make_raster(), fmt)
        assert artifact.size > 0

    def test_unknown_format(self, analyzed):
        with pytest.raises(ValueError):
            export_raster(analyzed, "gif", schematic_enabled=True)


class TestFilenames:
    def test_rendered_default(self, analyzed):
        assert suggested_filename(analyzed, ExportFormat.PNG) == "login_map.png"
        assert suggested_filename(analyzed, ExportFormat.JPEG) == "login_map.jpg"

    def test_data_default(self, analyzed):
        assert suggested_filename(analyzed, ExportFormat.CSV) == "login_ui_map.csv"

    def test_caller_name_gets_fixed_extension(self, analyzed):
        assert suggested_filename(analyzed, ExportFormat.PDF, "report.txt") == "report.pdf"

    def test_blank_name_falls_back(self, analyzed):
        assert suggested_filename(analyzed, ExportFormat.JSON, "   ") == "login_ui_map.json"


class TestImageExport:
    def test_png(self, analyzed):
        artifact = export_as_png(analyzed, schematic_enabled=True)
        assert artifact.media_type == "image/png"
        image = Image.open(io.BytesIO(artifact.data))
        assert image.format == "PNG"
        assert image.size == (640, 480)

    def test_jpeg(self, analyzed):
        artifact = export_as_jpeg(analyzed, schematic_enabled=True)
        image = Image.open(io.BytesIO(artifact.data))
        assert image.format == "JPEG"
        assert image.size == (640, 480)

    def test_jpg_alias(self, analyzed):
        artifact = export_raster(analyzed, "jpg", schematic_enabled=True)
        assert artifact.filename.endswith(".jpg")

    def test_does_not_mutate_raster(self, analyzed):
        before = analyzed.to_dict()
        export_as_png(analyzed, schematic_enabled=True)
        assert analyzed.to_dict() == before


class TestPdfExport:
    def test_landscape_page(self):
        width, height = page_size_for(1600, 900)
        assert (width, height) == (1600, 900)

    def test_portrait_page(self):
        width, height = page_size_for(900, 1600)
        assert (width, height) == (900, 1600)

    def test_pdf_bytes(self, analyzed):
        artifact = export_as_pdf(analyzed, schematic_enabled=True)
        assert artifact.data.startswith(b"%PDF")
        assert artifact.filename == "login_map.pdf"
        assert re.search(rb"/MediaBox \[\s*0 0 640 480\s*\]", artifact.data)

    def test_pdf_bytes_reproducible(self, analyzed):
        first = export_as_pdf(analyzed, schematic_enabled=True).data
        second = export_as_pdf(analyzed, schematic_enabled=True).data
        assert first == second


class TestCsvExport:
    def test_header_and_rows(self, analyzed):
        lines = regions_to_csv(analyzed).splitlines()
        assert lines[0] == ",".join(CSV_HEADER)
        assert lines[1] == '"Top Bar","Header",0,0,1000,100'
        assert lines[2] == '"Sign In","Button",100,400,200,50'
        assert len(lines) == 4

    def test_quotes_escaped(self, make_raster, sample_regions):
        raster = make_raster(regions=[sample_regions[0].renamed('Say "Hi"')])
        assert regions_to_csv(raster).splitlines()[1].startswith('"Say ""Hi""",')

    def test_empty_raster_header_only(self, make_raster):
        assert regions_to_csv(make_raster()) == "Label,Type,X,Y,Width,Height\n"

    def test_artifact(self, analyzed):
        artifact = export_as_csv(analyzed, "regions")
        assert artifact.filename == "regions.csv"
        assert artifact.media_type == "text/csv"


class TestJsonExport:
    def test_pretty_printed_array(self, analyzed):
        text = export_as_json(analyzed).data.decode("utf-8")
        assert text.startswith("[\n  {")
        data = json.loads(text)
        assert [item["label"] for item in data] == ["Top Bar", "Sign In", "Email"]
        assert data[1]["box_2d"] == {"ymin": 400, "xmin": 100, "ymax": 450, "xmax": 300}

    def test_reads_back(self, analyzed):
        text = export_as_json(analyzed).data.decode("utf-8")
        assert regions_from_json(text) == analyzed.regions

    def test_empty_list(self, make_raster):
        assert export_as_json(make_raster()).data == b"[]"
