"""Unit tests for the export module."""

import json

import pytest
from PIL import Image

from structoflow.export import ExportError, StructogramExporter, detect_format, layout_to_dict
from structoflow.layout import build_structogram_layout
from structoflow.renderer import StructogramRenderer


@pytest.fixture
def rendered(if_tree):
    layout = build_structogram_layout(if_tree)
    return layout, StructogramRenderer().render(layout)


class TestLayoutToDict:
    """Tests for layout_to_dict."""

    def test_kind_tags(self, rendered):
        """Test nodes carry their kind first."""
        layout, _ = rendered
        data = layout_to_dict(layout)
        assert list(data)[0] == "kind"
        assert data["kind"] == "sequence"
        node = data["children"][0]
        assert node["kind"] == "if"
        assert node["condition"] == "x > 0"
        assert node["then_branch"]["kind"] == "sequence"
        assert node["width"] == node["left_width"] + node["right_width"]

    def test_json_serializable(self, complex_tree):
        """Test every layout kind converts to JSON."""
        data = layout_to_dict(build_structogram_layout(complex_tree))
        text = json.dumps(data, ensure_ascii=False)
        assert '"kind": "switch"' in text
        assert '"kind": "try"' in text
        assert '"finally_branch"' in text

    def test_none(self):
        """Test an absent layout."""
        assert layout_to_dict(None) is None


class TestDetectFormat:
    """Tests for detect_format."""

    def test_known_extensions(self):
        """Test supported file extensions."""
        assert detect_format("out.SVG") == "svg"
        assert detect_format("a/b/out.png") == "png"
        assert detect_format("layout.json") == "json"

    def test_unknown_extension(self):
        """Test unsupported extensions raise."""
        with pytest.raises(ExportError):
            detect_format("out.gif")


class TestStructogramExporter:
    """Tests for StructogramExporter."""

    def test_save_svg(self, tmp_path, rendered):
        """Test writing an SVG file."""
        _, drawing = rendered
        output = tmp_path / "if.svg"
        StructogramExporter().save_svg(drawing, str(output))
        content = output.read_text(encoding="utf-8")
        assert content.startswith("<svg")
        assert "if (x &gt; 0)" in content

    def test_save_png(self, tmp_path, rendered):
        """Test writing a PNG file at a given scale."""
        _, drawing = rendered
        output = tmp_path / "if.png"
        StructogramExporter().save_png(drawing, str(output), scale=1, padding=0)
        with Image.open(output) as img:
            assert img.size == (drawing.width, drawing.height)

    def test_save_json(self, tmp_path, rendered):
        """Test writing the layout tree as JSON."""
        layout, _ = rendered
        output = tmp_path / "if.json"
        StructogramExporter().save_json(layout, str(output))
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["width"] == layout.width
        assert data["height"] == layout.height

    def test_save_infers_format(self, tmp_path, rendered):
        """Test save() picks the format from the filename."""
        layout, drawing = rendered
        output = tmp_path / "if.json"
        StructogramExporter().save(drawing, layout, str(output))
        assert json.loads(output.read_text(encoding="utf-8"))["kind"] == "sequence"

    def test_save_explicit_format(self, tmp_path, rendered):
        """Test an explicit format overrides the extension."""
        layout, drawing = rendered
        output = tmp_path / "diagram.out"
        StructogramExporter().save(drawing, layout, str(output), fmt="svg")
        assert output.read_text(encoding="utf-8").startswith("<svg")

    def test_unknown_format(self, tmp_path, rendered):
        """Test an unknown format raises ExportError."""
        layout, drawing = rendered
        with pytest.raises(ExportError):
            StructogramExporter().save(drawing, layout, str(tmp_path / "x.svg"), fmt="bmp")
