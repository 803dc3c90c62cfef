"""Unit tests for the generator module."""

import json

import pytest
from PIL import Image

from structoflow.export import ExportError
from structoflow.generator import StructogramGenerator
from structoflow.models import MethodInfo, SequenceLayout, StatementNode
from structoflow.theme import StructogramTheme


class TestStructogramGeneratorInit:
    """Tests for StructogramGenerator initialization."""

    def test_default_initialization(self):
        """Test the default theme and settings."""
        gen = StructogramGenerator()
        assert gen.theme == StructogramTheme.light()
        assert gen.debug is False
        assert gen.get_trace() is None

    def test_dark_mode(self):
        """Test dark mode resolves the dark theme."""
        assert StructogramGenerator(dark_mode=True).theme == StructogramTheme.dark()

    def test_monochrome(self):
        """Test colored=False resolves the flat theme."""
        assert StructogramGenerator(colored=False).theme == StructogramTheme.monochrome()

    def test_explicit_theme_wins(self):
        """Test an explicit theme is used as is."""
        theme = StructogramTheme(border="#123456")
        assert StructogramGenerator(theme=theme, dark_mode=True).theme is theme


class TestLayout:
    """Tests for StructogramGenerator.layout."""

    def test_layout_tree(self, generator, simple_tree):
        """Test laying out a control tree."""
        layout = generator.layout(simple_tree)
        assert isinstance(layout, SequenceLayout)
        assert layout.height == 60

    def test_layout_payload(self, generator, tree_payload):
        """Test laying out an analyzer payload."""
        assert isinstance(generator.layout(tree_payload), SequenceLayout)

    def test_layout_none(self, generator):
        """Test a missing tree gives no layout."""
        assert generator.layout(None) is None
        assert generator.layout(MethodInfo(name="f")) is None

    def test_memoized_by_identity(self, generator, simple_tree):
        """Test the same tree object reuses its layout."""
        first = generator.layout(simple_tree)
        assert generator.layout(simple_tree) is first

    def test_new_tree_recomputed(self, generator, simple_tree):
        """Test an equal but different tree is laid out again."""
        first = generator.layout(simple_tree)
        copy = type(simple_tree)(children=tuple(simple_tree.children))
        second = generator.layout(copy)
        assert second is not first
        assert second == first

    def test_custom_text_width(self, simple_tree):
        """Test the injected estimator."""
        gen = StructogramGenerator(text_width=lambda text: 200)
        assert gen.layout(simple_tree).width == 220


class TestRender:
    """Tests for StructogramGenerator.render and generate_svg."""

    def test_method_title(self, generator, method):
        """Test a method is drawn with its declaration."""
        drawing = generator.render(method)
        assert drawing.texts()[0] == "public int sum(int n)"

    def test_explicit_title(self, generator, simple_tree):
        """Test an explicit title."""
        drawing = generator.render(simple_tree, title="Totals")
        assert drawing.texts()[0] == "Totals"

    def test_no_title_for_tree(self, generator, simple_tree):
        """Test a bare tree has no title."""
        drawing = generator.render(simple_tree)
        assert drawing.texts()[0] == "total ← 0"

    def test_render_nothing(self, generator):
        """Test rendering an empty source."""
        assert generator.render(StatementNode("  ")) is None

    def test_generate_svg(self, generator, if_tree):
        """Test SVG generation."""
        svg = generator.generate_svg(if_tree)
        assert svg.startswith("<svg")
        assert "if (x &gt; 0)" in svg

    def test_generate_svg_nothing(self, generator):
        """Test SVG generation with nothing to draw."""
        with pytest.raises(ExportError):
            generator.generate_svg(MethodInfo(name="empty"))


class TestSave:
    """Tests for the generator save methods."""

    def test_save_svg(self, tmp_path, generator, method):
        """Test saving SVG."""
        output = tmp_path / "sum.svg"
        generator.save_svg(method, str(output))
        assert "public int sum(int n)" in output.read_text(encoding="utf-8")

    def test_save_png(self, tmp_path, generator, simple_tree):
        """Test saving PNG at a given scale."""
        output = tmp_path / "simple.png"
        generator.save_png(simple_tree, str(output), scale=3, padding=0)
        drawing = generator.render(simple_tree)
        with Image.open(output) as img:
            assert img.size == (drawing.width * 3, drawing.height * 3)

    def test_save_json(self, tmp_path, generator, switch_tree):
        """Test saving the layout JSON."""
        output = tmp_path / "switch.json"
        generator.save_json(switch_tree, str(output))
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["children"][0]["kind"] == "switch"

    def test_save_by_extension(self, tmp_path, generator, try_tree):
        """Test save() dispatches on the extension."""
        output = tmp_path / "try.svg"
        generator.save(try_tree, str(output))
        assert "finally" in output.read_text(encoding="utf-8")

    def test_save_nothing(self, tmp_path, generator):
        """Test saving an empty source raises."""
        with pytest.raises(ExportError):
            generator.save(None, str(tmp_path / "x.svg"))


class TestDebugMode:
    """Tests for debug traces."""

    def test_trace_stages(self, tree_payload):
        """Test a traced render records every stage."""
        gen = StructogramGenerator(debug=True)
        gen.render(tree_payload)
        trace = gen.get_trace()

        assert [stage.name for stage in trace.stages] == ["parse", "layout", "render"]
        assert trace.get_stage("parse").data["root_kind"] == "sequence"
        assert trace.get_stage("layout").data["decisions"] == len(trace.decisions)
        assert trace.get_decisions_by_kind("if")

    def test_fresh_trace_per_call(self, simple_tree, if_tree):
        """Test each call gets its own trace."""
        gen = StructogramGenerator(debug=True)
        gen.layout(simple_tree)
        first = gen.get_trace()
        gen.layout(if_tree)
        assert gen.get_trace() is not first
        assert not first.get_decisions_by_kind("if")

    def test_debug_bypasses_cache(self, simple_tree):
        """Test traced calls always record decisions."""
        gen = StructogramGenerator(debug=True)
        gen.layout(simple_tree)
        gen.layout(simple_tree)
        assert len(gen.get_trace().decisions) > 0
