"""
Integration tests for AnnotationExporter.

Renders real PDFs with PyMuPDF and inspects the output pages: drawn
rectangles, their colors and opacity, and caption text positions. Output
geometry is converted back to drawing space (origin bottom-left) with the
page height before comparing.

Run with: python -m pytest autodoc/tests/test_export_engine.py -v
"""

import fitz  # PyMuPDF
import pytest

from autodoc.services.pdf_export import (
    AnnotationExporter,
    AnnotationRecord,
    BoxCoords,
    DocumentNotFoundError,
    MalformedDocumentError,
    Rendered,
    Skipped,
    export_annotated_file,
    export_annotated_pdf,
)

RED = (1.0, 0.0, 0.0)
YELLOW = (1.0, 1.0, 0.0)
GREEN = (0.0, 1.0, 0.0)


def annotation(page, x, y, width, height, color=None, comment=None) -> AnnotationRecord:
    return AnnotationRecord(
        page=page,
        coords=BoxCoords(x=x, y=y, width=width, height=height),
        comment=comment,
        color=color,
    )


def open_pdf(data: bytes) -> fitz.Document:
    return fitz.open(stream=data, filetype="pdf")


def rect_items(page: fitz.Page) -> list:
    """All rectangles drawn on the page as (rect, drawing) pairs."""
    found = []
    for drawing in page.get_drawings():
        for item in drawing["items"]:
            if item[0] == "re":
                found.append((fitz.Rect(item[1]), drawing))
    return found


def stroke_colors(page: fitz.Page) -> list:
    return [tuple(d["color"]) for d in page.get_drawings() if d.get("color") is not None]


def fills(page: fitz.Page) -> list:
    return [
        (tuple(d["fill"]), d.get("fill_opacity"))
        for d in page.get_drawings()
        if d.get("fill") is not None
    ]


def spans(page: fitz.Page) -> list:
    found = []
    for block in page.get_text("dict")["blocks"]:
        for line in block.get("lines", []):
            found.extend(line["spans"])
    return found


def caption_spans(page: fitz.Page, text: str) -> list:
    return [s for s in spans(page) if s["text"] == text]


def page_signature(doc: fitz.Document) -> list:
    """Comparable summary of what is drawn and written on each page."""
    signature = []
    for page in doc:
        drawings = sorted(
            (
                tuple(round(v, 2) for v in d["rect"]),
                tuple(d["color"]) if d.get("color") else None,
                tuple(d["fill"]) if d.get("fill") else None,
            )
            for d in page.get_drawings()
        )
        text = [(s["text"], tuple(round(v, 2) for v in s["origin"])) for s in spans(page)]
        signature.append((drawings, text))
    return signature


class TestEmptyExport:
    """Exports without any marks."""

    def test_no_annotations_keeps_document(self, make_pdf):
        """Test that an empty list keeps page count and page content."""
        source = make_pdf(3)
        result = export_annotated_pdf(source, [])

        assert result.page_count == 3
        assert result.outcomes == ()
        with open_pdf(source) as before, open_pdf(result.pdf_bytes) as after:
            assert after.page_count == 3
            assert page_signature(after) == page_signature(before)

    def test_source_bytes_untouched(self, make_pdf):
        """Test that the caller's bytes are never modified."""
        source = make_pdf(1)
        snapshot = bytes(source)
        export_annotated_pdf(source, [annotation(1, 10, 10, 20, 20, "red", "x")])
        assert source == snapshot

    @pytest.mark.parametrize("annotations", [
        [],
        [annotation(1, 1, 1, 1, 1, "red")],
    ])
    def test_repeated_export_is_byte_identical(self, make_pdf, annotations):
        """Test that exporting the same input twice yields the same bytes."""
        source = make_pdf(1)
        first = export_annotated_pdf(source, annotations)
        second = export_annotated_pdf(source, annotations)
        assert first.pdf_bytes == second.pdf_bytes


class TestCoordinates:
    """Geometry of rendered marks."""

    def test_documented_anchor(self, make_pdf):
        """Test (10, 20, 100, 50) on H=800 is anchored at (10, 730)."""
        source = make_pdf(1, height=800)
        result = export_annotated_pdf(source, [annotation(1, 10, 20, 100, 50, "green")])

        outcome = result.outcomes[0]
        assert isinstance(outcome, Rendered)
        assert (outcome.geometry.rect.x, outcome.geometry.rect.y) == (10, 730)

        with open_pdf(result.pdf_bytes) as doc:
            page = doc[0]
            rects = rect_items(page)
            assert len(rects) >= 1
            rect = rects[0][0]
            assert rect.x0 == pytest.approx(10, abs=0.01)
            assert page.rect.height - rect.y1 == pytest.approx(730, abs=0.01)
            assert rect.width == pytest.approx(100, abs=0.01)
            assert rect.height == pytest.approx(50, abs=0.01)

    def test_off_page_and_negative_sizes_do_not_raise(self, make_pdf):
        """Test that out-of-bounds rectangles are drawn anyway."""
        source = make_pdf(1)
        result = export_annotated_pdf(source, [
            annotation(1, 5000, 5000, 10, 10),
            annotation(1, 100, 100, -20, -30, "red"),
        ])

        assert result.rendered_count == 2
        assert result.skipped_count == 0
        with open_pdf(result.pdf_bytes) as doc:
            assert doc.page_count == 1


class TestColors:
    """Colors of rendered marks."""

    @pytest.mark.parametrize("name, rgb", [("yellow", YELLOW), ("green", GREEN), ("red", RED)])
    def test_border_and_fill_use_mapped_color(self, make_pdf, name, rgb):
        """Test outline (opaque) and fill (20% opacity) colors."""
        result = export_annotated_pdf(make_pdf(1), [annotation(1, 50, 50, 100, 40, name)])

        with open_pdf(result.pdf_bytes) as doc:
            page = doc[0]
            assert any(c == pytest.approx(rgb) for c in stroke_colors(page))
            page_fills = fills(page)
            assert any(f == pytest.approx(rgb) for f, _ in page_fills)
            assert all(o == pytest.approx(0.2, abs=0.01) for _, o in page_fills if o is not None)

            widths = [d.get("width") for d in page.get_drawings() if d.get("color") is not None]
            assert any(w == pytest.approx(2.0) for w in widths)

    @pytest.mark.parametrize("name", ["zzz", "", None, "Blue"])
    def test_unknown_color_matches_yellow(self, make_pdf, name):
        """Test that unrecognized colors render exactly like yellow."""
        source = make_pdf(1)
        fallback = export_annotated_pdf(source, [annotation(1, 20, 30, 40, 50, name)])
        yellow = export_annotated_pdf(source, [annotation(1, 20, 30, 40, 50, "yellow")])

        assert fallback.outcomes[0].color == YELLOW
        with open_pdf(fallback.pdf_bytes) as a, open_pdf(yellow.pdf_bytes) as b:
            assert page_signature(a) == page_signature(b)


class TestCaptions:
    """Comment captions below marks."""

    def test_caption_position_and_style(self, make_pdf):
        """Test caption at (x, drawY - 12), size 10, black."""
        result = export_annotated_pdf(
            make_pdf(1, label_pages=False),
            [annotation(1, 30, 40, 60, 20, "red", "Check this")],
        )

        outcome = result.outcomes[0]
        assert outcome.geometry.caption_origin == (30, 792 - 40 - 20 - 12)

        with open_pdf(result.pdf_bytes) as doc:
            page = doc[0]
            found = caption_spans(page, "Check this")
            assert len(found) == 1
            span = found[0]
            assert span["size"] == pytest.approx(10)
            assert span["color"] == 0
            assert span["origin"][0] == pytest.approx(30, abs=0.01)
            assert page.rect.height - span["origin"][1] == pytest.approx(720, abs=0.01)

    def test_no_caption_without_comment(self, make_pdf):
        """Test that empty comments add no text."""
        result = export_annotated_pdf(
            make_pdf(1, label_pages=False),
            [annotation(1, 30, 40, 60, 20, "red", ""), annotation(1, 90, 40, 60, 20)],
        )

        assert all(o.geometry.caption_origin is None for o in result.outcomes)
        with open_pdf(result.pdf_bytes) as doc:
            assert spans(doc[0]) == []

    def test_long_caption_is_not_wrapped(self, make_pdf):
        """Test that captions wider than the page are written on one line."""
        text = "overflow " * 40
        result = export_annotated_pdf(
            make_pdf(1, label_pages=False),
            [annotation(1, 10, 10, 20, 20, "green", text)],
        )

        with open_pdf(result.pdf_bytes) as doc:
            lines = [
                line
                for block in doc[0].get_text("dict")["blocks"]
                for line in block.get("lines", [])
            ]
            origins = {round(s["origin"][1], 1) for line in lines for s in line["spans"]}
            assert len(origins) == 1

    def test_rotated_page_caption_follows_rectangle(self):
        """Test that on a /Rotate page the caption runs along the rectangle's x axis."""
        source = fitz.open()
        source.new_page(width=612, height=792).set_rotation(90)
        data = source.tobytes()
        source.close()

        result = export_annotated_pdf(data, [annotation(1, 10, 20, 100, 50, "red", "A")])

        with open_pdf(result.pdf_bytes) as doc:
            page = doc[0]
            assert page.rotation == 90
            to_pdf = ~page.transformation_matrix

            rects = rect_items(page)
            assert len(rects) >= 1
            drawn = rects[0][0] * to_pdf
            assert (drawn.x0, drawn.y0, drawn.x1, drawn.y1) == pytest.approx((10, 722, 110, 772), abs=0.01)

            lines = [
                line
                for block in page.get_text("dict")["blocks"]
                for line in block.get("lines", [])
                if any(s["text"] == "A" for s in line["spans"])
            ]
            assert len(lines) == 1
            assert lines[0]["dir"] == pytest.approx((1.0, 0.0))
            origin = fitz.Point(lines[0]["spans"][0]["origin"]) * to_pdf
            assert (origin.x, origin.y) == pytest.approx((10, 710), abs=0.01)


class TestSkipping:
    """Out-of-range pages."""

    def test_out_of_range_annotations_leave_no_marks(self, make_pdf):
        """Test that page 0 and page 999 are skipped without failing."""
        source = make_pdf(3)
        result = export_annotated_pdf(source, [
            annotation(0, 10, 10, 10, 10, "red", "zero"),
            annotation(999, 10, 10, 10, 10, "red", "far"),
        ])

        assert result.rendered_count == 0
        assert [o.page for o in result.outcomes] == [0, 999]
        assert all(isinstance(o, Skipped) for o in result.outcomes)
        with open_pdf(source) as before, open_pdf(result.pdf_bytes) as after:
            assert page_signature(after) == page_signature(before)

    def test_skip_is_idempotent(self, make_pdf):
        """Test that adding an out-of-range annotation changes nothing."""
        source = make_pdf(3)
        in_range = annotation(2, 15, 25, 35, 45, "green", "kept")

        with_skip = export_annotated_pdf(source, [in_range, annotation(999, 1, 1, 1, 1, "red")])
        without = export_annotated_pdf(source, [in_range])

        assert with_skip.rendered_count == without.rendered_count == 1
        assert with_skip.pdf_bytes == without.pdf_bytes

    def test_processing_continues_after_skip(self, make_pdf):
        """Test that annotations after a skipped one are still rendered."""
        result = export_annotated_pdf(make_pdf(2), [
            annotation(5, 0, 0, 10, 10),
            annotation(2, 0, 0, 10, 10, "red"),
        ])

        skipped, rendered = result.outcomes
        assert isinstance(skipped, Skipped)
        assert isinstance(rendered, Rendered)
        assert rendered.annotation_index == 1
        assert rendered.page_index == 1


class TestEndToEnd:
    """The two-page reference scenario."""

    def test_two_page_scenario(self, make_pdf):
        """Test red captioned mark on page 1 and yellow fallback on page 2."""
        source = make_pdf(2, height=792, label_pages=False)
        result = AnnotationExporter().export(source, [
            annotation(1, 0, 0, 50, 50, "red", "A"),
            annotation(2, 100, 100, 20, 20, "zzz"),
        ])

        assert result.page_count == 2
        first, second = result.outcomes
        assert first.geometry.rect.y == 742
        assert first.geometry.caption_origin == (0, 730)
        assert first.color == RED
        assert second.geometry.rect.y == 672
        assert second.geometry.caption_origin is None
        assert second.color == YELLOW

        with open_pdf(result.pdf_bytes) as doc:
            assert doc.page_count == 2

            page1, page2 = doc[0], doc[1]
            rect1 = rect_items(page1)[0][0]
            assert page1.rect.height - rect1.y1 == pytest.approx(742, abs=0.01)
            assert any(c == pytest.approx(RED) for c in stroke_colors(page1))
            caption = caption_spans(page1, "A")
            assert len(caption) == 1
            assert page1.rect.height - caption[0]["origin"][1] == pytest.approx(730, abs=0.01)

            rect2 = rect_items(page2)[0][0]
            assert rect2.x0 == pytest.approx(100, abs=0.01)
            assert page2.rect.height - rect2.y1 == pytest.approx(672, abs=0.01)
            assert any(c == pytest.approx(YELLOW) for c in stroke_colors(page2))
            assert spans(page2) == []


class TestFatalErrors:
    """Conditions that abort the export."""

    def test_missing_source(self):
        """Test that a None source is reported as not found."""
        with pytest.raises(DocumentNotFoundError) as exc_info:
            export_annotated_pdf(None, [annotation(1, 0, 0, 1, 1)])
        assert "document not found" in str(exc_info.value)

    def test_missing_file(self, tmp_path):
        """Test that a missing path is reported as not found."""
        with pytest.raises(DocumentNotFoundError):
            export_annotated_file(tmp_path / "missing.pdf", [])

    def test_malformed_source(self):
        """Test that unparseable bytes abort the export."""
        with pytest.raises(MalformedDocumentError):
            export_annotated_pdf(b"%PDF-garbage", [annotation(1, 0, 0, 1, 1)])

    def test_export_from_file(self, make_pdf, tmp_path):
        """Test reading the source from disk."""
        pdf_path = tmp_path / "source.pdf"
        pdf_path.write_bytes(make_pdf(2))

        result = export_annotated_file(pdf_path, [annotation(2, 10, 10, 10, 10, "green")])
        assert result.page_count == 2
        assert result.rendered_count == 1
