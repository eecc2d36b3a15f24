"""Tests for the delta to HTML formatter."""
from app.services.content_formatter import ContentFormatter


def image_op(source):
    return {"insert": {"_type": "image", "source": source}}


class TestTextFormatting:
    """Text operations become escaped, wrapped and styled HTML."""

    def test_plain_text_is_paragraph(self):
        assert ContentFormatter.format_text("Hello", {}) == "<p>Hello</p>"

    def test_heading_levels(self):
        assert ContentFormatter.format_text("Day", {"h": 1}) == "<h1>Day</h1>"
        assert ContentFormatter.format_text("Day", {"h": 6}) == "<h6>Day</h6>"

    def test_out_of_range_or_non_int_heading_is_paragraph(self):
        assert ContentFormatter.format_text("Day", {"h": 7}) == "<p>Day</p>"
        assert ContentFormatter.format_text("Day", {"h": "2"}) == "<p>Day</p>"
        assert ContentFormatter.format_text("Day", {"h": True}) == "<p>Day</p>"

    def test_text_is_escaped(self):
        html = ContentFormatter.format_text("<script>alert('x')</script>", {})
        assert "<script>" not in html
        assert html.startswith("<p>&lt;script&gt;")

    def test_styles_apply_in_fixed_order(self):
        html = ContentFormatter.format_text(
            "x", {"size": 14, "color": "red", "s": True, "u": True, "i": True, "b": True}
        )
        assert html == (
            "<span style='font-size: 14px'>"
            "<span style='color: red'>"
            "<s><u><i><b><p>x</p></b></i></u></s>"
            "</span></span>"
        )

    def test_style_values_are_escaped(self):
        html = ContentFormatter.format_text("x", {"color": "red'><script>"})
        assert "<script>" not in html


class TestFormat:
    """Whole-payload formatting."""

    def test_non_sequence_is_reported_not_raised(self, storage):
        result = ContentFormatter(storage).format({"insert": "x"}, 1, [])

        assert not result.ok
        assert result.error == "Invalid content format"
        assert result.html == ""
        assert not storage.root.exists()

    def test_text_operations_concatenate_in_order(self, storage):
        content = [
            {"insert": "Title", "attributes": {"h": 2}},
            {"insert": "Body", "attributes": {"b": True}},
        ]
        result = ContentFormatter(storage).format(content, 1, [])

        assert result.ok
        assert result.html == "<h2>Title</h2><b><p>Body</p></b>"
        assert result.image_paths == []

    def test_unknown_operations_are_skipped(self, storage):
        content = ["stray", {"insert": 42}, {"insert": {"_type": "video"}}, {"insert": "ok"}]
        result = ContentFormatter(storage).format(content, 1, [])

        assert result.html == "<p>ok</p>"

    def test_malformed_attributes_keep_plain_text(self, storage):
        content = [
            {"insert": "list", "attributes": ["b"]},
            {"insert": "string", "attributes": "bold"},
            {"insert": "none", "attributes": None},
        ]
        result = ContentFormatter(storage).format(content, 1, [])

        assert result.ok
        assert result.html == "<p>list</p><p>string</p><p>none</p>"

    def test_images_pair_with_uploads_by_position(self, storage):
        storage.put("tmp/first.jpg", b"first")
        storage.put("tmp/second.jpg", b"second")
        uploads = ["journal/1/a.png", "journal/1/b.png"]
        content = [
            image_op("tmp/second.jpg"),
            {"insert": "between"},
            image_op("tmp/first.jpg"),
        ]

        result = ContentFormatter(storage).format(content, 1, uploads)

        assert result.ok
        assert result.html == (
            f"<img src='{storage.url('journal/1/a.png')}'>"
            "<p>between</p>"
            f"<img src='{storage.url('journal/1/b.png')}'>"
        )
        assert len(result.image_paths) == 2
        assert all(p.startswith("uploads/1/") and p.endswith(".jpg") for p in result.image_paths)
        assert storage.path(result.image_paths[0]).read_bytes() == b"second"
        assert storage.path(result.image_paths[1]).read_bytes() == b"first"

    def test_missing_source_still_renders_upload(self, storage):
        result = ContentFormatter(storage).format(
            [image_op("tmp/missing.jpg")], 1, ["journal/1/a.png"]
        )

        assert result.ok
        assert result.html == f"<img src='{storage.url('journal/1/a.png')}'>"
        assert result.image_paths == []

    def test_source_outside_storage_is_not_copied(self, storage):
        result = ContentFormatter(storage).format(
            [image_op("../../etc/passwd"), image_op("/etc/passwd")],
            1,
            ["journal/1/a.png", "journal/1/b.png"],
        )

        assert result.ok
        assert result.image_paths == []

    def test_more_images_than_uploads_fails(self, storage):
        result = ContentFormatter(storage).format(
            [image_op("tmp/a.jpg"), image_op("tmp/b.jpg")], 1, ["journal/1/a.png"]
        )

        assert not result.ok
        assert "Image 2" in result.error
