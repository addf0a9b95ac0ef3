"""
Tests for table rendering: grid, merges, header rows and conditional classes.
"""

from docx_preview.models.elements import Table
from docx_preview.renderers.table_renderer import cell_flags, grid_width, row_flags


def cell(text, properties=""):
    tcpr = f"<w:tcPr>{properties}</w:tcPr>" if properties else ""
    return f"<w:tc>{tcpr}<w:p><w:r><w:t>{text}</w:t></w:r></w:p></w:tc>"


def row(*cells, properties=""):
    trpr = f"<w:trPr>{properties}</w:trPr>" if properties else ""
    return f"<w:tr>{trpr}{''.join(cells)}</w:tr>"


def table(*rows, properties="", grid=("2000", "2000")):
    columns = "".join(f'<w:gridCol w:w="{width}"/>' for width in grid)
    tblpr = f"<w:tblPr>{properties}</w:tblPr>" if properties else ""
    return f"<w:tbl>{tblpr}<w:tblGrid>{columns}</w:tblGrid>{''.join(rows)}</w:tbl>"


def render_table(docx_builder, render_tree, markup, **options):
    builder = docx_builder()
    builder.body = markup
    body, styles = render_tree(builder.build(), **options)
    return body.find(".//table"), styles


def texts(tr):
    return ["".join(td.itertext()) for td in tr.findall("td")]


class TestFlags:
    """Test cases for the conditional format helpers."""

    def test_row_flags_with_header(self):
        table = Table(look=["first-row", "last-row"])
        assert row_flags(table, 0, 4) == ["first-row"]
        assert row_flags(table, 1, 4) == ["odd-row"]
        assert row_flags(table, 2, 4) == ["even-row"]
        assert row_flags(table, 3, 4) == ["last-row"]

    def test_row_band_size(self):
        table = Table()
        assert [row_flags(table, index, 4, 2)[0] for index in range(4)] == \
            ["odd-row", "odd-row", "even-row", "even-row"]

    def test_no_banding(self):
        assert row_flags(Table(look=["no-hband"]), 1, 3) == []

    def test_corner_cells(self):
        table = Table(look=["first-row", "first-col", "last-col"])
        assert cell_flags(table, 0, 1, 3, row_classes=["first-row"]) == ["first-col", "nw-cell"]
        assert cell_flags(table, 2, 1, 3, row_classes=["first-row"]) == ["last-col", "ne-cell"]
        assert cell_flags(table, 1, 1, 3) == ["odd-col"]

    def test_span_reaching_last_column(self):
        table = Table(look=["last-col"])
        assert "last-col" in cell_flags(table, 1, 2, 3)


class TestTableRenderer:
    """Test cases for the rendered table markup."""

    def test_grid(self, docx_builder, render_tree):
        node, _ = render_table(docx_builder, render_tree,
                               table(row(cell("a"), cell("b")), row(cell("c"), cell("d"))))
        cols = node.findall("colgroup/col")
        assert [col.get("style") for col in cols] == ["width: 100.00pt;", "width: 100.00pt;"]
        rows = node.findall("tr")
        assert [texts(tr) for tr in rows] == [["a", "b"], ["c", "d"]]
        assert node.find("tbody") is None

    def test_banding_classes(self, docx_builder, render_tree):
        node, _ = render_table(docx_builder, render_tree,
                               table(row(cell("a"), cell("b")), row(cell("c"), cell("d"))))
        rows = node.findall("tr")
        assert [tr.get("class") for tr in rows] == ["odd-row", "even-row"]
        assert [td.get("class") for td in rows[0]] == ["odd-col", "even-col"]

    def test_vertical_and_horizontal_merges(self, docx_builder, render_tree):
        markup = table(
            row(cell("a", '<w:vMerge w:val="restart"/>'), cell("b")),
            row(cell("", "<w:vMerge/>"), cell("c")),
            row(cell("d", '<w:gridSpan w:val="2"/>')),
        )
        node, _ = render_table(docx_builder, render_tree, markup)
        rows = node.findall("tr")
        assert [len(tr) for tr in rows] == [2, 1, 1]
        assert rows[0][0].get("rowspan") == "2"
        assert texts(rows[1]) == ["c"]
        assert rows[2][0].get("colspan") == "2"

    def test_two_by_two_span(self, docx_builder, render_tree):
        markup = table(
            row(cell("a", '<w:gridSpan w:val="2"/><w:vMerge w:val="restart"/>'), cell("b")),
            row(cell("hidden", '<w:gridSpan w:val="2"/><w:vMerge/>'), cell("c")),
            grid=("2000", "2000", "2000"),
        )
        node, _ = render_table(docx_builder, render_tree, markup)
        assert len(node.findall(".//td")) == 3
        origin = node.find("tr/td")
        assert origin.get("colspan") == "2"
        assert origin.get("rowspan") == "2"
        assert [texts(tr) for tr in node.findall("tr")] == [["a", "b"], ["c"]]
        assert "hidden" not in "".join(node.itertext())

    def test_merge_ends_at_new_cell(self, docx_builder, render_tree):
        markup = table(
            row(cell("a", '<w:vMerge w:val="restart"/>'), cell("b")),
            row(cell("x"), cell("c")),
            row(cell("", "<w:vMerge/>"), cell("d")),
        )
        node, _ = render_table(docx_builder, render_tree, markup)
        rows = node.findall("tr")
        assert rows[0][0].get("rowspan") is None
        assert texts(rows[2]) == ["", "d"]

    def test_header_rows(self, docx_builder, render_tree):
        markup = table(
            row(cell("h1"), cell("h2"), properties="<w:tblHeader/>"),
            row(cell("a"), cell("b")),
            row(cell("c"), cell("d")),
        )
        node, _ = render_table(docx_builder, render_tree, markup)
        assert [texts(tr) for tr in node.findall("thead/tr")] == [["h1", "h2"]]
        assert len(node.findall("tbody/tr")) == 2

    def test_header_row_after_body_row(self, docx_builder, render_tree):
        markup = table(row(cell("a"), cell("b")), row(cell("h1"), cell("h2"), properties="<w:tblHeader/>"))
        node, _ = render_table(docx_builder, render_tree, markup)
        assert node.find("thead") is None
        assert len(node.findall("tr")) == 2

    def test_grid_before_and_after(self, docx_builder, render_tree):
        markup = table(
            row(cell("a"), properties='<w:gridBefore w:val="1"/>'),
            row(cell("b"), properties='<w:gridAfter w:val="1"/>'),
        )
        node, _ = render_table(docx_builder, render_tree, markup)
        first, second = node.findall("tr")
        assert first[0].get("colspan") == "1"
        assert first[0].get("style") == "border: none;"
        assert texts(first) == ["", "a"]
        assert second[1].get("style") == "border: none;"

    def test_cnf_style_overrides_computed_flags(self, docx_builder, render_tree):
        markup = table(row(cell("a", '<w:cnfStyle w:val="001000000000"/>'), cell("b"),
                           properties='<w:cnfStyle w:val="100000000000"/>'))
        node, _ = render_table(docx_builder, render_tree, markup)
        tr = node.find("tr")
        assert tr.get("class") == "first-row"
        assert tr[0].get("class") == "first-col"

    def test_table_style_conditions(self, docx_builder, render_tree, css_text):
        builder = docx_builder()
        builder.with_styles('<w:style w:type="table" w:styleId="Grid">'
                            '<w:tblStylePr w:type="firstRow"><w:rPr><w:b/></w:rPr>'
                            '<w:tcPr><w:shd w:val="clear" w:fill="4472C4"/></w:tcPr></w:tblStylePr></w:style>')
        builder.body = table(row(cell("h"), cell("h")), row(cell("a"), cell("b")),
                             properties='<w:tblStyle w:val="Grid"/><w:tblLook w:firstRow="1"/>')
        body, styles = render_tree(builder.build())
        node = body.find(".//table")
        assert node.get("class") == "docx_grid"
        first = node.find("tr")
        assert first.get("class") == "first-row"
        assert first[0].get("style") == "background-color: #4472C4;"
        assert ".docx :where(table.docx_grid tr.first-row td) span {\r\nfont-weight: bold;\r\n}" in css_text(styles)

    def test_width(self):
        assert grid_width(Table()) == 0
