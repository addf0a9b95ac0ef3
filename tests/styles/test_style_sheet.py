"""
Tests for stylesheet generation.
"""

from docx_preview.models.parts import Theme
from docx_preview.models.styles import StyleCatalog, StyleDefinition, StyleValues
from docx_preview.options import Options
from docx_preview.styles.style_resolver import StyleResolver
from docx_preview.styles.style_sheet import (StyleSheet, css_declarations, escape_class_name,
                                             render_theme_styles, style_to_string)


def make_sheet(styles, defaults=None, options=None):
    catalog = StyleCatalog(styles, defaults)
    return StyleSheet(catalog, StyleResolver(catalog), options or Options())


class TestHelpers:
    """Test cases for the CSS helpers."""

    def test_escape_class_name(self):
        assert escape_class_name("Heading 1") == "heading-1"
        assert escape_class_name("Table.Grid") == "table-grid"
        assert escape_class_name("Q&A") == "qanda"

    def test_declarations_skip_attributes(self):
        assert css_declarations({"color": "red", "$lang": "en-US"}) == "color: red;"

    def test_style_to_string(self):
        assert style_to_string(".a", {"color": "red"}) == ".a {\r\ncolor: red;\r\n}\r\n"
        assert style_to_string(".a", {}) == ""


class TestStyleSheet:
    """Test cases for StyleSheet."""

    def test_class_for(self):
        sheet = make_sheet([StyleDefinition(id="Heading 1", target="p")])
        assert sheet.class_for("Heading 1") == "docx_heading-1"
        assert sheet.class_for("Unknown") is None
        assert sheet.class_for(None) is None

    def test_class_prefix_option(self):
        sheet = make_sheet([StyleDefinition(id="Normal", target="p")], options=Options(class_name="preview"))
        assert sheet.class_for("Normal") == "preview_normal"

    def test_rule_order_follows_cascade(self):
        sheet = make_sheet(
            [
                StyleDefinition(id="Strong", target="span", styles=[StyleValues("span", {"font-weight": "bold"})]),
                StyleDefinition(id="Normal", target="p", is_default=True,
                                styles=[StyleValues("p", {"margin-bottom": "8.00pt"})]),
                StyleDefinition(id="Grid", target="table", styles=[StyleValues("p", {"margin-bottom": "0pt"})]),
            ],
            defaults={"span": {"font-size": "11.00pt"}},
        )
        css = sheet.render()
        defaults = css.index(".docx span {")
        table = css.index(".docx :where(table.docx_grid) p {")
        paragraph = css.index(".docx p, .docx p.docx_normal {")
        character = css.index(".docx p span.docx_strong {")
        assert defaults < table < paragraph < character

    def test_inherited_values_are_flattened(self):
        sheet = make_sheet([
            StyleDefinition(id="Base", target="p", styles=[StyleValues("span", {"color": "red"})]),
            StyleDefinition(id="Child", target="p", based_on="Base",
                            styles=[StyleValues("span", {"font-size": "12.00pt"})]),
        ])
        css = sheet.render()
        assert ".docx p.docx_child span {\r\ncolor: red; font-size: 12.00pt;\r\n}" in css

    def test_table_conditions(self):
        sheet = make_sheet([
            StyleDefinition(id="Grid", target="table", styles=[
                StyleValues("span", {"font-weight": "bold"}, "firstRow"),
                StyleValues("p", {"text-align": "center"}, "lastCol"),
            ]),
        ])
        css = sheet.render()
        assert ".docx :where(table.docx_grid tr.first-row td) span" in css
        assert ".docx :where(table.docx_grid td.last-col) p" in css


class TestThemeStyles:
    """Test cases for render_theme_styles."""

    def test_variables(self):
        theme = Theme(colors={"accent1": "4472C4"}, major_font="Calibri Light", minor_font="Calibri")
        css = render_theme_styles(theme)
        assert css.startswith(".docx {")
        assert "--docx-accent1-color: #4472C4;" in css
        assert "--docx-majorHAnsi-font: Calibri Light;" in css
        assert "--docx-minorHAnsi-font: Calibri;" in css

    def test_no_theme(self):
        assert render_theme_styles(None) == ""
