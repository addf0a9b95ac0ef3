"""
Tests for StyleResolver and the style catalog cascade.
"""

import pytest

from docx_preview.exceptions import StyleError
from docx_preview.models.elements import (NumberingRef, Paragraph, ParagraphProperties, Run, Table,
                                          TableCell, TableRow)
from docx_preview.models.numbering import (AbstractNumbering, NumberingCatalog, NumberingInstance,
                                           NumberingLevel)
from docx_preview.models.styles import StyleCatalog, StyleDefinition, StyleValues
from docx_preview.styles.style_resolver import StyleResolver


def style(style_id, target="p", based_on=None, is_default=False, **targets):
    values = [StyleValues(target=key, values=value) for key, value in targets.items()]
    return StyleDefinition(id=style_id, target=target, based_on=based_on, is_default=is_default, styles=values)


@pytest.fixture
def catalog():
    return StyleCatalog(
        [
            style("Normal", is_default=True, p={"margin-bottom": "8.00pt"}, span={"font-size": "11.00pt"}),
            style("Heading1", based_on="Normal", p={"text-align": "center"},
                  span={"font-size": "16.00pt", "color": "#2F5496"}),
            style("Title", based_on="Heading1", span={"font-size": "28.00pt"}),
            style("Emphasis", target="span", span={"font-style": "italic", "color": "#FF0000"}),
        ],
        defaults={"p": {"line-height": "1.08"}, "span": {"font-family": "Calibri", "font-size": "10.00pt"}},
    )


@pytest.fixture
def resolver(catalog):
    return StyleResolver(catalog)


class TestStyleCatalog:
    """Test cases for StyleCatalog."""

    def test_chain_order(self, catalog):
        assert [item.id for item in catalog.chain("Title")] == ["Normal", "Heading1", "Title"]

    def test_unknown_style(self, catalog):
        assert catalog.chain("Missing") == []
        assert catalog.get(None) is None

    def test_unknown_parent_ends_chain(self):
        catalog = StyleCatalog([style("A", based_on="Ghost")])
        assert [item.id for item in catalog.chain("A")] == ["A"]

    def test_cycle(self):
        catalog = StyleCatalog([style("A", based_on="B"), style("B", based_on="A")])
        with pytest.raises(StyleError) as error:
            catalog.chain("A")
        assert error.value.details == "A -> B -> A"

    def test_validate_cuts_cycles(self):
        catalog = StyleCatalog([style("A", based_on="B"), style("B", based_on="C"), style("C", based_on="A")])
        messages = catalog.validate()
        assert len(messages) == 1
        assert "removed basedOn of 'C'" in messages[0]
        assert [item.id for item in catalog.chain("A")] == ["C", "B", "A"]

    def test_self_reference(self):
        catalog = StyleCatalog([style("A", based_on="A")])
        assert catalog.validate() == ["Style inheritance cycle: A -> A; removed basedOn of 'A'"]


class TestParagraphCascade:
    """Defaults, then the style chain, then numbering, then direct formatting."""

    def test_inherited_values(self, resolver):
        paragraph = Paragraph(style_name="Title")
        result = resolver.resolve_paragraph(paragraph)
        assert result == {"line-height": "1.08", "margin-bottom": "8.00pt", "text-align": "center"}

    def test_default_paragraph_style(self, resolver):
        assert resolver.paragraph_style_id(Paragraph()) == "Normal"
        assert resolver.paragraph_style_id(Paragraph(style_name="Missing")) == "Normal"

    def test_direct_formatting_wins(self, resolver):
        paragraph = Paragraph(style_name="Heading1", css_style={"text-align": "right"})
        assert resolver.resolve_paragraph(paragraph)["text-align"] == "right"

    def test_numbering_level_between_style_and_direct(self, catalog):
        numbering = NumberingCatalog()
        numbering.abstracts["0"] = AbstractNumbering(id="0", levels={
            0: NumberingLevel(level=0, paragraph_css={"margin-left": "36.00pt", "text-align": "justify"})})
        numbering.instances["1"] = NumberingInstance(id="1", abstract_id="0")
        resolver = StyleResolver(catalog, numbering)
        paragraph = Paragraph(style_name="Heading1", css_style={"margin-left": "10.00pt"},
                              props=ParagraphProperties(numbering=NumberingRef(id="1")))
        result = resolver.resolve_paragraph(paragraph)
        assert result["text-align"] == "justify"
        assert result["margin-left"] == "10.00pt"

    def test_paragraph_properties_layering(self):
        parent = style("Base")
        parent.paragraph_props = ParagraphProperties(keep_next=True, outline_level=1)
        child = style("Child", based_on="Base")
        child.paragraph_props = ParagraphProperties(outline_level=2)
        catalog = StyleCatalog([parent, child], default_paragraph_props=ParagraphProperties(keep_lines=True))
        resolver = StyleResolver(catalog)
        paragraph = Paragraph(style_name="Child", props=ParagraphProperties(page_break_before=True))
        result = resolver.resolve_paragraph_properties(paragraph)
        assert (result.keep_lines, result.keep_next, result.outline_level, result.page_break_before) == \
            (True, True, 2, True)


class TestRunCascade:
    """Defaults, paragraph style run values, character style, direct formatting."""

    def test_run_in_styled_paragraph(self, resolver):
        run = Run(style_name="Emphasis", css_style={"color": "#000000"})
        result = resolver.resolve_run(run, Paragraph(style_name="Title"))
        assert result == {
            "font-family": "Calibri",
            "font-size": "28.00pt",
            "color": "#000000",
            "font-style": "italic",
        }

    def test_character_style_over_paragraph_style(self, resolver):
        result = resolver.resolve_run(Run(style_name="Emphasis"), Paragraph(style_name="Heading1"))
        assert result["color"] == "#FF0000"

    def test_cycle_resolves_to_nothing(self):
        resolver = StyleResolver(StyleCatalog([style("A", based_on="B", p={"color": "red"}),
                                               style("B", based_on="A")]))
        assert resolver.resolve_values("A", "p") == {}


class TestTableCellCascade:
    """Test cases for resolve_table_cell."""

    @pytest.fixture
    def table_resolver(self):
        grid = StyleDefinition(id="Grid", target="table", styles=[
            StyleValues("td", {"padding-left": "5.40pt", "background-color": "white"}),
            StyleValues("td", {"background-color": "#EEEEEE"}, "band1Horz"),
            StyleValues("td", {"background-color": "#4472C4", "color": "white"}, "firstRow"),
        ])
        grid.row_band_size = 2
        return StyleResolver(StyleCatalog([grid]))

    def test_conditional_precedence(self, table_resolver):
        table = Table(style_name="Grid")
        result = table_resolver.resolve_table_cell(table, TableRow(), TableCell(), ["first-row", "odd-row"])
        assert result["background-color"] == "#4472C4"
        assert result["padding-left"] == "5.40pt"

    def test_band_only(self, table_resolver):
        table = Table(style_name="Grid")
        result = table_resolver.resolve_table_cell(table, TableRow(), TableCell(), ["odd-row"])
        assert result["background-color"] == "#EEEEEE"

    def test_direct_formatting_order(self, table_resolver):
        table = Table(style_name="Grid", cell_style={"padding-left": "1.00pt"})
        row = TableRow(cell_style={"padding-left": "2.00pt"})
        cell = TableCell(css_style={"background-color": "yellow"})
        result = table_resolver.resolve_table_cell(table, row, cell, ["first-row"])
        assert result["padding-left"] == "2.00pt"
        assert result["background-color"] == "yellow"

    def test_band_sizes(self, table_resolver):
        assert table_resolver.table_band_sizes(Table(style_name="Grid")) == (2, 1)
        assert table_resolver.table_band_sizes(Table(style_name="Grid", row_band_size=3)) == (3, 1)
