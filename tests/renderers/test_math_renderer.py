"""
Tests for Office math to MathML conversion.
"""


def run(text):
    return f"<m:r><m:t>{text}</m:t></m:r>"


def render_math(docx_builder, render_tree, markup, paragraph=False):
    builder = docx_builder()
    zone = f"<m:oMathPara>{markup}</m:oMathPara>" if paragraph else markup
    builder.body = f"<w:p>{zone}</w:p>"
    body, _ = render_tree(builder.build())
    return body.find(".//article/p")


def tokens(node):
    return [(child.tag, child.text) for child in node.iter("mi", "mn", "mo", "mtext")]


class TestMathZones:
    """Test cases for inline and display math."""

    def test_inline_math(self, docx_builder, render_tree):
        p = render_math(docx_builder, render_tree, f"<m:oMath>{run('x+12')}</m:oMath>")
        math = p.find("math")
        assert math.get("display") is None
        assert tokens(math) == [("mi", "x"), ("mo", "+"), ("mn", "12")]

    def test_display_math(self, docx_builder, render_tree):
        p = render_math(docx_builder, render_tree, f"<m:oMath>{run('a')}</m:oMath>", paragraph=True)
        container = p.find("span")
        assert container.get("class") == "docx-math-paragraph"
        assert container.find("math").get("display") == "block"


class TestConstructs:
    """Test cases for individual constructs."""

    def test_fraction(self, docx_builder, render_tree):
        markup = f"<m:oMath><m:f><m:num>{run('1')}</m:num><m:den>{run('x')}</m:den></m:f></m:oMath>"
        frac = render_math(docx_builder, render_tree, markup).find(".//mfrac")
        numerator, denominator = frac
        assert tokens(numerator) == [("mn", "1")]
        assert tokens(denominator) == [("mi", "x")]

    def test_square_root(self, docx_builder, render_tree):
        markup = (f'<m:oMath><m:rad><m:radPr><m:degHide m:val="1"/></m:radPr><m:deg/>'
                  f"<m:e>{run('2')}</m:e></m:rad></m:oMath>")
        p = render_math(docx_builder, render_tree, markup)
        assert p.find(".//mroot") is None
        assert tokens(p.find(".//msqrt")) == [("mn", "2")]

    def test_root_with_degree(self, docx_builder, render_tree):
        markup = f"<m:oMath><m:rad><m:deg>{run('3')}</m:deg><m:e>{run('8')}</m:e></m:rad></m:oMath>"
        root = render_math(docx_builder, render_tree, markup).find(".//mroot")
        base, degree = root
        assert tokens(base) == [("mn", "8")]
        assert tokens(degree) == [("mn", "3")]

    def test_scripts(self, docx_builder, render_tree):
        markup = (f"<m:oMath><m:sSubSup><m:e>{run('x')}</m:e><m:sub>{run('i')}</m:sub>"
                  f"<m:sup>{run('2')}</m:sup></m:sSubSup>"
                  f"<m:sSup><m:e>{run('e')}</m:e><m:sup>{run('n')}</m:sup></m:sSup></m:oMath>")
        p = render_math(docx_builder, render_tree, markup)
        subsup = p.find(".//msubsup")
        assert [tokens(part) for part in subsup] == [[("mi", "x")], [("mi", "i")], [("mn", "2")]]
        assert len(p.find(".//msup")) == 2

    def test_pre_scripts(self, docx_builder, render_tree):
        markup = (f"<m:oMath><m:sPre><m:sub>{run('1')}</m:sub><m:sup>{run('2')}</m:sup>"
                  f"<m:e>{run('X')}</m:e></m:sPre></m:oMath>")
        node = render_math(docx_builder, render_tree, markup).find(".//mmultiscripts")
        assert [child.tag for child in node] == ["mrow", "mprescripts", "mrow", "mrow"]

    def test_delimiter(self, docx_builder, render_tree):
        markup = (f'<m:oMath><m:d><m:dPr><m:begChr m:val="["/><m:endChr m:val="]"/></m:dPr>'
                  f"<m:e>{run('a')}</m:e><m:e>{run('b')}</m:e></m:d></m:oMath>")
        row = render_math(docx_builder, render_tree, markup).find("math/mrow")
        operators = [(node.text, node.get("fence"), node.get("separator")) for node in row.findall("mo")]
        assert operators == [("[", "true", None), ("|", None, "true"), ("]", "true", None)]

    def test_default_delimiters(self, docx_builder, render_tree):
        markup = f"<m:oMath><m:d><m:e>{run('a')}</m:e></m:d></m:oMath>"
        row = render_math(docx_builder, render_tree, markup).find("math/mrow")
        assert [node.text for node in row.findall("mo")] == ["(", ")"]

    def test_nary_with_limits(self, docx_builder, render_tree):
        markup = (f'<m:oMath><m:nary><m:naryPr><m:chr m:val="\u2211"/></m:naryPr>'
                  f"<m:sub>{run('i=1')}</m:sub><m:sup>{run('n')}</m:sup><m:e>{run('i')}</m:e></m:nary></m:oMath>")
        p = render_math(docx_builder, render_tree, markup)
        limits = p.find(".//munderover")
        assert limits[0].tag == "mo"
        assert limits[0].text == "\u2211"
        assert tokens(limits[1]) == [("mi", "i"), ("mo", "="), ("mn", "1")]

    def test_nary_without_limits(self, docx_builder, render_tree):
        markup = f"<m:oMath><m:nary><m:sub/><m:sup/><m:e>{run('x')}</m:e></m:nary></m:oMath>"
        row = render_math(docx_builder, render_tree, markup).find("math/mrow")
        assert row[0].tag == "mo"
        assert row[0].text == "\u222b"

    def test_function(self, docx_builder, render_tree):
        markup = f"<m:oMath><m:func><m:fName>{run('sin')}</m:fName><m:e>{run('x')}</m:e></m:func></m:oMath>"
        row = render_math(docx_builder, render_tree, markup).find("math/mrow")
        assert tokens(row)[:2] == [("mi", "sin"), ("mo", "\u2061")]

    def test_matrix(self, docx_builder, render_tree):
        markup = (f"<m:oMath><m:m><m:mr><m:e>{run('1')}</m:e><m:e>{run('0')}</m:e></m:mr>"
                  f"<m:mr><m:e>{run('0')}</m:e><m:e>{run('1')}</m:e></m:mr></m:m></m:oMath>")
        table = render_math(docx_builder, render_tree, markup).find(".//mtable")
        assert [len(row.findall("mtd")) for row in table.findall("mtr")] == [2, 2]

    def test_bar(self, docx_builder, render_tree):
        markup = f'<m:oMath><m:bar><m:barPr><m:pos m:val="top"/></m:barPr><m:e>{run("x")}</m:e></m:bar></m:oMath>'
        over = render_math(docx_builder, render_tree, markup).find(".//mover")
        assert over[-1].text == "\u00af"

    def test_unsupported_element_keeps_text(self, docx_builder, render_tree):
        markup = "<m:oMath><m:phant><m:e><m:r><m:t>y</m:t></m:r></m:e></m:phant></m:oMath>"
        p = render_math(docx_builder, render_tree, markup)
        assert tokens(p.find("math")) == [("mtext", "y")]
