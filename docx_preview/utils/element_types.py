"""
Element types for the document model.

``DomType`` is the closed set of tags carried by every model node. The parser
and the renderers dispatch on it.
"""

from enum import Enum


class DomType(Enum):
    """Element kinds produced by the document parser."""

    # Document structure
    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    RUN = "run"
    TEXT = "text"
    DELETED_TEXT = "deletedText"
    TAB = "tab"
    SYMBOL = "symbol"
    BREAK = "break"
    NO_BREAK_HYPHEN = "noBreakHyphen"
    SOFT_HYPHEN = "softHyphen"
    HYPERLINK = "hyperlink"
    ALT_CHUNK = "altChunk"

    # Tables
    TABLE = "table"
    TABLE_ROW = "tableRow"
    TABLE_CELL = "tableCell"

    # Bookmarks and fields
    BOOKMARK_START = "bookmarkStart"
    BOOKMARK_END = "bookmarkEnd"
    SIMPLE_FIELD = "simpleField"
    COMPLEX_FIELD = "complexField"
    INSTRUCTION = "instruction"

    # Notes
    FOOTNOTE_REFERENCE = "footnoteReference"
    ENDNOTE_REFERENCE = "endnoteReference"
    FOOTNOTE = "footnote"
    ENDNOTE = "endnote"

    # Headers and footers
    HEADER = "header"
    FOOTER = "footer"

    # Revisions and comments
    INSERTED = "inserted"
    DELETED = "deleted"
    COMMENT = "comment"
    COMMENT_RANGE_START = "commentRangeStart"
    COMMENT_RANGE_END = "commentRangeEnd"
    COMMENT_REFERENCE = "commentReference"

    # Graphics
    DRAWING = "drawing"
    IMAGE = "image"
    VML_PICTURE = "vmlPicture"
    VML_ELEMENT = "vmlElement"

    # Office math
    MML_MATH = "mmlMath"
    MML_MATH_PARAGRAPH = "mmlMathParagraph"
    MML_FRACTION = "mmlFraction"
    MML_NUMERATOR = "mmlNumerator"
    MML_DENOMINATOR = "mmlDenominator"
    MML_RADICAL = "mmlRadical"
    MML_DEGREE = "mmlDegree"
    MML_BASE = "mmlBase"
    MML_SUPERSCRIPT = "mmlSuperscript"
    MML_SUBSCRIPT = "mmlSubscript"
    MML_SUB_SUPERSCRIPT = "mmlSubSuperscript"
    MML_PRE_SUB_SUPER = "mmlPreSubSuper"
    MML_SUPER_ARGUMENT = "mmlSuperArgument"
    MML_SUB_ARGUMENT = "mmlSubArgument"
    MML_DELIMITER = "mmlDelimiter"
    MML_NARY = "mmlNary"
    MML_FUNCTION = "mmlFunction"
    MML_FUNCTION_NAME = "mmlFunctionName"
    MML_LIMIT = "mmlLimit"
    MML_LIMIT_LOWER = "mmlLimitLower"
    MML_LIMIT_UPPER = "mmlLimitUpper"
    MML_MATRIX = "mmlMatrix"
    MML_MATRIX_ROW = "mmlMatrixRow"
    MML_EQUATION_ARRAY = "mmlEquationArray"
    MML_BOX = "mmlBox"
    MML_BAR = "mmlBar"
    MML_GROUP_CHAR = "mmlGroupChar"
    MML_RUN = "mmlRun"
    MML_TEXT = "mmlText"


# Office math local names mapped to their tags. Anything outside this map
# degrades to MML_TEXT.
MATH_TAGS = {
    "oMath": DomType.MML_MATH,
    "oMathPara": DomType.MML_MATH_PARAGRAPH,
    "f": DomType.MML_FRACTION,
    "num": DomType.MML_NUMERATOR,
    "den": DomType.MML_DENOMINATOR,
    "rad": DomType.MML_RADICAL,
    "deg": DomType.MML_DEGREE,
    "e": DomType.MML_BASE,
    "sSup": DomType.MML_SUPERSCRIPT,
    "sSub": DomType.MML_SUBSCRIPT,
    "sSubSup": DomType.MML_SUB_SUPERSCRIPT,
    "sPre": DomType.MML_PRE_SUB_SUPER,
    "sup": DomType.MML_SUPER_ARGUMENT,
    "sub": DomType.MML_SUB_ARGUMENT,
    "d": DomType.MML_DELIMITER,
    "nary": DomType.MML_NARY,
    "func": DomType.MML_FUNCTION,
    "fName": DomType.MML_FUNCTION_NAME,
    "lim": DomType.MML_LIMIT,
    "limLow": DomType.MML_LIMIT_LOWER,
    "limUpp": DomType.MML_LIMIT_UPPER,
    "m": DomType.MML_MATRIX,
    "mr": DomType.MML_MATRIX_ROW,
    "eqArr": DomType.MML_EQUATION_ARRAY,
    "box": DomType.MML_BOX,
    "borderBox": DomType.MML_BOX,
    "bar": DomType.MML_BAR,
    "groupChr": DomType.MML_GROUP_CHAR,
}

NOTE_TYPES = (DomType.FOOTNOTE, DomType.ENDNOTE)
