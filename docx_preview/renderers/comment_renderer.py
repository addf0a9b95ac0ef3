"""
Comment renderer.

Best effort: range starts and ends become empty marker spans, each
reference becomes a bubble followed by a popover with the comment text, and
the comment bodies are rendered in a separate ``<aside>`` list.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from lxml import etree

from ..models.elements import Comment, CommentMarker
from ..utils.element_types import DomType
from .dom import append_element, create_element

if TYPE_CHECKING:
    from .html_renderer import HtmlRenderer

logger = logging.getLogger(__name__)

COMMENT_BUBBLE = "\U0001F4AC"


def format_comment_date(value: Optional[str]) -> str:
    """Readable form of an ISO 8601 comment date; unparsable values pass through."""
    if not value:
        return ""
    try:
        date = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return date.strftime("%Y-%m-%d %H:%M")


class CommentRenderer:
    """Renders comment markers and the comment list."""

    def __init__(self, renderer: "HtmlRenderer"):
        self.renderer = renderer
        self.options = renderer.options

    def _comment(self, comment_id: Optional[str]) -> Optional[Comment]:
        if not self.options.render_comments or comment_id is None:
            return None
        return self.renderer.document.comments.get(comment_id)

    def render_marker(self, elem: CommentMarker, parent: etree._Element) -> Optional[etree._Element]:
        """Render a range start, range end or reference; unknown comments render nothing."""
        comment = self._comment(elem.id)
        if comment is None:
            return None
        prefix = self.options.class_name
        if elem.type == DomType.COMMENT_RANGE_START:
            return append_element(parent, "span", f"{prefix}-comment-start", {"data-comment-id": elem.id})
        if elem.type == DomType.COMMENT_RANGE_END:
            return append_element(parent, "span", f"{prefix}-comment-end", {"data-comment-id": elem.id})

        reference = append_element(parent, "span", f"{prefix}-comment-ref",
                                   {"data-comment-id": elem.id}, text=COMMENT_BUBBLE)
        popover = append_element(parent, "span", f"{prefix}-comment-popover")
        append_element(popover, "span", f"{prefix}-comment-author", text=comment.author)
        append_element(popover, "span", f"{prefix}-comment-date", text=format_comment_date(comment.date))
        append_element(popover, "span", f"{prefix}-comment-text", text=comment.get_text())
        return reference

    def render_comment_list(self) -> Optional[etree._Element]:
        """``<aside>`` with one entry per comment, None when there is nothing to show."""
        comments = self.renderer.document.comments
        if not self.options.render_comments or not comments:
            return None
        prefix = self.options.class_name
        result = create_element("aside", f"{prefix}-comments")
        part = self.renderer.document.parts.get("comments")
        for comment in comments.values():
            entry = append_element(result, "div", f"{prefix}-comment",
                                   {"id": f"{prefix}-comment-{comment.id}", "data-comment-id": comment.id})
            append_element(entry, "div", f"{prefix}-comment-author", text=comment.author)
            append_element(entry, "div", f"{prefix}-comment-date", text=format_comment_date(comment.date))
            with self.renderer.part_scope(part):
                self.renderer.render_children(comment, entry)
        return result
