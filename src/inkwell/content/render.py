"""
Render-on-read for paragraph content.

Paragraphs are stored as raw source; `render` turns markdown into HTML at
fetch time and leaves every other type untouched. It performs no I/O and
keeps no state between calls.
"""

import markdown as markdown_lib

from inkwell.core.exceptions import RenderError

from .models import ParagraphType

MARKDOWN_EXTENSIONS = ("extra", "sane_lists")


def render_markdown(text: str | None) -> str:
    """Convert markdown source to an HTML fragment.

    Raises:
        RenderError: If the markdown library fails on the input.

    Example:
        >>> render_markdown("# Hi")
        '<h1>Hi</h1>'
    """
    if not text:
        return ""
    try:
        return markdown_lib.markdown(
            text,
            extensions=list(MARKDOWN_EXTENSIONS),
            output_format="html",
        )
    except Exception as e:
        msg = f"Markdown conversion failed: {e}"
        raise RenderError(msg) from e


def render(content: str, paragraph_type: ParagraphType) -> str | None:
    """Rendered HTML for a paragraph, or None when the raw content is used.

    Example:
        >>> render("# Hi", ParagraphType.MARKDOWN)
        '<h1>Hi</h1>'
        >>> render("# Hi", ParagraphType.HTML) is None
        True
    """
    match paragraph_type:
        case ParagraphType.MARKDOWN:
            return render_markdown(content)
        case ParagraphType.HTML:
            return None
