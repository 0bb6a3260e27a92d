"""
HTML sanitising for user-supplied rich text (property descriptions, FAQ
answers, newsletter bodies). Backed by nh3 (ammonia bindings).
"""
import nh3

ALLOWED_TAGS = {
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "br", "hr",
    "ul", "ol", "li",
    "blockquote", "pre", "code",
    "a",
    "strong", "b", "em", "i", "u", "s", "strike", "sub", "sup", "mark",
    "table", "thead", "tbody", "tfoot", "tr", "th", "td", "caption",
    "img", "figure", "figcaption",
    "div", "span",
}

_BLOCK_TAGS_WITH_CLASS = (
    "p", "div", "span", "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li", "blockquote", "pre", "code", "table", "figure",
)

ALLOWED_ATTRIBUTES = {
    "a": {"href", "title"},
    "img": {"src", "alt", "title", "width", "height"},
    "th": {"colspan", "rowspan"},
    "td": {"colspan", "rowspan"},
    **{tag: {"class"} for tag in _BLOCK_TAGS_WITH_CLASS},
}

ALLOWED_URL_SCHEMES = {"http", "https", "mailto"}


def sanitize_html(dirty: str) -> str:
    """Keeps a safe formatting subset; links open in a new tab without an opener."""
    if not dirty:
        return ""
    return nh3.clean(
        dirty,
        tags=ALLOWED_TAGS,
        clean_content_tags={"script", "style"},
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=ALLOWED_URL_SCHEMES,
        link_rel="noopener noreferrer",
        set_tag_attribute_values={"a": {"target": "_blank"}},
    )


def strip_html(dirty: str) -> str:
    """Removes every tag and keeps the text."""
    if not dirty:
        return ""
    return nh3.clean(dirty, tags=set(), clean_content_tags={"script", "style"})
