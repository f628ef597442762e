"""HTML pretty-printing for compiled output, backed by lxml."""

from __future__ import annotations

import re
from typing import Any

from lxml import etree
from lxml import html as lxml_html


_DOCUMENT = re.compile(r"^\s*(<!doctype|<html[\s>])", re.IGNORECASE)


def prettify(markup: str, options: dict[str, Any] | None = None) -> str:
    """
    Re-indent an HTML document or fragment.

    Parameters
    ----------
    markup : str
        HTML to format. Whole documents keep their doctype.

    options : dict[str, Any] | None
        ``indent_size`` (default 2) and ``indent_char`` (default a space),
        as read from the ``[beautify]`` table of ``views.toml``.

    Returns
    -------
    str
        The formatted markup, ending in a newline.
    """
    if not markup.strip():
        return markup

    options = options or {}
    space = str(options.get("indent_char", " ")) * int(options.get("indent_size", 2))

    if _DOCUMENT.match(markup):
        root = lxml_html.document_fromstring(markup)
        etree.indent(root, space=space)
        doctype = root.getroottree().docinfo.doctype
        return lxml_html.tostring(
            root,
            pretty_print=True,
            encoding="unicode",
            doctype=doctype or None,
        )

    parts: list[str] = []
    for fragment in lxml_html.fragments_fromstring(markup):
        # Leading text before the first element comes back as a plain string
        if isinstance(fragment, str):
            parts.append(fragment.strip())
            continue
        etree.indent(fragment, space=space)
        parts.append(
            lxml_html.tostring(fragment, pretty_print=True, encoding="unicode").strip()
        )

    return "\n".join(part for part in parts if part) + "\n"
