from __future__ import annotations

import logging

from .document import HtmlDocument


log = logging.getLogger(__name__)

RTL_STYLESHEET_ID = "rtl-styles"


def apply_direction(document: HtmlDocument, is_rtl: bool, lang: str, stylesheet_href: str) -> None:
    """Set dir/lang on <html>, the rtl/ltr body class and the RTL stylesheet link."""
    root = document.root
    root["dir"] = "rtl" if is_rtl else "ltr"
    root["lang"] = lang

    body = document.body
    classes = [c for c in body.get("class", []) if c not in ("rtl", "ltr")]
    classes.append("rtl" if is_rtl else "ltr")
    body["class"] = classes

    existing = document.get_by_id(RTL_STYLESHEET_ID)
    if is_rtl:
        if existing is None:
            link = document.new_tag("link", id=RTL_STYLESHEET_ID, rel="stylesheet", href=stylesheet_href)
            document.head.append(link)
            log.debug("Added RTL stylesheet %s", stylesheet_href)
    elif existing is not None:
        existing.decompose()
        log.debug("Removed RTL stylesheet")


def has_rtl_stylesheet(document: HtmlDocument) -> bool:
    return document.get_by_id(RTL_STYLESHEET_ID) is not None
