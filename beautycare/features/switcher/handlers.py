from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional

from bs4 import Tag

from ..page.document import HtmlDocument


log = logging.getLogger(__name__)

BUTTON_CLASS = "lang-btn"
ACTIVE_CLASS = "active"
LOADING_CLASS = "loading"

# (code, flag, label) for buttons created on pages that ship an empty container
DEFAULT_BUTTONS = (
    ("en", "\U0001F1EC\U0001F1E7", "English"),
    ("he", "\U0001F1EE\U0001F1F1", "עברית"),
)

ClickHandler = Callable[[str], Awaitable[None]]


def _classes(el: Tag) -> List[str]:
    value = el.get("class") or []
    if isinstance(value, str):
        return value.split()
    return list(value)


def _add_class(el: Tag, name: str) -> None:
    classes = _classes(el)
    if name not in classes:
        classes.append(name)
    el["class"] = classes


def _remove_class(el: Tag, name: str) -> None:
    classes = [c for c in _classes(el) if c != name]
    if classes:
        el["class"] = classes
    elif el.has_attr("class"):
        del el["class"]


class LanguageSwitcher:
    def __init__(self, document: HtmlDocument, container: Tag) -> None:
        self.document = document
        self.container = container
        self._handler: Optional[ClickHandler] = None

    @classmethod
    def locate(cls, document: HtmlDocument) -> Optional["LanguageSwitcher"]:
        container = document.find_switcher()
        if container is None:
            return None
        return cls(document, container)

    @property
    def buttons(self) -> List[Tag]:
        return self.container.select(f".{BUTTON_CLASS}")

    def languages(self) -> List[str]:
        return [str(b.get("data-lang")) for b in self.buttons if b.get("data-lang")]

    def ensure_buttons(self) -> None:
        if self.buttons:
            return
        self.container.clear()
        for code, flag, label in DEFAULT_BUTTONS:
            btn = self.document.new_tag("button", **{"class": BUTTON_CLASS, "data-lang": code})
            icon = self.document.new_tag("span", **{"class": "flag-icon"})
            icon.string = flag
            name = self.document.new_tag("span", **{"class": "lang-name"})
            name.string = label
            btn.append(icon)
            btn.append(name)
            self.container.append(btn)
        log.debug("Created %d language buttons", len(DEFAULT_BUTTONS))

    def mark_active(self, code: str) -> None:
        for btn in self.buttons:
            if btn.get("data-lang") == code:
                _add_class(btn, ACTIVE_CLASS)
            else:
                _remove_class(btn, ACTIVE_CLASS)

    def active_languages(self) -> List[str]:
        return [str(b.get("data-lang")) for b in self.buttons if ACTIVE_CLASS in _classes(b)]

    def set_loading(self, loading: bool) -> None:
        if loading:
            _add_class(self.container, LOADING_CLASS)
        else:
            _remove_class(self.container, LOADING_CLASS)

    def bind(self, handler: ClickHandler) -> None:
        self._handler = handler

    async def click(self, code: str) -> None:
        """Dispatch a press on the button for ``code`` to the bound handler."""
        if code not in self.languages():
            log.warning("No language button for %s", code)
            return
        if self._handler is None:
            log.debug("Language button %s pressed before the switcher was bound", code)
            return
        await self._handler(code)
