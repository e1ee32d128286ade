from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

from ...core.nodes import MARKERS, NodeKind, TranslatableNode


log = logging.getLogger(__name__)

SWITCHER_SELECTORS = (".language-switcher-menu", ".language-switcher")


def _marker_node(kind: NodeKind, el: Tag) -> Optional[TranslatableNode]:
    key = str(el.get(MARKERS[kind]) or "").strip()
    if not key:
        # Blank markers leave the element as authored
        log.debug("Skipping empty %s marker on <%s>", MARKERS[kind], el.name)
        return None
    return TranslatableNode(kind=kind, key=key, element=el)


class HtmlDocument:
    """A parsed page that the translator reads markers from and writes into."""

    def __init__(self, soup: BeautifulSoup, path: Optional[Path] = None) -> None:
        self.soup = soup
        self.path = path
        self._ensure_skeleton()

    @classmethod
    def from_string(cls, markup: str) -> "HtmlDocument":
        return cls(BeautifulSoup(markup, "html.parser"))

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "HtmlDocument":
        p = Path(path)
        return cls(BeautifulSoup(p.read_text(encoding="utf-8"), "html.parser"), path=p)

    def _ensure_skeleton(self) -> None:
        html = self.soup.find("html")
        if html is None:
            html = self.soup.new_tag("html")
            for child in list(self.soup.contents):
                html.append(child.extract())
            self.soup.append(html)
        if html.find("head") is None:
            html.insert(0, self.soup.new_tag("head"))
        if html.find("body") is None:
            html.append(self.soup.new_tag("body"))

    # Structure

    @property
    def root(self) -> Tag:
        return self.soup.find("html")  # type: ignore[return-value]

    @property
    def head(self) -> Tag:
        return self.root.find("head")  # type: ignore[return-value]

    @property
    def body(self) -> Tag:
        return self.root.find("body")  # type: ignore[return-value]

    def new_tag(self, name: str, **attrs: str) -> Tag:
        return self.soup.new_tag(name, attrs=attrs)

    def get_by_id(self, element_id: str) -> Optional[Tag]:
        return self.soup.find(id=element_id)

    def find_switcher(self) -> Optional[Tag]:
        for selector in SWITCHER_SELECTORS:
            found = self.soup.select_one(selector)
            if found is not None:
                return found
        return None

    # Translation markers

    def scan(self) -> List[TranslatableNode]:
        """Collect every element carrying a non-empty translation marker."""
        nodes: List[TranslatableNode] = []
        for kind in (NodeKind.TEXT, NodeKind.PLACEHOLDER, NodeKind.TITLE, NodeKind.ALT):
            attr = MARKERS[kind]
            for el in self.soup.find_all(attrs={attr: True}):
                if kind is NodeKind.TEXT and el.name == "title":
                    continue
                node = _marker_node(kind, el)
                if node is not None:
                    nodes.append(node)
        title = self.soup.find("title", attrs={MARKERS[NodeKind.DOCUMENT_TITLE]: True})
        if title is not None:
            node = _marker_node(NodeKind.DOCUMENT_TITLE, title)
            if node is not None:
                nodes.append(node)
        return nodes

    def write(self, node: TranslatableNode, value: str) -> None:
        el: Tag = node.element
        if node.kind in (NodeKind.TEXT, NodeKind.DOCUMENT_TITLE):
            el.string = value
        elif node.kind is NodeKind.PLACEHOLDER:
            el["placeholder"] = value
        elif node.kind is NodeKind.TITLE:
            el["title"] = value
        elif node.kind is NodeKind.ALT:
            el["alt"] = value

    # Output

    def render(self) -> str:
        return str(self.soup)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("No output path given and document was not loaded from a file")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.render(), encoding="utf-8")
        log.info("Wrote %s", target)
        return target
