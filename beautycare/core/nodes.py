from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .bundles import LocaleBundle


class NodeKind(str, Enum):
    TEXT = "text"
    PLACEHOLDER = "placeholder"
    TITLE = "title"
    ALT = "alt"
    DOCUMENT_TITLE = "document_title"


# Marker attribute per kind; DOCUMENT_TITLE is a <title> carrying data-i18n
MARKERS = {
    NodeKind.TEXT: "data-i18n",
    NodeKind.PLACEHOLDER: "data-i18n-placeholder",
    NodeKind.TITLE: "data-i18n-title",
    NodeKind.ALT: "data-i18n-alt",
    NodeKind.DOCUMENT_TITLE: "data-i18n",
}

APPLY_ORDER = (
    NodeKind.TEXT,
    NodeKind.PLACEHOLDER,
    NodeKind.TITLE,
    NodeKind.ALT,
    NodeKind.DOCUMENT_TITLE,
)


@dataclass(frozen=True)
class TranslatableNode:
    kind: NodeKind
    key: str
    element: Any = field(default=None, compare=False, repr=False)


def apply_bundle(
    nodes: Iterable[TranslatableNode],
    bundle: Optional[LocaleBundle],
    on_missing: Optional[Callable[[str], None]] = None,
) -> List[Tuple[TranslatableNode, str]]:
    """Pair every node with its translated value, or its key when there is none.

    Output follows APPLY_ORDER, keeping scan order within a kind.
    """
    by_kind = {kind: [] for kind in APPLY_ORDER}
    for node in nodes:
        by_kind[node.kind].append(node)

    pairs: List[Tuple[TranslatableNode, str]] = []
    for kind in APPLY_ORDER:
        for node in by_kind[kind]:
            if not node.key:
                continue
            value = bundle.lookup(node.key) if bundle is not None else None
            if value is None:
                if on_missing is not None:
                    on_missing(node.key)
                value = node.key
            pairs.append((node, value))
    return pairs
