from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from importlib import resources
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from .errors import MalformedBundle


log = logging.getLogger(__name__)

EMBEDDED_PACKAGE = "beautycare.locales"

ORIGIN_REMOTE = "remote"
ORIGIN_EMBEDDED = "embedded"


def validate_messages(data: Any, path: str = "") -> None:
    """Raise MalformedBundle unless ``data`` is a nested mapping of strings."""
    if not isinstance(data, dict):
        where = path or "<root>"
        raise MalformedBundle(f"expected an object at {where}, got {type(data).__name__}")
    if not path and not data:
        raise MalformedBundle("bundle is empty")
    for k, v in data.items():
        if not isinstance(k, str) or not k or "." in k:
            raise MalformedBundle(f"invalid key {k!r} under {path or '<root>'}")
        child = f"{path}.{k}" if path else k
        if isinstance(v, dict):
            validate_messages(v, child)
        elif not isinstance(v, str):
            raise MalformedBundle(f"expected a string at {child}, got {type(v).__name__}")


def _freeze(data: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(
        {k: _freeze(v) if isinstance(v, Mapping) else v for k, v in data.items()}
    )


def _thaw(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _thaw(v) if isinstance(v, Mapping) else v for k, v in data.items()}


@dataclass(frozen=True)
class LocaleBundle:
    code: str
    messages: Mapping[str, Any] = field(repr=False)
    origin: str = ORIGIN_REMOTE

    @classmethod
    def from_dict(cls, code: str, data: Any, origin: str = ORIGIN_REMOTE) -> "LocaleBundle":
        validate_messages(data)
        return cls(code=code, messages=_freeze(data), origin=origin)

    def lookup(self, key: str) -> Optional[str]:
        return resolve_key(self.messages, key)

    def flatten(self) -> Dict[str, str]:
        return flatten(self.messages)

    def to_dict(self) -> Dict[str, Any]:
        return _thaw(self.messages)


def resolve_key(messages: Mapping[str, Any], key: str) -> Optional[str]:
    """Walk ``key`` split on dots; None unless it ends on a non-empty string."""
    if not key:
        return None
    value: Any = messages
    for part in key.split("."):
        if isinstance(value, Mapping) and part in value:
            value = value[part]
        else:
            return None
    if isinstance(value, str) and value:
        return value
    return None


def flatten(messages: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    out: Dict[str, str] = {}
    for k, v in messages.items():
        dotted = f"{prefix}.{k}" if prefix else k
        if isinstance(v, Mapping):
            out.update(flatten(v, dotted))
        else:
            out[dotted] = v
    return out


@dataclass
class BundleDiff:
    missing: List[str] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)
    changed: List[str] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        return not (self.missing or self.extra or self.changed)


def diff_bundles(source: Mapping[str, Any], copy: Mapping[str, Any]) -> BundleDiff:
    """Compare ``copy`` against ``source``, the source of truth."""
    a = flatten(source)
    b = flatten(copy)
    return BundleDiff(
        missing=sorted(set(a) - set(b)),
        extra=sorted(set(b) - set(a)),
        changed=sorted(k for k in set(a) & set(b) if a[k] != b[k]),
    )


_embedded: Dict[str, LocaleBundle] = {}


def load_embedded(code: str) -> Optional[LocaleBundle]:
    """Return the bundle shipped inside the package, or None if there is none."""
    if code in _embedded:
        return _embedded[code]
    try:
        with embedded_path(code).open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        bundle = LocaleBundle.from_dict(code, data, origin=ORIGIN_EMBEDDED)
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, MalformedBundle) as e:
        log.error("Embedded locale %s is broken: %s", code, e)
        return None
    _embedded[code] = bundle
    return bundle


def embedded_path(code: str):
    return resources.files(EMBEDDED_PACKAGE).joinpath(f"{code}.json")


def clear_embedded_cache() -> None:
    _embedded.clear()
