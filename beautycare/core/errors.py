"""Locale loading errors and the explicit load result."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .bundles import LocaleBundle


class LocaleError(Exception):
    """Base class for locale loading failures."""


class LocaleUnavailable(LocaleError):
    """The locale resource could not be reached or returned a non-success status."""


class MalformedBundle(LocaleError):
    """The locale resource was reachable but did not have the expected shape."""


class LoadErrorKind(str, Enum):
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    MALFORMED = "malformed"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class LoadError:
    code: str
    kind: LoadErrorKind
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.code}: {self.kind.value} ({self.detail})"
        return f"{self.code}: {self.kind.value}"


@dataclass(frozen=True)
class BundleResult:
    bundle: Optional["LocaleBundle"] = None
    error: Optional[LoadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.bundle is not None

    @classmethod
    def success(cls, bundle: "LocaleBundle") -> "BundleResult":
        return cls(bundle=bundle)

    @classmethod
    def failure(cls, code: str, kind: LoadErrorKind, detail: Union[str, Exception] = "") -> "BundleResult":
        return cls(error=LoadError(code=code, kind=kind, detail=str(detail)))
