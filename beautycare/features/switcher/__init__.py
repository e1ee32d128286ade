from __future__ import annotations

from .handlers import LanguageSwitcher

__all__ = ["LanguageSwitcher"]
