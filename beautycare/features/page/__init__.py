from __future__ import annotations

from .direction import RTL_STYLESHEET_ID, apply_direction, has_rtl_stylesheet
from .document import HtmlDocument

__all__ = ["HtmlDocument", "RTL_STYLESHEET_ID", "apply_direction", "has_rtl_stylesheet"]
