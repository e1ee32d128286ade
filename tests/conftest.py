from __future__ import annotations

import asyncio
import copy
from typing import Dict, Iterable, Optional

import pytest

from beautycare.core.bundles import load_embedded
from beautycare.core.errors import LocaleUnavailable
from beautycare.core.events import EventBus
from beautycare.core.i18n import Translator
from beautycare.features.page.document import HtmlDocument
from beautycare.infra.preference_repo import MemoryPreferenceStore


PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title data-i18n="page.title">Davidov Beauty Care</title>
</head>
<body>
<nav><div class="language-switcher"></div></nav>
<h1 data-i18n="hero.title">Hero</h1>
<a href="catalog.html" data-i18n="nav.catalog" data-i18n-title="cta.viewDetails">Catalog</a>
<input type="email" data-i18n-placeholder="footer.email">
<img src="hero.png" data-i18n-alt="hero.subtitle">
<p data-i18n="promo.banner">Spring sale</p>
</body>
</html>
"""

PAGE_WITHOUT_SWITCHER = """<html><head><title>Static</title></head>
<body><h2 data-i18n="services.mainHeading">Services</h2></body></html>
"""


class DictSource:
    """Locale source serving in-memory bundles, optionally slow or failing."""

    def __init__(
        self,
        bundles: Optional[Dict[str, dict]] = None,
        delay: float = 0.0,
        fail: Iterable[str] = (),
    ) -> None:
        self.bundles = bundles if bundles is not None else {
            code: load_embedded(code).to_dict() for code in ("en", "he")
        }
        self.delay = delay
        self.fail = set(fail)
        self.calls: list[str] = []

    async def fetch(self, code: str):
        self.calls.append(code)
        if self.delay:
            await asyncio.sleep(self.delay)
        if code in self.fail or code not in self.bundles:
            raise LocaleUnavailable(f"{code} is offline")
        return copy.deepcopy(self.bundles[code])


class BrokenStore:
    async def get(self, key: str):
        raise RuntimeError("storage disabled")

    async def set(self, key: str, value: str) -> None:
        raise RuntimeError("storage disabled")


@pytest.fixture
def source() -> DictSource:
    return DictSource()


@pytest.fixture
def store() -> MemoryPreferenceStore:
    return MemoryPreferenceStore()


@pytest.fixture
def make_translator(source, store):
    def _make(html: str = PAGE, **kwargs) -> Translator:
        kwargs.setdefault("source", source)
        kwargs.setdefault("store", store)
        kwargs.setdefault("bus", EventBus())
        kwargs.setdefault("supported", ["en", "he"])
        kwargs.setdefault("default_lang", "en")
        kwargs.setdefault("preference_key", "selectedLanguage")
        kwargs.setdefault("fetch_timeout", 2.0)
        kwargs.setdefault("rtl_stylesheet_href", "assets/css/rtl.css")
        document = HtmlDocument.from_string(html)
        return Translator(document, kwargs.pop("source"), kwargs.pop("store"), kwargs.pop("bus"), **kwargs)

    return _make
