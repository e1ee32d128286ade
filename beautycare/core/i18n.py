from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Optional, Sequence, Tuple

from .bundles import ORIGIN_EMBEDDED, LocaleBundle, load_embedded
from .config import settings
from .errors import BundleResult, LoadErrorKind, LocaleUnavailable, MalformedBundle
from .events import LANGUAGE_CHANGED, EventBus, LanguageChanged
from .nodes import TranslatableNode, apply_bundle
from ..features.page.direction import apply_direction
from ..features.page.document import HtmlDocument
from ..features.switcher.handlers import LanguageSwitcher
from ..infra.locale_source import LocaleSource
from ..infra.preference_repo import PreferenceStore


log = logging.getLogger(__name__)

RTL_LANG = "he"
HEBREW_TAGS = ("he", "iw")


class Status(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


@dataclass
class ActiveLocaleState:
    current_language: Optional[str] = None
    bundle: Optional[LocaleBundle] = None
    status: Status = Status.UNINITIALIZED
    loading: Optional[str] = None

    @property
    def is_rtl(self) -> bool:
        return self.current_language == RTL_LANG


def negotiate(languages: Sequence[str], supported: Sequence[str] = ("en", "he"), fallback: str = "en") -> str:
    """Pick the page language from the runtime's preferred language tags.

    Only the primary tag counts: any Hebrew-family tag selects Hebrew,
    everything else the fallback.
    """
    primary = next((tag for tag in languages if tag), "")
    base = primary.strip().lower().replace("_", "-").split("-")[0]
    if base in HEBREW_TAGS and RTL_LANG in supported:
        return RTL_LANG
    return fallback


class Translator:
    def __init__(
        self,
        document: HtmlDocument,
        source: Optional[LocaleSource],
        store: PreferenceStore,
        bus: Optional[EventBus] = None,
        *,
        browser_languages: Sequence[str] = (),
        supported: Optional[Sequence[str]] = None,
        default_lang: Optional[str] = None,
        preference_key: Optional[str] = None,
        fetch_timeout: Optional[float] = None,
        rtl_stylesheet_href: Optional[str] = None,
    ) -> None:
        self.document = document
        self.source = source
        self.store = store
        self.bus = bus or EventBus()
        self.browser_languages = list(browser_languages)
        self.supported = [c.lower() for c in (supported or settings.supported_langs)]
        self.default_lang = (default_lang or settings.DEFAULT_LANG).lower()
        self.preference_key = preference_key or settings.PREFERENCE_KEY
        self.fetch_timeout = fetch_timeout if fetch_timeout is not None else settings.LOCALE_FETCH_TIMEOUT
        self.rtl_stylesheet_href = rtl_stylesheet_href or settings.RTL_STYLESHEET_HREF
        self.state = ActiveLocaleState()
        self.switcher: Optional[LanguageSwitcher] = None
        self._lock = asyncio.Lock()

    @property
    def current_language(self) -> Optional[str]:
        return self.state.current_language

    @property
    def is_rtl(self) -> bool:
        return self.state.is_rtl

    async def initialize(self) -> str:
        async with self._lock:
            code = await self._read_preference()
            if code is None:
                code = negotiate(self.browser_languages, self.supported, self.default_lang)
                log.debug("No saved language, negotiated %s from %s", code, self.browser_languages)
            await self._load_into_state(code)
            self.apply()
            self.set_direction(self.state.is_rtl)
            self._wire_switcher()
            log.info("Page language initialized to %s", code)
            return code

    async def load_bundle(self, code: str) -> BundleResult:
        if code not in self.supported:
            return BundleResult.failure(code, LoadErrorKind.UNSUPPORTED)
        if self.source is None:
            return BundleResult.failure(code, LoadErrorKind.UNAVAILABLE, "no locale source configured")
        try:
            data = await asyncio.wait_for(self.source.fetch(code), timeout=self.fetch_timeout)
            return BundleResult.success(LocaleBundle.from_dict(code, data))
        except asyncio.TimeoutError:
            return BundleResult.failure(code, LoadErrorKind.TIMEOUT, f"no response after {self.fetch_timeout}s")
        except MalformedBundle as e:
            return BundleResult.failure(code, LoadErrorKind.MALFORMED, e)
        except LocaleUnavailable as e:
            return BundleResult.failure(code, LoadErrorKind.UNAVAILABLE, e)
        except Exception as e:
            return BundleResult.failure(code, LoadErrorKind.UNAVAILABLE, repr(e))

    def resolve(self, key: str) -> str:
        value = self.state.bundle.lookup(key) if self.state.bundle is not None else None
        if value is None:
            self._report_missing(key)
            return key
        return value

    t = resolve

    def apply(self) -> List[Tuple[TranslatableNode, str]]:
        pairs = apply_bundle(self.document.scan(), self.state.bundle, on_missing=self._report_missing)
        for node, value in pairs:
            self.document.write(node, value)
        return pairs

    def set_direction(self, is_rtl: bool) -> None:
        current = self.state.current_language
        if current is not None and (current == RTL_LANG) == is_rtl:
            lang = current
        else:
            lang = RTL_LANG if is_rtl else self.default_lang
        apply_direction(self.document, is_rtl, lang, self.rtl_stylesheet_href)

    async def switch_language(self, code: str) -> bool:
        """Switch the page to ``code``; returns False when nothing changed.

        Switches are serialized, so a second call waits for the first to finish.
        """
        code = (code or "").strip().lower()
        async with self._lock:
            if code == self.state.current_language:
                return False
            if code not in self.supported:
                log.warning("Ignoring switch to unsupported language %r", code)
                return False
            if self.switcher is not None:
                self.switcher.set_loading(True)
            try:
                await self._load_into_state(code)
                await self._write_preference(code)
                self.apply()
                self.set_direction(self.state.is_rtl)
                if self.switcher is not None:
                    self.switcher.mark_active(code)
            finally:
                if self.switcher is not None:
                    self.switcher.set_loading(False)
            log.info("Language switched to %s", code)
        await self.bus.emit(LANGUAGE_CHANGED, LanguageChanged(language=code))
        return True

    # Internals

    async def _load_into_state(self, code: str) -> None:
        self.state.status = Status.LOADING
        self.state.loading = code
        bundle = await self._obtain_bundle(code)
        self.state.current_language = code
        self.state.bundle = bundle
        self.state.loading = None
        self.state.status = Status.READY

    async def _obtain_bundle(self, code: str) -> LocaleBundle:
        result = await self.load_bundle(code)
        if result.ok:
            return result.bundle  # type: ignore[return-value]
        if self.source is not None:
            log.warning("Locale %s not loaded (%s), using embedded bundle", code, result.error)
        bundle = load_embedded(code) or load_embedded(self.default_lang)
        if bundle is None:
            log.error("No embedded bundle for %s; keys will be shown as-is", code)
            bundle = LocaleBundle(code=code, messages=MappingProxyType({}), origin=ORIGIN_EMBEDDED)
        return bundle

    async def _read_preference(self) -> Optional[str]:
        try:
            value = await self.store.get(self.preference_key)
        except Exception as e:
            log.warning("Could not read saved language: %s", e)
            return None
        if not value:
            return None
        value = value.strip().lower()
        if value not in self.supported:
            log.debug("Ignoring saved language %r", value)
            return None
        return value

    async def _write_preference(self, code: str) -> None:
        try:
            await self.store.set(self.preference_key, code)
        except Exception as e:
            log.warning("Could not save language %s: %s", code, e)

    def _wire_switcher(self) -> None:
        switcher = LanguageSwitcher.locate(self.document)
        if switcher is None:
            log.debug("No language switcher on this page")
            return
        switcher.ensure_buttons()

        async def on_click(code: str) -> None:
            await self.switch_language(code)

        switcher.bind(on_click)
        switcher.mark_active(self.state.current_language or self.default_lang)
        self.switcher = switcher

    def _report_missing(self, key: str) -> None:
        log.warning("Translation key not found: %s", key)
