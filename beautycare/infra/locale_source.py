"""Where external locale bundles come from: the site over HTTP, or the site directory."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Union

import httpx

from ..core.errors import LocaleUnavailable, MalformedBundle


log = logging.getLogger(__name__)

DEFAULT_PATH_TEMPLATE = "assets/locales/{lang}.json"


class LocaleSource(Protocol):
    async def fetch(self, code: str) -> Any: ...


class HttpLocaleSource:
    def __init__(
        self,
        base_url: str,
        path_template: str = DEFAULT_PATH_TEMPLATE,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.path_template = path_template
        self.timeout = timeout
        self._client = client

    def url_for(self, code: str) -> str:
        return f"{self.base_url}/{self.path_template.format(lang=code).lstrip('/')}"

    async def fetch(self, code: str) -> Any:
        url = self.url_for(code)
        try:
            if self._client is not None:
                resp = await self._client.get(url, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.get(url)
        except httpx.HTTPError as e:
            raise LocaleUnavailable(f"GET {url} failed: {e!r}") from e
        if not resp.is_success:
            raise LocaleUnavailable(f"GET {url} returned {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise MalformedBundle(f"GET {url} did not return JSON: {e}") from e


class DirectoryLocaleSource:
    def __init__(self, root: Union[str, Path], path_template: str = DEFAULT_PATH_TEMPLATE) -> None:
        self.root = Path(root)
        self.path_template = path_template

    def path_for(self, code: str) -> Path:
        return self.root / self.path_template.format(lang=code)

    async def fetch(self, code: str) -> Any:
        path = self.path_for(code)
        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise LocaleUnavailable(f"cannot read {path}: {e}") from e
        try:
            return json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise MalformedBundle(f"{path} is not UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise MalformedBundle(f"{path} is not valid JSON: {e}") from e


def make_source(base_url: str, site_root: Union[str, Path], path_template: str, timeout: float) -> LocaleSource:
    if base_url:
        log.debug("Fetching locales from %s", base_url)
        return HttpLocaleSource(base_url, path_template=path_template, timeout=timeout)
    log.debug("Reading locales from %s", site_root)
    return DirectoryLocaleSource(site_root, path_template=path_template)
