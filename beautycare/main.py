from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from sqlalchemy.engine import make_url

from .core.bundles import (
    LocaleBundle,
    clear_embedded_cache,
    diff_bundles,
    embedded_path,
    load_embedded,
)
from .core.config import settings
from .core.errors import LocaleError
from .core.i18n import Translator
from .core.logging_config import setup_logging, get_logger
from .features.page.document import HtmlDocument
from .infra import db
from .infra.locale_source import DirectoryLocaleSource, make_source
from .infra.migrate import migrate
from .infra.preference_repo import SqlPreferenceStore

log = get_logger(__name__)


def _ensure_sqlite_dir(dsn: str) -> None:
    url = make_url(dsn)
    if url.drivername.startswith("sqlite") and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def localize(args: argparse.Namespace) -> int:
    dsn = args.database_url or settings.DATABASE_URL
    _ensure_sqlite_dir(dsn)
    await db.init_engine(dsn)
    db.init_sessionmaker()
    try:
        await migrate()

        page = Path(args.page)
        document = HtmlDocument.from_path(page)
        site_root = args.site_root or settings.SITE_ROOT
        source = make_source(
            args.base_url if args.base_url is not None else settings.LOCALE_BASE_URL,
            site_root,
            settings.LOCALE_PATH_TEMPLATE,
            settings.LOCALE_FETCH_TIMEOUT,
        )
        translator = Translator(
            document,
            source,
            SqlPreferenceStore(scope=args.scope),
            browser_languages=args.browser_lang or [],
        )
        await translator.initialize()
        if args.lang:
            await translator.switch_language(args.lang)
        document.save(args.out or page)
        log.info("Localized %s as %s", page, translator.current_language)
        return 0
    finally:
        await db.dispose_engine()


async def _read_external(site_root: str) -> dict:
    source = DirectoryLocaleSource(site_root, settings.LOCALE_PATH_TEMPLATE)
    bundles = {}
    for code in settings.supported_langs:
        try:
            bundles[code] = LocaleBundle.from_dict(code, await source.fetch(code))
        except LocaleError as e:
            log.error("Locale %s: %s", code, e)
    return bundles


async def check_locales(args: argparse.Namespace) -> int:
    site_root = args.site_root or settings.SITE_ROOT
    external = await _read_external(site_root)
    status = 0 if len(external) == len(settings.supported_langs) else 1
    for code, bundle in external.items():
        embedded = load_embedded(code)
        if embedded is None:
            print(f"{code}: no embedded bundle")
            status = 1
            continue
        diff = diff_bundles(bundle.messages, embedded.messages)
        if diff.in_sync:
            print(f"{code}: in sync ({len(bundle.flatten())} keys)")
            continue
        status = 1
        print(f"{code}: embedded bundle has drifted")
        for key in diff.missing:
            print(f"  missing  {key}")
        for key in diff.extra:
            print(f"  extra    {key}")
        for key in diff.changed:
            print(f"  changed  {key}")
    return status


async def sync_locales(args: argparse.Namespace) -> int:
    site_root = args.site_root or settings.SITE_ROOT
    external = await _read_external(site_root)
    if len(external) != len(settings.supported_langs):
        log.error("Not all locales could be read from %s; embedded bundles left untouched", site_root)
        return 1
    for code, bundle in external.items():
        target = Path(args.out) / f"{code}.json" if args.out else Path(str(embedded_path(code)))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(bundle.to_dict(), ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        log.info("Wrote %s", target)
    clear_embedded_cache()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="beautycare", description="Hebrew/English page localization")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("localize", help="apply translations to an HTML page")
    p.add_argument("page")
    p.add_argument("--lang", help="switch to this language after initializing")
    p.add_argument("--out", help="output path (default: overwrite the page)")
    p.add_argument("--site-root", help="directory holding assets/locales")
    p.add_argument("--base-url", help="fetch locales over HTTP from this site instead")
    p.add_argument("--browser-lang", action="append", help="preferred language tag, may repeat")
    p.add_argument("--scope", default="default", help="preference namespace")
    p.add_argument("--database-url", help="preference database DSN")
    p.set_defaults(handler=localize)

    p = sub.add_parser("check-locales", help="compare site locales with the embedded copies")
    p.add_argument("--site-root")
    p.set_defaults(handler=check_locales)

    p = sub.add_parser("sync-locales", help="regenerate the embedded copies from the site locales")
    p.add_argument("--site-root")
    p.add_argument("--out", help="write here instead of the package")
    p.set_defaults(handler=sync_locales)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_file=False, debug=args.debug or settings.DEBUG)
    return asyncio.run(args.handler(args))


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
