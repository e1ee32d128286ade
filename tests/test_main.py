import json

import pytest

from beautycare.core.bundles import load_embedded
from beautycare.main import main

from .conftest import PAGE


@pytest.fixture
def site(tmp_path):
    root = tmp_path / "site"
    locales = root / "assets" / "locales"
    locales.mkdir(parents=True)
    for code in ("en", "he"):
        (locales / f"{code}.json").write_text(
            json.dumps(load_embedded(code).to_dict(), ensure_ascii=False), encoding="utf-8"
        )
    (root / "index.html").write_text(PAGE, encoding="utf-8")
    return root


def test_localize_switches_and_remembers(site, tmp_path):
    dsn = f"sqlite+aiosqlite:///{tmp_path / 'data' / 'prefs.db'}"
    out = tmp_path / "out" / "index.he.html"
    code = main([
        "localize", str(site / "index.html"),
        "--site-root", str(site), "--database-url", dsn,
        "--lang", "he", "--out", str(out),
    ])
    assert code == 0
    html = out.read_text(encoding="utf-8")
    assert 'dir="rtl"' in html
    assert load_embedded("he").lookup("hero.title") in html
    assert 'id="rtl-styles"' in html

    again = tmp_path / "out" / "index.again.html"
    assert main([
        "localize", str(site / "index.html"),
        "--site-root", str(site), "--database-url", dsn,
        "--browser-lang", "en-US", "--out", str(again),
    ]) == 0
    assert 'dir="rtl"' in again.read_text(encoding="utf-8")


def test_check_locales_in_sync(site, capsys):
    assert main(["check-locales", "--site-root", str(site)]) == 0
    assert "en: in sync" in capsys.readouterr().out


def test_check_locales_reports_drift(site, capsys):
    path = site / "assets" / "locales" / "he.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    del data["footer"]["phone"]
    data["nav"]["home"] = "דף הבית"
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    assert main(["check-locales", "--site-root", str(site)]) == 1
    out = capsys.readouterr().out
    assert "extra    footer.phone" in out
    assert "changed  nav.home" in out


def test_check_locales_missing_site_file(site):
    (site / "assets" / "locales" / "en.json").unlink()
    assert main(["check-locales", "--site-root", str(site)]) == 1


def test_sync_locales_writes_copies(site, tmp_path):
    path = site / "assets" / "locales" / "en.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    data["hero"]["badge"] = "New"
    path.write_text(json.dumps(data), encoding="utf-8")

    target = tmp_path / "embedded"
    assert main(["sync-locales", "--site-root", str(site), "--out", str(target)]) == 0
    assert json.loads((target / "en.json").read_text(encoding="utf-8")) == data
    assert (target / "he.json").exists()


def test_check_locales_with_undecodable_file(site):
    (site / "assets" / "locales" / "he.json").write_bytes(b"\xff\xfe")
    assert main(["check-locales", "--site-root", str(site)]) == 1
    assert main(["sync-locales", "--site-root", str(site), "--out", str(site / "out")]) == 1
