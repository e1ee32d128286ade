from beautycare.core.bundles import LocaleBundle
from beautycare.core.nodes import NodeKind, TranslatableNode, apply_bundle
from beautycare.features.page import HtmlDocument, apply_direction, has_rtl_stylesheet

from .conftest import PAGE


BUNDLE = LocaleBundle.from_dict(
    "en",
    {
        "page": {"title": "Title"},
        "hero": {"title": "Hero", "subtitle": "Sub"},
        "nav": {"catalog": "Catalog"},
        "cta": {"viewDetails": "Details"},
        "footer": {"email": "you@example.com"},
    },
)


def test_scan_finds_every_marker_kind():
    doc = HtmlDocument.from_string(PAGE)
    nodes = doc.scan()
    assert [(n.kind, n.key) for n in nodes] == [
        (NodeKind.TEXT, "hero.title"),
        (NodeKind.TEXT, "nav.catalog"),
        (NodeKind.TEXT, "promo.banner"),
        (NodeKind.PLACEHOLDER, "footer.email"),
        (NodeKind.TITLE, "cta.viewDetails"),
        (NodeKind.ALT, "hero.subtitle"),
        (NodeKind.DOCUMENT_TITLE, "page.title"),
    ]


def test_apply_bundle_is_pure_and_falls_back_to_key():
    nodes = [
        TranslatableNode(NodeKind.DOCUMENT_TITLE, "page.title"),
        TranslatableNode(NodeKind.ALT, "hero.subtitle"),
        TranslatableNode(NodeKind.TEXT, "hero.title"),
        TranslatableNode(NodeKind.TEXT, "nope.missing"),
    ]
    missing = []
    pairs = apply_bundle(nodes, BUNDLE, on_missing=missing.append)
    assert [(n.kind, v) for n, v in pairs] == [
        (NodeKind.TEXT, "Hero"),
        (NodeKind.TEXT, "nope.missing"),
        (NodeKind.ALT, "Sub"),
        (NodeKind.DOCUMENT_TITLE, "Title"),
    ]
    assert missing == ["nope.missing"]


def test_write_targets_the_right_attribute():
    doc = HtmlDocument.from_string(PAGE)
    for node, value in apply_bundle(doc.scan(), BUNDLE):
        doc.write(node, value)
    soup = doc.soup
    assert soup.find("h1").get_text() == "Hero"
    assert soup.find("a")["title"] == "Details"
    assert soup.find("a").get_text() == "Catalog"
    assert soup.find("input")["placeholder"] == "you@example.com"
    assert soup.find("img")["alt"] == "Sub"
    assert soup.find("title").get_text() == "Title"
    assert soup.find("p").get_text() == "promo.banner"


def test_fragment_gets_a_document_skeleton():
    doc = HtmlDocument.from_string('<p data-i18n="hero.title">x</p>')
    assert doc.root.name == "html"
    assert doc.head is not None and doc.body is not None
    assert [n.key for n in doc.scan()] == ["hero.title"]


def test_direction_toggle_is_idempotent():
    doc = HtmlDocument.from_string(PAGE)
    apply_direction(doc, True, "he", "assets/css/rtl.css")
    apply_direction(doc, True, "he", "assets/css/rtl.css")
    assert doc.root["dir"] == "rtl"
    assert doc.root["lang"] == "he"
    assert "rtl" in doc.body["class"] and "ltr" not in doc.body["class"]
    assert len(doc.soup.find_all("link", id="rtl-styles")) == 1
    assert doc.soup.find("link", id="rtl-styles")["href"] == "assets/css/rtl.css"

    apply_direction(doc, False, "en", "assets/css/rtl.css")
    assert doc.root["dir"] == "ltr"
    assert doc.root["lang"] == "en"
    assert doc.body["class"] == ["ltr"]
    assert not has_rtl_stylesheet(doc)


def test_save_writes_rendered_page(tmp_path):
    doc = HtmlDocument.from_string(PAGE)
    out = doc.save(tmp_path / "out" / "index.html")
    assert out.read_text(encoding="utf-8") == doc.render()


def test_blank_markers_are_not_scanned():
    doc = HtmlDocument.from_string(
        '<p data-i18n="">Original text</p><p data-i18n="  ">Kept</p>'
        '<input data-i18n-placeholder="" placeholder="Search">'
    )
    assert doc.scan() == []


def test_apply_bundle_skips_nodes_without_key():
    pairs = apply_bundle([TranslatableNode(NodeKind.TEXT, "")], BUNDLE)
    assert pairs == []
