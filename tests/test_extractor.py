import pathlib

from affiliate_resolver.extractor import (
    HtmlDocument,
    RedirectSource,
    extract,
    find_continue_anchor,
    find_js_location,
    try_extract,
)

FIXTURES = pathlib.Path(__file__).resolve().parent.parent / "fixtures"


def load(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def test_meta_refresh_relative_target():
    html = '<meta http-equiv="refresh" content="0;url=/next">'
    candidate = extract(html, "https://a.com/start")
    assert candidate.target_url == "https://a.com/next"
    assert candidate.source == RedirectSource.META_REFRESH


def test_meta_refresh_wins_over_script_and_anchor():
    candidate = extract(load("meta_refresh.html"), "https://s.shopee.vn/abc")
    assert candidate.source == RedirectSource.META_REFRESH
    assert candidate.target_url == "https://s.shopee.vn/vn/product/888?affiliate_id=42"


def test_js_location_with_escaped_slashes():
    candidate = extract(load("js_location.html"), "https://shope.ee/xyz")
    assert candidate.source == RedirectSource.JS_LOCATION
    assert candidate.target_url == "https://shopee.vn/Ao-thun-i.111.222?sp_atk=abc"


def test_js_location_forms():
    doc = HtmlDocument(
        """
        <script>
        window.location = "https://a.com/1";
        window.location.href='https://a.com/2';
        document.location.href = "/3";
        location.assign( "https://a.com/4" );
        </script>
        """
    )
    assert list(find_js_location(doc)) == ["https://a.com/1", "https://a.com/2", "/3", "https://a.com/4"]


def test_decode_uri_component():
    candidate = extract(load("decoded_uri.html"), "https://s.lazada.vn/s.abc")
    assert candidate.source == RedirectSource.JS_DECODED
    assert candidate.target_url == "https://www.lazada.vn/products/i123-s456.html?spm=a2o4n"


def test_atob_target():
    candidate = extract(load("base64_target.html"), "https://vt.tiktok.com/ZS1/")
    assert candidate.source == RedirectSource.JS_BASE64
    assert candidate.target_url == "https://www.tiktok.com/@shop/video/12345"


def test_invalid_base64_is_skipped():
    assert extract("<script>atob('!!!not-base64!!!')</script>", "https://a.com/") is None
    assert extract("<script>atob('////')</script>", "https://a.com/") is None


def test_vietnamese_continue_anchor():
    candidate = extract(load("continue_anchor.html"), "https://s.shopee.vn/x")
    assert candidate.source == RedirectSource.ANCHOR_FALLBACK
    assert candidate.target_url == "https://shopee.vn/product/5/6?ref=anchor"


def test_continue_anchor_vocabulary():
    doc = HtmlDocument(
        '<a href="/a">Home</a><a href="/b">Click HERE to continue</a><a href="/c">Redirecting...</a>'
    )
    assert list(find_continue_anchor(doc)) == ["/b", "/c"]


def test_malformed_candidate_falls_through_to_next_strategy():
    html = """
    <meta http-equiv="refresh" content="0;url=javascript:void(0)">
    <script>location.href = "#";</script>
    <a href="https://shopee.vn/product/1/2">Continue</a>
    """
    candidate = extract(html, "https://a.com/start")
    assert candidate.source == RedirectSource.ANCHOR_FALLBACK
    assert candidate.target_url == "https://shopee.vn/product/1/2"


def test_try_extract_runs_single_strategy():
    doc = HtmlDocument(load("meta_refresh.html"))
    candidate = try_extract(find_js_location, RedirectSource.JS_LOCATION, doc, "https://a.com/")
    assert candidate.target_url == "https://decoy.example/js"


def test_plain_page_has_no_redirect():
    assert extract(load("landing_page.html"), "https://shopee.vn/product/1/2") is None
    assert extract("", "https://a.com/") is None


def test_truncated_markup_is_still_searched():
    html = '<html><head><meta http-equiv="refresh" content="3; url=https://a.com/next"><body><div>'
    assert extract(html, "https://a.com/").target_url == "https://a.com/next"
