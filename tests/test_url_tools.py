import pytest

from affiliate_resolver.errors import MalformedRedirectTargetError
from affiliate_resolver.url_tools import Platform, absolutize, clean_url, detect_platform, is_valid_url


def test_clean_url_strips_query_fragment_and_trailing_slash():
    assert clean_url("https://shopee.vn/product/111/222/?utm=abc#reviews") == "https://shopee.vn/product/111/222"


def test_clean_url_keeps_root_and_port():
    assert clean_url("https://example.com/?a=1") == "https://example.com/"
    assert clean_url("http://example.com:8080/a//?x=1") == "http://example.com:8080/a"
    assert clean_url("https://example.com///") == "https://example.com/"


@pytest.mark.parametrize(
    "url",
    [
        "https://shopee.vn/product/111/222?utm=abc",
        "https://www.lazada.vn/products/i1-s2.html?spm=x#top",
        "https://example.com///?q=1",
        "https://vt.tiktok.com/ZS123/",
        "https://example.com",
    ],
)
def test_clean_url_is_idempotent_and_drops_query(url):
    cleaned = clean_url(url)
    assert clean_url(cleaned) == cleaned
    assert "?" not in cleaned
    assert "#" not in cleaned


def test_detect_platform():
    assert detect_platform("https://www.tiktok.com/t/ABC") == Platform.TIKTOK
    assert detect_platform("https://vt.tiktok.com/ZS123/") == Platform.TIKTOK
    assert detect_platform("https://shopee.vn/product/1/2") == Platform.SHOPEE
    assert detect_platform("https://s.lazada.co.th/s.abc") == Platform.LAZADA
    assert detect_platform("https://example.com") == Platform.OTHER
    # the short shopee domain has no "shopee." in it
    assert detect_platform("https://shope.ee/xyz") == Platform.OTHER


def test_is_valid_url():
    assert is_valid_url("https://shope.ee/xyz")
    assert not is_valid_url("not a url")
    assert not is_valid_url("ftp://example.com/file")
    assert not is_valid_url("https://")
    assert not is_valid_url(None)
    assert not is_valid_url(123)


def test_absolutize_joins_relative_targets():
    assert absolutize("/next", "https://a.com/start") == "https://a.com/next"
    assert absolutize("  ../b?x=1&amp;y=2 ", "https://a.com/p/q") == "https://a.com/b?x=1&y=2"
    assert absolutize("//cdn.a.com/x", "https://a.com/") == "https://cdn.a.com/x"


@pytest.mark.parametrize("raw", ["", "   ", "#", "javascript:void(0)", "mailto:a@b.c", "intent://x#Intent;end"])
def test_absolutize_rejects_unusable_targets(raw):
    with pytest.raises(MalformedRedirectTargetError):
        absolutize(raw, "https://a.com/start")


def test_absolutize_percent_encodes_non_ascii():
    assert absolutize("/Áo-thun-i.1.2", "https://shopee.vn/") == "https://shopee.vn/%C3%81o-thun-i.1.2"
