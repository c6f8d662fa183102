import httpx

from affiliate_resolver.cookies import CookieJar


def test_update_from_headers_reads_every_set_cookie():
    jar = CookieJar()
    headers = httpx.Headers(
        [
            ("set-cookie", "sid=abc; Path=/; HttpOnly"),
            ("set-cookie", "lang=vi; Expires=Wed, 21 Oct 2026 07:28:00 GMT"),
            ("set-cookie", "token=a=b=c; Secure"),
        ]
    )
    jar.update_from_headers(headers)
    assert jar.get("sid") == "abc"
    assert jar.get("lang") == "vi"
    assert jar.get("token") == "a=b=c"
    assert jar.header_value() == "sid=abc; lang=vi; token=a=b=c"


def test_last_write_wins():
    jar = CookieJar()
    jar.update_from_header("sid=old")
    jar.update_from_header("sid=new; Path=/")
    assert len(jar) == 1
    assert jar.header_value() == "sid=new"


def test_malformed_cookies_are_ignored():
    jar = CookieJar()
    jar.update_from_header("no-equals-sign")
    jar.update_from_header("=orphan")
    assert len(jar) == 0
    assert jar.header_value() is None
