"""Tests for Cookie header translation."""

from dashprint.modules.report.cookies import parse_cookie_header, translate_cookies

URL = "https://host/zabbix.php?action=dashboard.print"


def test_single_cookie_bound_to_target():
    cookies = translate_cookies("sid=abc", url=URL, hostname="host")

    assert len(cookies) == 1
    cookie = cookies[0]
    assert cookie.name == "sid"
    assert cookie.value == "abc"
    assert cookie.domain == "host"
    assert cookie.url == URL
    assert cookie.same_site == "Strict"
    assert cookie.http_only is True


def test_empty_or_missing_header_yields_no_cookies():
    assert translate_cookies("", url=URL, hostname="host") == ()
    assert translate_cookies(None, url=URL, hostname="host") == ()
    assert parse_cookie_header(" ; ;") == []


def test_order_and_duplicates_preserved():
    pairs = parse_cookie_header("b=2; a=1; b=3")
    assert pairs == [("b", "2"), ("a", "1"), ("b", "3")]


def test_quoted_value_and_empty_value():
    assert parse_cookie_header('zbx_session="eyJzZXNzaW9uaWQiOiJ4In0="; empty=') == [
        ("zbx_session", "eyJzZXNzaW9uaWQiOiJ4In0="),
        ("empty", ""),
    ]


def test_invalid_pairs_are_skipped():
    # bad token name, and a value with a double quote inside
    assert parse_cookie_header('bad name=1; ok=2; q=a"b') == [("ok", "2")]


def test_playwright_cookie_shape():
    cookie = translate_cookies("sid=abc", url=URL, hostname="host")[0]
    data = cookie.to_playwright()

    assert data == {
        "name": "sid",
        "value": "abc",
        "domain": "host",
        "path": "/",
        "secure": True,
        "httpOnly": True,
        "sameSite": "Strict",
    }
    assert "url" not in data


def test_plain_http_cookie_is_not_secure():
    cookie = translate_cookies("sid=abc", url="http://host/zabbix.php", hostname="host")[0]
    assert cookie.to_playwright()["secure"] is False
