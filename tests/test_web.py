# tests/test_web.py
from __future__ import annotations

import re
import textwrap

import pytest
from fastapi.testclient import TestClient

from numnerd.registry import Index, analyzer
from numnerd.web import create_app


@pytest.fixture
def client():
    return TestClient(create_app(), follow_redirects=False)


@pytest.mark.parametrize("param", ["abc", "-5", "1.5", "%2B1", "%3Cscript%3E"])
def test_bad_input_is_400(client, param):
    r = client.get(f"/{param}")
    assert r.status_code == 400
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text.startswith('Error: "')
    assert r.text.endswith('could not be parsed as an unsigned integer.')


def test_number_page(client):
    r = client.get("/6")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "<h1>6</h1>" in r.text
    assert "Is a perfect number." in r.text
    assert '<a href="/3">3</a>rd triangular number' in r.text
    assert "<dd>110</dd>" in r.text


def test_trivia_is_included(client):
    r = client.get("/42")
    assert r.status_code == 200
    assert "Hitchhiker" in r.text
    assert "Hitchhiker" not in client.get("/43").text


def test_large_number_page(client):
    n = 2**127 - 1
    r = client.get(f"/{n}")
    assert r.status_code == 200
    assert "Is a prime number." in r.text
    assert '<a href="/127">127</a>' in r.text


@pytest.mark.parametrize("path", ["/", "/random"])
def test_random_redirect(client, path):
    r = client.get(path)
    assert r.status_code == 307
    assert re.fullmatch(r"/[1-9][0-9]*", r.headers["location"])


def test_analyzer_text_is_escaped():
    @analyzer(label="Nasty")
    async def nasty(n, sink):
        await sink.basic("<script>alert('x')</script>")
        await sink.form("<b>label</b>", "(#1\"><img>)")

    client = TestClient(create_app(Index.of(nasty)))
    r = client.get("/1")
    assert r.status_code == 200
    assert "<script>" not in r.text
    assert "&lt;script&gt;alert(&#39;x&#39;)&lt;/script&gt;" in r.text
    assert "<dt>&lt;b&gt;label&lt;/b&gt;</dt>" in r.text
    assert "<img>" not in r.text


# ---------- profile and workspace ---------------------------------------------


def _write(path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text), encoding="utf-8")


def test_workspace_analyzers_are_served(isolated_workspace):
    _write(isolated_workspace / "analyzers" / "web_mine.py", """
        from numnerd.registry import analyzer

        @analyzer(label="Mine")
        async def mine(n, sink):
            await sink.basic("Told by the workspace.")
    """)
    r = TestClient(create_app()).get("/6")
    assert r.status_code == 200
    assert "Told by the workspace." in r.text
    assert "Is a perfect number." in r.text


def test_workspace_default_profile_applies(isolated_workspace):
    _write(isolated_workspace / "profiles" / "default.toml", """
        [ANALYZERS]
        PARITY = false
    """)
    r = TestClient(create_app()).get("/6")
    assert "Is an even number." not in r.text
    assert "Is a perfect number." in r.text


def test_named_profile_applies():
    with TestClient(create_app(profile="quick")) as client:
        text = client.get("/12").text
    assert "prime factors" not in text
    assert "Is an even number." in text


def test_profile_digit_limit_applies(isolated_workspace):
    _write(isolated_workspace / "profiles" / "tiny.toml", """
        [BEHAVIOUR]
        MAX_DIGITS = 3
    """)
    client = TestClient(create_app(profile="tiny"))
    assert client.get("/123").status_code == 200
    r = client.get("/1234")
    assert r.status_code == 400
    assert "more than 3 decimal digits" in r.text
