import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")
pytest.importorskip("bleach")

from bs4 import BeautifulSoup

from felix_migrator.parsers.html_sanitizer import sanitize_html


def test_script_is_removed_with_its_content():
    assert sanitize_html("<p>Hello</p><script>alert(1)</script>") == "<p>Hello</p>"


def test_style_and_noscript_are_removed_with_content():
    assert sanitize_html("<style>p{}</style><noscript>js off</noscript><p>x</p>") == "<p>x</p>"


def test_disallowed_elements_keep_their_text():
    html = '<section class="review"><h2>Title</h2><dl><dt>Author</dt><dd>Someone</dd></dl></section>'
    assert sanitize_html(html) == "<h2>Title</h2>AuthorSomeone"


def test_img_keeps_only_permitted_attributes():
    html = sanitize_html('<p><img src="/a.jpg" alt="A" width="10" onerror="steal()" loading="lazy"></p>')
    img = BeautifulSoup(html, "html.parser").find("img")
    assert img is not None
    assert dict(img.attrs) == {"src": "/a.jpg", "alt": "A"}


def test_paragraph_attributes_are_dropped():
    assert sanitize_html('<p style="color:red" id="x">a</p>') == "<p>a</p>"


def test_link_attributes():
    html = sanitize_html('<a href="/news/1" title="t" target="_blank" onclick="x()">n</a>')
    a = BeautifulSoup(html, "html.parser").find("a")
    assert a["href"] == "/news/1"
    assert a["title"] == "t"
    assert a["target"] == "_blank"
    assert "onclick" not in a.attrs


def test_javascript_links_lose_href():
    html = sanitize_html('<a href="javascript:alert(1)">x</a>')
    a = BeautifulSoup(html, "html.parser").find("a")
    assert "href" not in a.attrs


def test_only_kg_classes_survive():
    html = sanitize_html(
        '<figure class="kg-card kg-image-card wide"><img src="x.jpg" class="kg-image photo" alt=""></figure>'
        '<div class="stars">★★</div>'
    )
    soup = BeautifulSoup(html, "html.parser")
    assert soup.find("figure")["class"] == ["kg-card", "kg-image-card"]
    assert soup.find("img")["class"] == ["kg-image"]
    div = soup.find("div")
    assert "class" not in div.attrs
    assert div.get_text() == "★★"


def test_kg_class_allowed_on_other_tags():
    html = sanitize_html('<p class="kg-note other">a</p>')
    assert BeautifulSoup(html, "html.parser").find("p")["class"] == ["kg-note"]


def test_iframe_attributes():
    html = sanitize_html('<iframe src="https://www.youtube.com/embed/x" width="560" height="315" allowfullscreen style="x"></iframe>')
    iframe = BeautifulSoup(html, "html.parser").find("iframe")
    assert iframe["src"] == "https://www.youtube.com/embed/x"
    assert iframe["width"] == "560"
    assert "allowfullscreen" in iframe.attrs
    assert "style" not in iframe.attrs


def test_output_is_trimmed():
    assert sanitize_html("  <p>a</p>  ") == "<p>a</p>"
    assert sanitize_html("") == ""
