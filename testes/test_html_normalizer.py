import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from felix_migrator.parsers.html_normalizer import NORMALIZATION_PASSES, normalize_html


def test_passes_run_in_documented_order():
    names = [p.__name__ for p in NORMALIZATION_PASSES]
    assert names == [
        "remove_hidden_elements",
        "remove_nbsp_paragraphs",
        "remove_empty_elements",
        "replace_ellipsis_paragraphs",
        "relativize_site_links",
    ]


@pytest.mark.parametrize("style", ["display:none", "display: none", "color: red; display:none"])
def test_hidden_elements_are_removed(style):
    html = f'<div style="{style}"><p>secret</p></div><p>keep</p>'
    assert normalize_html(html) == "<p>keep</p>"


def test_visible_styles_are_kept():
    html = '<span style="display: inline">x</span>'
    assert normalize_html(html) == html


def test_nbsp_paragraphs_are_removed():
    assert normalize_html("<p>&nbsp;</p><p>a</p>") == "<p>a</p>"
    assert normalize_html("<p>  &nbsp; </p><p>a</p>") == "<p>a</p>"


def test_paragraph_with_text_and_nbsp_is_kept():
    assert normalize_html("<p>a&nbsp;b</p>") == "<p>a\xa0b</p>"


def test_empty_paragraphs_and_figures_are_removed():
    assert normalize_html("<p>   </p><figure></figure><p>a</p>") == "<p>a</p>"


def test_figure_emptied_by_paragraph_removal_is_removed():
    assert normalize_html("<figure><p> </p></figure><p>a</p>") == "<p>a</p>"


def test_paragraph_with_only_markup_is_kept():
    assert normalize_html("<p><br/></p>") == "<p><br/></p>"


@pytest.mark.parametrize("text", ["...", "…", "&hellip;", " ... "])
def test_ellipsis_paragraph_becomes_rule(text):
    assert normalize_html(f"<p>a</p><p>{text}</p><p>b</p>") == "<p>a</p><hr/><p>b</p>"


def test_ellipsis_with_text_is_kept():
    assert normalize_html("<p>... wait</p>") == "<p>... wait</p>"


def test_site_links_become_relative():
    html = '<p><a href="https://felixonline.co.uk/news/1">n</a> <a href="https://other.example/x">o</a></p>'
    assert normalize_html(html) == '<p><a href="/news/1">n</a> <a href="https://other.example/x">o</a></p>'


def test_site_root_link_becomes_slash():
    assert normalize_html('<a href="https://felixonline.co.uk">home</a>') == '<a href="/">home</a>'


def test_custom_site_url():
    html = '<a href="https://example.org/a">a</a>'
    assert normalize_html(html, site_url="https://example.org") == '<a href="/a">a</a>'


def test_control_characters_are_stripped():
    assert normalize_html("<p>a\x01b\x7f\x9f</p>\n\t<p>c</p>") == "<p>ab</p><p>c</p>"


def test_paragraph_left_empty_by_control_characters_is_removed():
    assert normalize_html("<p>\x02</p><p>&#1;</p><p>a</p>") == "<p>a</p>"


@pytest.mark.parametrize("html", ["", "   ", "\n\n"])
def test_empty_input(html):
    assert normalize_html(html) == ""


def test_normalization_is_idempotent():
    html = "\n".join(
        [
            '<section class="sidebar"><h2>Side</h2><p>&nbsp;</p><figure><p> </p></figure></section>',
            '<div style="display: none">gone</div>',
            "<p>\x02</p>",
            "<p>&hellip;</p>",
            '<p><a href="https://felixonline.co.uk/arts/x">link</a>\tand text</p>',
            "<blockquote><p>quote</p></blockquote>",
        ]
    )
    once = normalize_html(html)
    assert normalize_html(once) == once
    assert "<hr/>" in once
    assert 'href="/arts/x"' in once
    assert "gone" not in once


def test_whitespace_inside_tags_keeps_attributes():
    html = normalize_html('<p>see <a\nhref="https://felixonline.co.uk/news/1">here</a> <img\tsrc="https://x/y.jpg" alt="a"></p>')
    assert html == '<p>see <a href="/news/1">here</a> <img src="https://x/y.jpg" alt="a"/></p>'


def test_hidden_element_with_tab_before_style_is_removed():
    assert normalize_html('<p\tstyle="display:none">hidden</p><p>x</p>') == "<p>x</p>"


def test_control_characters_in_attribute_values_are_stripped():
    once = normalize_html('<p style="display:\x01none">hidden</p><a href="/a\x02b">x</a>')
    assert once == '<a href="/ab">x</a>'
    assert normalize_html(once) == once
