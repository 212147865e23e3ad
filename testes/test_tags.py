import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from felix_migrator.utils.tags import issue_tag, section_tag


def test_section_tag_html_entities_and_whitespace():
    tag = section_tag("Arts  &amp; Culture ", "arts", "  Reviews &amp; previews ")
    assert tag == {"name": "Arts & Culture", "slug": "arts", "description": "Reviews & previews"}


def test_section_tag_without_description():
    assert section_tag("News", "news") == {"name": "News", "slug": "news"}


def test_issue_tag_shape():
    assert issue_tag(1780) == {"name": "Issue 1780", "slug": "issue-1780"}


def test_issue_tag_from_float_column():
    assert issue_tag(1780.0) == {"name": "Issue 1780", "slug": "issue-1780"}


def test_no_issue_no_tag():
    assert issue_tag(None) is None
    assert issue_tag("  ") is None
