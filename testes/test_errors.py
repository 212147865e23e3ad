import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import json

from felix_migrator.utils.errors import DecodeError, report_error, report_ok

ARTICLE = {"id": 12, "slug": "freshers-week", "title": "Freshers' Week"}


def read_jsonl(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f]


def test_transform_error_message_includes_context():
    err = DecodeError("Block type poll not supported", position=3, block_type="poll", article_id=12)
    assert str(err) == "Block type poll not supported (article=12, position=3, type=poll)"
    assert DecodeError("plain").__str__() == "plain"


def test_report_error_appends_block_context(tmp_path):
    path = tmp_path / "errors.jsonl"
    err = DecodeError("Block type poll not supported", position=3, block_type="poll")
    report_error("BLOCK_DECODE", ARTICLE, err, path=str(path))
    report_error("SOURCE_QUERY", ARTICLE, path=str(path))

    first, second = read_jsonl(path)
    assert first["code"] == "BLOCK_DECODE"
    assert first["message"] == "Failed to decode article block"
    assert first["article_id"] == 12
    assert first["kind"] == "decode"
    assert first["position"] == 3
    assert first["block_type"] == "poll"
    assert "error" not in second


def test_report_ok_merges_extra(tmp_path):
    path = tmp_path / "nested" / "success.jsonl"
    report_ok("POST_CREATED", ARTICLE, {"type": "page"}, path=str(path))
    (entry,) = read_jsonl(path)
    assert entry["slug"] == "freshers-week"
    assert entry["type"] == "page"


def test_unknown_code_falls_back_to_code(tmp_path):
    path = tmp_path / "errors.jsonl"
    entry = report_error("SOMETHING_NEW", ARTICLE, path=str(path))
    assert entry["message"] == "SOMETHING_NEW"
