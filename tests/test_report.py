import csv
import io
import itertools
import json

from RefXSS import Finding, Report, render_report, write_csv, write_json


FINDINGS = [
    Finding(url="http://x/a?q=1", param="q", chars=("<", '"')),
    Finding(url="http://x/a?q=1", param="r", chars=("{",)),
    Finding(url="http://y/b?id=7", param="id", chars=(";", "'")),
    Finding(url="http://x/a?q=1", param="q", chars=("(",)),
]


def build(findings):
    report = Report()
    for f in findings:
        report.add(f)
    return report.finalize()


def test_grouped_by_url_then_param():
    grouped = build(FINDINGS)
    assert grouped == {
        "http://x/a?q=1": {"q": ('"', "<", "("), "r": ("{",)},
        "http://y/b?id=7": {"id": ("'", ";")},
    }


def test_order_independent():
    expected = build(FINDINGS)
    for perm in itertools.permutations(FINDINGS):
        assert build(perm) == expected


def test_empty_char_set_not_stored():
    report = Report()
    report.add(Finding(url="http://x/a?q=1", param="q", chars=()))
    assert len(report) == 0
    assert report.finalize() == {}


def test_finalize_is_a_snapshot():
    report = Report()
    report.add(FINDINGS[0])
    snap = report.finalize()
    report.add(FINDINGS[2])
    assert list(snap) == ["http://x/a?q=1"]
    assert len(report) == 2


def test_render_no_findings():
    out = io.StringIO()
    render_report({}, out)
    assert "No reflected XSS parameters found" in out.getvalue()
    assert "[REFLECTED]" not in out.getvalue()


def test_render_blocks():
    out = io.StringIO()
    render_report(build(FINDINGS), out)
    text = out.getvalue()
    assert text.count("[REFLECTED]") == 2
    assert "http://y/b?id=7" in text
    assert "Param:" in text and " id" in text
    assert "Unfiltered: [\" < (]" in text
    assert "No reflected" not in text


def test_write_json(tmp_path):
    path = tmp_path / "out.json"
    write_json(build(FINDINGS), str(path))
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["http://y/b?id=7"] == {"id": ["'", ";"]}


def test_write_csv(tmp_path):
    path = tmp_path / "out.csv"
    write_csv(build(FINDINGS), str(path))
    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 3
    assert {"url": "http://x/a?q=1", "param": "r", "unfiltered": "{"} in rows
