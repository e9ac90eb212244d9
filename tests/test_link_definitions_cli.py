"""End-to-end tests for scripts/link_definitions.py."""
from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPT = ROOT / "scripts" / "link_definitions.py"

HTML = """<section>
<p>A <dfn>token</dfn> is a unit.</p>
<p>Use a <a>token</a>, not a <a>gizmo</a>.</p>
<p class="note">See <a data-cite="DOM">event</a>.</p>
</section>
"""


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        capture_output=True,
        text=True,
        check=False,
        cwd=str(ROOT),
        env={**os.environ, "PYTHONPATH": str(ROOT / "src")},
    )


def test_links_document_and_emits_report(tmp_path: Path) -> None:
    html_path = tmp_path / "doc.html"
    html_path.write_text(HTML, encoding="utf-8")
    out_path = tmp_path / "linked.html"
    report_path = tmp_path / "report.json"
    conf_path = tmp_path / "conf.json"
    conf_path.write_text(json.dumps({"shortName": "my-spec"}), encoding="utf-8")

    proc = _run(
        "--html", str(html_path),
        "--out", str(out_path),
        "--config", str(conf_path),
        "--report", str(report_path),
    )
    assert proc.returncode == 0, proc.stderr
    payload = json.loads(proc.stdout)
    assert payload["summary"]["resolved"] == 1
    assert payload["summary"]["broken"] == 1
    assert payload["config"]["informative_references"] == ["DOM"]
    assert json.loads(report_path.read_text(encoding="utf-8")) == payload
    assert 'href="#dfn-token"' in out_path.read_text(encoding="utf-8")


def test_strict_mode_fails_on_broken_links(tmp_path: Path) -> None:
    html_path = tmp_path / "doc.html"
    html_path.write_text(HTML, encoding="utf-8")
    proc = _run("--html", str(html_path), "--strict")
    assert proc.returncode == 2


def test_xref_defers_unknown_terms(tmp_path: Path) -> None:
    html_path = tmp_path / "doc.html"
    html_path.write_text(HTML, encoding="utf-8")
    proc = _run("--html", str(html_path), "--xref", "--strict")
    assert proc.returncode == 0, proc.stderr
    payload = json.loads(proc.stdout)
    assert payload["summary"]["deferred"] == 1
    assert payload["deferred"][0]["text"] == "gizmo"


def test_missing_html_file(tmp_path: Path) -> None:
    proc = _run("--html", str(tmp_path / "nope.html"))
    assert proc.returncode == 1
    assert "not found" in proc.stderr
