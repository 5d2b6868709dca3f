import json

from binscan.api.indicators.engine.source import MemorySource
from binscan.api.indicators.passes import antianalysis, machipc
from binscan.api.indicators.report import build_payload, render_text
from binscan.api.indicators.runner import run_pass

CSTRING = 0x100001000


def _result(data, pass_cfg=antianalysis.PASS):
    src = MemorySource([("__TEXT", "__cstring", CSTRING, data + b"\x00" * 8)])
    return run_pass(src, pass_cfg)


def test_payload_lists_empty_categories_with_zero_counts():
    result = _result(b"ptrace\x00")
    payload = build_payload([result], {"path": "/tmp/x"})
    assert payload["meta"] == {"path": "/tmp/x"}
    body = payload["passes"]["antianalysis"]
    assert body["title"] == antianalysis.PASS.title
    assert set(body["counts"]) == {cat.name for cat in antianalysis.PASS.categories()}
    assert body["counts"]["antidebug_ptrace"] == 1
    assert body["counts"]["antivm_hardware"] == 0
    assert body["categories"]["antivm_hardware"] == []
    assert body["categories"]["antidebug_ptrace"] == [{"address": "0x%x" % CSTRING, "text": "ptrace"}]
    assert body["truncated"] == []
    assert body["total"] == 1
    # The payload must survive a JSON round trip unchanged.
    assert json.loads(json.dumps(payload)) == payload


def test_payload_structures_section():
    result = _result(b"", machipc.PASS)
    body = build_payload([result])["passes"]["machipc"]
    assert body["structures"] == {"mig_subsystem": []}
    assert body["total"] == 0


def test_text_report_marks_absent_phases():
    text = render_text([_result(b"ptrace\x00")], {"path": "/tmp/x"})
    lines = text.splitlines()
    assert lines[0] == "path: /tmp/x"
    assert "ANTI-ANALYSIS TECHNIQUE DETECTION REPORT" in lines
    assert "[1] ANTI-DEBUGGING" in lines
    assert "ptrace: 1" in lines
    assert "  [0x%x] ptrace" % CSTRING in lines
    assert "No anti-vm/sandbox indicators found (verified absent)" in lines
    assert "SUMMARY" in lines
    assert "Patch anti-debugging checks before dynamic analysis" in text
    assert "Modify VM artifacts" not in text


def test_text_report_capped_and_limit():
    result = _result(b"ptrace\x00" * 60)
    text = render_text([result], limit=3)
    assert "ptrace: 50 (capped)" in text
    assert "  ... and 47 more" in text


def test_typed_matches_render_type():
    result = _result(b"VMware Virtual Platform\x00")
    text = render_text([result])
    assert '[VMware] "VMware Virtual Platform"' in text
