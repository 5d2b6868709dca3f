import json

import pytest

from binscan.api.indicators import cli, registry
from binscan.integration.tests import macho_helpers as helpers


@pytest.fixture
def binary(tmp_path):
    return helpers.build_macho(tmp_path / "sample")


def test_groups(capsys):
    assert cli.main(["groups"]) == 0
    assert capsys.readouterr().out.split() == registry.list_groups()


def test_list_group(capsys):
    assert cli.main(["list", "--group", "machipc"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert "ipc_msg_ops (machipc): message operations" in lines
    assert lines == sorted(lines)


def test_list_all_covers_catalog(capsys):
    assert cli.main(["list"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == len(registry.list_categories())


def test_describe_pass_and_category(capsys):
    assert cli.main(["describe", "machipc"]) == 0
    out = capsys.readouterr().out
    assert "title: Mach IPC Analysis" in out
    assert "  layout: mig_subsystem" in out

    assert cli.main(["describe", "antidebug_ptrace"]) == 0
    out = capsys.readouterr().out
    assert "group: antianalysis" in out
    assert "kind: strings" in out
    assert "cap: 50" in out
    assert "patterns: ptrace, PT_DENY_ATTACH" in out


def test_describe_unknown(capsys):
    assert cli.main(["describe", "nope"]) == 1
    assert "unknown pass: nope" in capsys.readouterr().err


def test_scan_json(binary, capsys):
    assert cli.main(["scan", str(binary), "--pass", "antianalysis", "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["meta"]["cputype"] == "x86_64"
    assert list(payload["passes"]) == ["antianalysis"]
    texts = [m["text"] for m in payload["passes"]["antianalysis"]["categories"]["antidebug_ptrace"]]
    assert texts == ["ptrace", "PT_DENY_ATTACH"]


def test_scan_max_results(binary, capsys):
    assert cli.main(["scan", str(binary), "--pass", "antianalysis", "--max-results", "1", "--format", "json"]) == 0
    body = json.loads(capsys.readouterr().out)["passes"]["antianalysis"]
    assert body["counts"]["antidebug_ptrace"] == 1
    assert "antidebug_ptrace" in body["truncated"]


def test_scan_text_to_file(binary, tmp_path, capsys):
    out = tmp_path / "reports" / "machipc.txt"
    assert cli.main(["scan", str(binary), "--pass", "machipc", "--out", str(out)]) == 0
    assert capsys.readouterr().out.strip() == "wrote %s" % out
    text = out.read_text()
    assert "MACH IPC ANALYSIS REPORT" in text
    assert "  [0x%x] Subsystem 500: 20 messages (IDs 500-519), maxsize: 128" % helpers.MIG_ADDR in text


def test_scan_json_to_file(binary, tmp_path, capsys):
    out = tmp_path / "report.json"
    assert cli.main(["scan", str(binary), "--pass", "xpc", "--format", "json", "--out", str(out)]) == 0
    status = json.loads(capsys.readouterr().out)
    assert status == {"ok": True, "out": str(out)}
    assert "xpc" in json.loads(out.read_text())["passes"]


def test_scan_config_file(binary, tmp_path, capsys):
    cfg = tmp_path / "scan.json"
    cfg.write_text(json.dumps({"caps": {"antidebug_ptrace": 1}, "passes": ["antianalysis"]}))
    assert cli.main(["scan", str(binary), "--config", str(cfg), "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert list(payload["passes"]) == ["antianalysis"]
    assert payload["passes"]["antianalysis"]["counts"]["antidebug_ptrace"] == 1


def test_scan_env_passes(binary, capsys, monkeypatch):
    monkeypatch.setenv("BINSCAN_PASSES", "network")
    assert cli.main(["scan", str(binary), "--format", "json"]) == 0
    assert list(json.loads(capsys.readouterr().out)["passes"]) == ["network"]


def test_scan_errors_return_one(tmp_path, capsys):
    assert cli.main(["scan", str(tmp_path / "missing"), "--format", "json"]) == 1
    err = json.loads(capsys.readouterr().out)
    assert err["ok"] is False
    assert "not found" in err["error"]

    assert cli.main(["scan", str(tmp_path / "missing")]) == 1
    assert capsys.readouterr().err.startswith("error: ")


def test_scan_unknown_pass(binary, capsys):
    assert cli.main(["scan", str(binary), "--pass", "bogus", "--format", "json"]) == 1
    assert json.loads(capsys.readouterr().out) == {"ok": False, "error": "unknown pass: bogus"}


def test_scan_rejects_negative_max_results(binary, capsys):
    assert cli.main(["scan", str(binary), "--pass", "antianalysis", "--max-results", "-1", "--format", "json"]) == 1
    err = json.loads(capsys.readouterr().out)
    assert err["ok"] is False
    assert "--max-results must be >= 0" in err["error"]


def test_scan_rejects_negative_limit(binary, capsys):
    assert cli.main(["scan", str(binary), "--pass", "antianalysis", "--limit", "-1"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "--limit must be >= 0" in captured.err


def test_scan_zero_limit_hides_rows(binary, capsys):
    assert cli.main(["scan", str(binary), "--pass", "antianalysis", "--limit", "0"]) == 0
    out = capsys.readouterr().out
    assert "ptrace: 2" in out
    assert "  ... and 2 more" in out


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage:" in capsys.readouterr().out
