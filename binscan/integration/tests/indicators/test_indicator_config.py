import json

import pytest

from binscan.api.indicators.config import (
    DEFAULT_CONFIG,
    ScanConfig,
    config_from_env,
    config_from_mapping,
    load_config,
)
from binscan.api.indicators.engine.classify import Category
from binscan.api.indicators.errors import ConfigError

CAT = Category(name="antidebug_ptrace", patterns=("ptrace",), cap=50)
UNCAPPED = Category(name="path_absolute", patterns=("/",), cap=None)


def test_cap_precedence():
    assert DEFAULT_CONFIG.cap_for(CAT) == 50
    assert DEFAULT_CONFIG.cap_for(UNCAPPED) is None
    assert ScanConfig(max_results=5).cap_for(CAT) == 5
    assert ScanConfig(max_results=5).cap_for(UNCAPPED) == 5
    cfg = ScanConfig(max_results=5, caps={"antidebug_ptrace": 7, "path_absolute": None})
    assert cfg.cap_for(CAT) == 7
    assert cfg.cap_for(UNCAPPED) is None


def test_mapping_round_trip():
    cfg = config_from_mapping(
        {"max_results": 10, "caps": {"c2_url": 3}, "symbol_stride": 8, "probe_width": 0, "passes": ["c2"]}
    )
    assert cfg.max_results == 10
    assert cfg.caps == {"c2_url": 3}
    assert cfg.symbol_stride == 8
    assert cfg.probe_width == 0
    assert cfg.passes == ("c2",)


@pytest.mark.parametrize(
    "data",
    [
        {"bogus": 1},
        {"max_results": "ten"},
        {"max_results": True},
        {"max_results": -1},
        {"symbol_stride": 0},
        {"caps": []},
        {"caps": {"x": -2}},
        {"passes": "c2"},
    ],
)
def test_mapping_rejects_bad_values(data):
    with pytest.raises(ConfigError):
        config_from_mapping(data)


def test_load_config(tmp_path):
    path = tmp_path / "scan.json"
    path.write_text(json.dumps({"max_results": 2}))
    assert load_config(path).max_results == 2


def test_load_config_errors(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(ConfigError):
        load_config(bad)
    listy = tmp_path / "list.json"
    listy.write_text("[1, 2]")
    with pytest.raises(ConfigError, match="JSON object"):
        load_config(listy)


def test_env_overrides():
    base = ScanConfig(max_results=3, passes=("c2",))
    cfg = config_from_env(base, {"BINSCAN_MAX_RESULTS": "9", "BINSCAN_PASSES": "xpc, machipc ,"})
    assert cfg.max_results == 9
    assert cfg.passes == ("xpc", "machipc")
    assert config_from_env(base, {}) is base


def test_env_rejects_non_integer():
    with pytest.raises(ConfigError):
        config_from_env(DEFAULT_CONFIG, {"BINSCAN_MAX_RESULTS": "lots"})
