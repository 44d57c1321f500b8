import json

import pytest

from barutil.config import Config, ConfigError


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


@pytest.fixture
def simple(tmp_path):
    return _write(tmp_path / "simple.json", {"layer": "top", "height": 30, "output": "HDMI-0"})


@pytest.fixture
def multi(tmp_path):
    return _write(
        tmp_path / "multi.json",
        [
            {"layer": "bottom", "height": 20, "output": "!Fake HDMI output #1"},
            {"layer": "top", "position": "bottom", "height": 21, "output": ["DP-0", "DP-1"]},
            {"layer": "overlay", "position": "right", "height": 23, "output": "!HDMI-1"},
            {"layer": "overlay", "position": "left", "height": 22, "output": "Fake HDMI output #1"},
        ],
    )


@pytest.fixture
def include(tmp_path):
    first = _write(
        tmp_path / "include-1.json",
        {"layer": "top", "height": 30, "position": "bottom", "nullOption": "set"},
    )
    second = _write(tmp_path / "include-2.json", {"layer": "bottom", "height": 20})
    return _write(
        tmp_path / "include.json",
        {"include": [first, second], "position": "top", "nullOption": None, "output": "HDMI-0"},
    )


@pytest.fixture
def include_multi(tmp_path):
    mod_a = _write(tmp_path / "mod-a.json", {"output": "OUT-0", "height": 20})
    mod_b = _write(tmp_path / "mod-b.json", {"height": 21})
    mod_c = _write(tmp_path / "mod-c.json", {"output": "OUT-X", "height": 22})
    mod_e = _write(tmp_path / "mod-e.json", {"height": 23})
    mod_d = _write(tmp_path / "mod-d.json", {"include": mod_e, "output": "OUT-3"})
    return _write(
        tmp_path / "include-multi.json",
        [
            {"include": mod_a},
            {"output": "OUT-1", "include": mod_b},
            {"output": "OUT-2", "include": mod_c},
            {"include": [mod_d]},
        ],
    )


def _load(path):
    conf = Config()
    conf.load(path)
    return conf


def test_simple_config_data(simple):
    data = _load(simple).get_config()
    assert data["layer"] == "top"
    assert data["height"] == 30


def test_simple_configured_output(simple):
    assert len(_load(simple).get_output_configs("HDMI-0", "Fake HDMI output #0")) == 1


def test_simple_missing_output(simple):
    assert _load(simple).get_output_configs("HDMI-1", "Fake HDMI output #1") == []


def test_multi_select_first(multi):
    data = _load(multi).get_output_configs("DP-0", "Fake DisplayPort output #0")
    assert len(data) == 3
    assert data[0]["layer"] == "bottom"
    assert data[0]["height"] == 20
    assert data[1]["layer"] == "top"
    assert data[1]["position"] == "bottom"
    assert data[1]["height"] == 21
    assert data[2]["layer"] == "overlay"
    assert data[2]["position"] == "right"
    assert data[2]["height"] == 23


def test_multi_select_second(multi):
    data = _load(multi).get_output_configs("HDMI-0", "Fake HDMI output #0")
    assert len(data) == 2
    assert data[0]["layer"] == "bottom"
    assert data[0]["height"] == 20
    assert data[1]["layer"] == "overlay"
    assert data[1]["position"] == "right"
    assert data[1]["height"] == 23


def test_multi_select_by_description(multi):
    data = _load(multi).get_output_configs("HDMI-1", "Fake HDMI output #1")
    assert len(data) == 1
    assert data[0]["layer"] == "overlay"
    assert data[0]["position"] == "left"
    assert data[0]["height"] == 22


def test_include_config_data(include):
    data = _load(include).get_config()
    assert data["layer"] == "top"
    assert data["height"] == 30
    assert data["position"] == "top"
    assert "nullOption" in data and data["nullOption"] is None


def test_include_configured_output(include):
    assert len(_load(include).get_output_configs("HDMI-0", "Fake HDMI output #0")) == 1


def test_include_missing_output(include):
    assert _load(include).get_output_configs("HDMI-1", "Fake HDMI output #1") == []


def test_include_multi_sole_include(include_multi):
    data = _load(include_multi).get_output_configs("OUT-0", "Fake output #0")
    assert len(data) == 1
    assert data[0]["height"] == 20


def test_include_multi_output_and_include(include_multi):
    data = _load(include_multi).get_output_configs("OUT-1", "Fake output #1")
    assert len(data) == 1
    assert data[0]["height"] == 21


def test_include_multi_output_override(include_multi):
    data = _load(include_multi).get_output_configs("OUT-2", "Fake output #2")
    assert len(data) == 1
    assert data[0]["height"] == 22


def test_include_multi_nested_levels(include_multi):
    data = _load(include_multi).get_output_configs("OUT-3", "Fake output #3")
    assert len(data) == 1
    assert data[0]["height"] == 23


def test_include_multi_top_level(include_multi):
    data = _load(include_multi).get_config()
    assert isinstance(data, list)
    assert len(data) == 4
    assert data[0]["output"] == "OUT-0"


def test_config_with_comments(tmp_path):
    path = tmp_path / "config.jsonc"
    path.write_text('{\n  // bar layer\n  "layer": "top"\n}\n', encoding="utf-8")
    assert _load(str(path)).get_config() == {"layer": "top"}


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        Config().load(str(tmp_path / "absent.json"))


def test_missing_include_raises(tmp_path):
    path = _write(tmp_path / "top.json", {"include": str(tmp_path / "absent.json")})
    with pytest.raises(ConfigError):
        Config().load(path)


def test_recursive_include_raises(tmp_path):
    path = tmp_path / "loop.json"
    _write(path, {"include": str(path)})
    with pytest.raises(ConfigError, match="recursive"):
        Config().load(str(path))


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"layer": ', encoding="utf-8")
    with pytest.raises(ConfigError):
        Config().load(str(path))


def test_find_config_path_order(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (second / "config").write_text("{}", encoding="utf-8")
    (first / "config.jsonc").write_text("{}", encoding="utf-8")
    dirs = [f"{first}/", f"{second}/"]
    assert Config.find_config_path(["config", "config.jsonc"], dirs) == f"{first}/config.jsonc"


def test_find_config_path_expands_variables(tmp_path, monkeypatch):
    (tmp_path / "config").write_text("{}", encoding="utf-8")
    monkeypatch.setenv("BARUTIL_TEST_DIR", str(tmp_path))
    found = Config.find_config_path(["config"], ["$BARUTIL_TEST_DIR/"])
    assert found == f"{tmp_path}/config"


def test_find_config_path_none(tmp_path):
    assert Config.find_config_path(["config"], [f"{tmp_path}/"]) is None