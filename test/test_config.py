import pytest
import yaml

from gasprof.config import ConfigError, ProfilerConfig


def test_defaults_when_file_missing(tmp_path):
    config = ProfilerConfig.from_config_file(str(tmp_path / "missing.yaml"))
    assert config == ProfilerConfig()
    assert config.base_color == "#17BEBB"
    assert config.row_height == 40
    assert config.rpc_url == "http://localhost:8545"
    assert config.log_tree is False


def test_round_trip(tmp_path):
    path = str(tmp_path / "gasprof.config.yaml")
    config = ProfilerConfig(base_color="#336699", row_height=24, rpc_url="http://node:8545", log_tree=True)
    config.save_to_config_file(path)
    assert ProfilerConfig.from_config_file(path) == config


def test_save_keeps_other_sections(tmp_path):
    path = tmp_path / "gasprof.config.yaml"
    path.write_text("other:\n  keep: 1\n")
    ProfilerConfig(row_height=10).save_to_config_file(str(path))
    data = yaml.safe_load(path.read_text())
    assert data["other"] == {"keep": 1}
    assert data["profile"]["row_height"] == 10


def test_partial_file_uses_defaults(tmp_path):
    path = tmp_path / "gasprof.config.yaml"
    path.write_text("profile:\n  row_height: 32\n")
    config = ProfilerConfig.from_config_file(str(path))
    assert config.row_height == 32
    assert config.base_color == "#17BEBB"


@pytest.mark.parametrize("content", [
    "profile: [1, 2]\n",
    "- just\n- a list\n",
    "profile:\n  base_color: '#12'\n",
    "profile:\n  row_height: 0\n",
    "profile: {bad yaml\n",
])
def test_malformed_files(tmp_path, content):
    path = tmp_path / "gasprof.config.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError):
        ProfilerConfig.from_config_file(str(path))


def test_invalid_values():
    with pytest.raises(ConfigError):
        ProfilerConfig(base_color="teal")
    with pytest.raises(ConfigError):
        ProfilerConfig(row_height=-1)
    with pytest.raises(ConfigError):
        ProfilerConfig(row_height=True)
