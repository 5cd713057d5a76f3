from dataclasses import fields

import pytest

from walrus_sitegen.config import Config, ConfigError, load_config

ALL_KEYS = [setting.metadata["key"] for setting in fields(Config)]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ALL_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_missing_file_gives_empty_config(tmp_path):
    assert load_config(tmp_path) == Config()


def test_values_read_from_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text(
        "SERVER_ADDRESS: ':8080'\n"
        "SUI_NETWORK: testnet\n"
        "SUI_RPC_ENDPOINT: https://rpc.example.com\n"
        "SUINS_NFT_TYPE: '0xabc::suins::Suins'\n"
    )
    config = load_config(tmp_path)
    assert config.server_address == ":8080"
    assert config.sui_network == "testnet"
    assert config.sui_rpc == "https://rpc.example.com"
    assert config.suins_nft_type == "0xabc::suins::Suins"
    assert config.openai_key == ""


def test_yaml_keys_are_case_insensitive(tmp_path):
    (tmp_path / "config.yaml").write_text("embedding_model_id: text-embedding-3-small\n")
    assert load_config(tmp_path).embedding_model_id == "text-embedding-3-small"


def test_yml_extension_is_found(tmp_path):
    (tmp_path / "config.yml").write_text("WALRUS_CLI_PATH: /usr/bin/walrus\n")
    assert load_config(tmp_path).walrus_cli_path == "/usr/bin/walrus"


def test_environment_overrides_file(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text("SUI_NETWORK: devnet\n")
    monkeypatch.setenv("SUI_NETWORK", "mainnet")
    assert load_config(tmp_path).sui_network == "mainnet"


def test_environment_alone_is_enough(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "placeholder")
    monkeypatch.setenv("SITE_BUILDER_PATH", "/opt/site-builder")
    config = load_config(tmp_path)
    assert config.openai_key == "placeholder"
    assert config.site_builder_path == "/opt/site-builder"


def test_empty_environment_value_does_not_override(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text("SEAL_ENDPOINT: https://seal.example.com\n")
    monkeypatch.setenv("SEAL_ENDPOINT", "")
    assert load_config(tmp_path).seal_endpoint == "https://seal.example.com"


def test_numbers_and_booleans_decode_to_strings(tmp_path):
    (tmp_path / "config.yaml").write_text("SERVER_ADDRESS: 8080\nSUI_NETWORK: true\n")
    config = load_config(tmp_path)
    assert config.server_address == "8080"
    assert config.sui_network == "1"


def test_null_value_is_empty(tmp_path):
    (tmp_path / "config.yaml").write_text("SUI_NETWORK:\n")
    assert load_config(tmp_path).sui_network == ""


def test_empty_file_gives_empty_config(tmp_path):
    (tmp_path / "config.yaml").write_text("")
    assert load_config(tmp_path) == Config()


def test_nested_value_cannot_be_decoded(tmp_path):
    (tmp_path / "config.yaml").write_text("SUI_NETWORK:\n  name: devnet\n")
    with pytest.raises(ConfigError, match="unable to decode config into struct"):
        load_config(tmp_path)


def test_invalid_yaml_is_an_error(tmp_path):
    (tmp_path / "config.yaml").write_text("SUI_NETWORK: [unclosed\n")
    with pytest.raises(ConfigError, match="error reading config file"):
        load_config(tmp_path)


def test_non_mapping_file_is_an_error(tmp_path):
    (tmp_path / "config.yaml").write_text("- one\n- two\n")
    with pytest.raises(ConfigError, match="error reading config file"):
        load_config(tmp_path)


def test_missing_rpc_is_only_a_warning(tmp_path, caplog):
    (tmp_path / "config.yaml").write_text("SUI_NETWORK: devnet\n")
    with caplog.at_level("WARNING", logger="walrus_sitegen.config"):
        config = load_config(tmp_path)
    assert config.sui_network == "devnet"
    assert "SUI_RPC_ENDPOINT is not set." in caplog.text