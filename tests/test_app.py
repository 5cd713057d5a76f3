import json

import pytest

from walrus_sitegen.app import _split_address, build_app, load_env_file, main
from walrus_sitegen.config import Config


def _unset(monkeypatch, name):
    # Record the variable so that whatever the test sets is removed afterwards.
    monkeypatch.setenv(name, "x")
    monkeypatch.delenv(name)


def test_load_env_file_sets_variables(tmp_path, monkeypatch):
    _unset(monkeypatch, "WSG_TEST_FROM_FILE")
    env_file = tmp_path / ".env"
    env_file.write_text("WSG_TEST_FROM_FILE=loaded\n", encoding="utf-8")

    assert load_env_file(env_file) is True
    import os

    assert os.environ["WSG_TEST_FROM_FILE"] == "loaded"


def test_load_env_file_keeps_existing_variables(tmp_path, monkeypatch):
    monkeypatch.setenv("WSG_TEST_EXISTING", "kept")
    env_file = tmp_path / ".env"
    env_file.write_text("WSG_TEST_EXISTING=replaced\n", encoding="utf-8")

    assert load_env_file(env_file) is True
    import os

    assert os.environ["WSG_TEST_EXISTING"] == "kept"


def test_load_env_file_missing_returns_false(tmp_path):
    assert load_env_file(tmp_path / "absent.env") is False


def test_load_env_file_defaults_to_cwd(tmp_path, monkeypatch):
    _unset(monkeypatch, "WSG_TEST_DEFAULT")
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("WSG_TEST_DEFAULT=yes\n", encoding="utf-8")

    assert load_env_file() is True
    import os

    assert os.environ["WSG_TEST_DEFAULT"] == "yes"


def test_build_app_serves_health():
    app = build_app(Config(server_address=":8080", sui_network="devnet"))
    response = app.test_client().get("/health")
    assert response.status_code == 200
    assert json.loads(response.data) == {"status": "ok"}


def test_build_app_rejects_bad_generate_body():
    app = build_app(Config())
    response = app.test_client().post("/project/generate", data=b"")
    assert response.status_code == 400
    assert json.loads(response.data)["error"].startswith("Invalid request body: ")


def test_build_app_generate_requires_fields():
    app = build_app(Config())
    response = app.test_client().post(
        "/project/generate", json={"prompt": "a landing page"}
    )
    assert response.status_code == 400
    assert "Wallet" in json.loads(response.data)["error"]


@pytest.mark.parametrize(
    "address, expected",
    [
        ("127.0.0.1:8080", ("127.0.0.1", 8080)),
        ("[::1]:9000", ("::1", 9000)),
        ("localhost:0", ("localhost", 0)),
    ],
)
def test_split_address(address, expected):
    assert _split_address(address) == expected


def test_split_address_empty_host_listens_everywhere():
    host, port = _split_address(":8080")
    assert port == 8080
    assert host == "0.0.0.0"


@pytest.mark.parametrize("address", ["nocolon", "host:99999", "host:no-such-service-name"])
def test_split_address_rejects_invalid(address):
    with pytest.raises(ValueError):
        _split_address(address)


def test_main_fails_on_unreadable_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("key: [unclosed\n", encoding="utf-8")
    assert main([]) == 1


def test_main_fails_on_invalid_address(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _unset(monkeypatch, "SERVER_ADDRESS")
    (tmp_path / "config.yaml").write_text(
        "SERVER_ADDRESS: no-port-here\n", encoding="utf-8"
    )
    assert main([]) == 1


def test_main_rejects_unknown_arguments():
    with pytest.raises(SystemExit) as info:
        main(["--no-such-option"])
    assert info.value.code == 2