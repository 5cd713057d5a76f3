import pytest

from walrus_sitegen.api import APIHandler, create_app


class FakeGenerator:
    def __init__(self, project_id="proj-1", error=None):
        self.project_id = project_id
        self.error = error
        self.calls = []

    def generate_site_and_store(self, prompt, wallet):
        self.calls.append((prompt, wallet))
        if self.error is not None:
            raise self.error
        return self.project_id


class FakeDeployer:
    def __init__(self, cid="0xabc", error=None):
        self.cid = cid
        self.error = error
        self.calls = 0

    def deploy_files(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.cid


def make_client(generator=None, deployer=None):
    generator = generator or FakeGenerator()
    deployer = deployer or FakeDeployer()
    handler = APIHandler(generator, deployer, "devnet", "", "", "")
    return create_app(handler).test_client(), generator, deployer


def test_health():
    client, _, _ = make_client()
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_generate_success():
    client, generator, deployer = make_client()
    response = client.post("/project/generate", json={"prompt": "a blog", "wallet": "0x01"})
    assert response.status_code == 201
    assert response.get_json() == {"projectID": "proj-1", "cid": "0xabc"}
    assert generator.calls == [("a blog", "0x01")]
    assert deployer.calls == 1


def test_generate_keys_match_case_insensitively():
    client, generator, _ = make_client()
    response = client.post("/project/generate", json={"PROMPT": "shop", "Wallet": "0x02"})
    assert response.status_code == 201
    assert generator.calls == [("shop", "0x02")]


def test_missing_field_is_bad_request():
    client, generator, _ = make_client()
    response = client.post("/project/generate", json={"prompt": "a blog"})
    assert response.status_code == 400
    error = response.get_json()["error"]
    assert error.startswith("Invalid request body: ")
    assert "'Wallet'" in error and "'Prompt'" not in error
    assert generator.calls == []


@pytest.mark.parametrize(
    "body",
    ["{not json", "", "[1, 2]", '{"prompt": 5, "wallet": "0x01"}'],
)
def test_malformed_body_is_bad_request(body):
    client, generator, _ = make_client()
    response = client.post(
        "/project/generate", data=body, content_type="application/json"
    )
    assert response.status_code == 400
    assert response.get_json()["error"].startswith("Invalid request body: ")
    assert generator.calls == []


def test_generation_failure():
    client, _, deployer = make_client(generator=FakeGenerator(error=RuntimeError("down")))
    response = client.post("/project/generate", json={"prompt": "p", "wallet": "w"})
    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to generate site"}
    assert deployer.calls == 0


def test_deploy_failure():
    client, _, _ = make_client(deployer=FakeDeployer(error=RuntimeError("no npm")))
    response = client.post("/project/generate", json={"prompt": "p", "wallet": "w"})
    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to deploy project to Walrus"}