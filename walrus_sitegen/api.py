"""HTTP endpoints of the site generation server."""

from __future__ import annotations

import json
import logging
from typing import Any

from flask import Flask, jsonify, request

logger = logging.getLogger(__name__)

_GENERATE_FIELDS = ("prompt", "wallet")


class _BindError(ValueError):
    """The request body does not describe a valid request."""


def _bind_generate_request(body: bytes) -> tuple[str, str]:
    if not body.strip():
        raise _BindError("EOF")
    try:
        data: Any = json.loads(body)
    except ValueError as exc:
        raise _BindError(str(exc)) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise _BindError(f"cannot decode {type(data).__name__} into a generate request")

    values = dict.fromkeys(_GENERATE_FIELDS, "")
    for key, value in data.items():
        name = key.lower()
        if name not in values or value is None:
            continue
        if not isinstance(value, str):
            raise _BindError(f"field {key!r} must be a string, not {type(value).__name__}")
        values[name] = value

    missing = [
        f"Key: 'GenerateRequest.{name.title()}' Error:Field validation for "
        f"'{name.title()}' failed on the 'required' tag"
        for name in _GENERATE_FIELDS
        if not values[name]
    ]
    if missing:
        raise _BindError("\n".join(missing))
    return values["prompt"], values["wallet"]


class APIHandler:
    """Holds the services the endpoints use."""

    def __init__(
        self,
        ai_generator: Any,
        walrus_deployer: Any,
        sui_network: str = "",
        sui_rpc_url: str = "",
        suins_contract_address: str = "",
        suins_nft_type: str = "",
    ) -> None:
        self.ai_generator = ai_generator
        self.walrus_deployer = walrus_deployer
        self.sui_network = sui_network
        self.sui_rpc_url = sui_rpc_url
        self.suins_contract_address = suins_contract_address
        self.suins_nft_type = suins_nft_type

    def generate_site(self):
        """POST /project/generate: generate a site from a prompt and deploy it."""
        try:
            prompt, wallet = _bind_generate_request(request.get_data())
        except _BindError as exc:
            return jsonify(error="Invalid request body: " + str(exc)), 400

        logger.info("Received generation request for wallet %s", wallet)
        try:
            project_id = self.ai_generator.generate_site_and_store(prompt, wallet)
        except Exception as exc:  # every failure becomes a 500 response
            logger.error("Error generating site for wallet %s: %s", wallet, exc)
            return jsonify(error="Failed to generate site"), 500
        logger.info(
            "Site generation successful for wallet %s. Project ID: %s", wallet, project_id
        )

        try:
            cid = self.walrus_deployer.deploy_files()
        except Exception as exc:  # every failure becomes a 500 response
            logger.error("Error deploying project %s to Walrus: %s", project_id, exc)
            return jsonify(error="Failed to deploy project to Walrus"), 500
        logger.info("Project %s deployed successfully. CID: %s", project_id, cid)

        return jsonify(projectID=project_id, cid=cid), 201


def _health():
    return jsonify(status="ok")


def register_routes(app: Flask, handler: APIHandler) -> None:
    """Attach the project and health endpoints to ``app``."""
    app.add_url_rule(
        "/project/generate", "generate_site", handler.generate_site, methods=["POST"]
    )
    app.add_url_rule("/health", "health", _health, methods=["GET"])


def create_app(handler: APIHandler) -> Flask:
    """Return a Flask application serving the endpoints of ``handler``."""
    app = Flask(__name__)
    register_routes(app, handler)
    return app