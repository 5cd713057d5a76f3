"""Command that configures and runs the site generation server."""

from __future__ import annotations

import argparse
import logging
import os
import signal
import socket
import threading
from collections.abc import Sequence
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask
from werkzeug.serving import make_server

from walrus_sitegen.api import APIHandler, create_app
from walrus_sitegen.config import Config, ConfigError, load_config
from walrus_sitegen.generator import Generator
from walrus_sitegen.walrus import Deployer

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"
SHUTDOWN_TIMEOUT = 10.0
_POLL_INTERVAL = 0.5


def load_env_file(path: str | os.PathLike[str] | None = None) -> bool:
    """Load variables from a dotenv file without overriding ones already set.

    Returns True when the file was read, False when it is missing or unreadable.
    """
    env_path = Path(path if path is not None else DEFAULT_ENV_FILE)
    if not env_path.is_file():
        logger.info(
            "%s file not found, relying on system environment variables.", env_path
        )
        return False
    try:
        load_dotenv(env_path, override=False)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Error loading %s file: %s", env_path, exc)
        return False
    logger.info("Loaded environment variables from %s file.", env_path)
    return True


def build_app(config: Config) -> Flask:
    """Wire the generator, deployer and handlers together into an application."""
    generator = Generator(config.openai_key, config.embedding_model_id)
    deployer = Deployer(config.site_builder_path, config.walrus_cli_path)
    handler = APIHandler(
        generator,
        deployer,
        config.sui_network,
        config.sui_rpc,
        config.suins_contract_address,
        config.suins_nft_type,
    )
    if os.environ.get("APP_ENV") != "production":
        logger.info("Running in debug mode")
    return create_app(handler)


def _split_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address; an empty host means all interfaces."""
    if not address:
        address = ":http"
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not port:
        port_number = 0
    elif port.isdigit():
        port_number = int(port)
    else:
        try:
            port_number = socket.getservbyname(port, "tcp")
        except OSError as exc:
            raise ValueError(f"unknown port {port!r} in address {address!r}") from exc
    if not 0 <= port_number <= 65535:
        raise ValueError(f"invalid port {port_number} in address {address!r}")
    return host or "0.0.0.0", port_number


def _serve(app: Flask, address: str) -> int:
    try:
        host, port = _split_address(address)
        server = make_server(host, port, app, threaded=True)
    except (ValueError, OSError) as exc:
        logger.error("API server listen error: %s", exc)
        return 1

    received: list[int] = []
    stop = threading.Event()

    def on_signal(signum: int, _frame: object) -> None:
        received.append(signum)
        stop.set()

    previous = {
        sig: signal.signal(sig, on_signal) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    thread = threading.Thread(target=server.serve_forever, name="api-server", daemon=True)
    logger.info("Starting API server on %s", address)
    thread.start()
    try:
        while not stop.wait(_POLL_INTERVAL):
            if not thread.is_alive():
                logger.error("API server stopped unexpectedly.")
                server.server_close()
                return 1
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    logger.info(
        "Received signal: %s. Shutting down server...", signal.Signals(received[0]).name
    )
    logger.info("Shutting down API server...")
    stopper = threading.Thread(target=server.shutdown, daemon=True)
    stopper.start()
    stopper.join(SHUTDOWN_TIMEOUT)
    thread.join(SHUTDOWN_TIMEOUT)
    server.server_close()
    if thread.is_alive():
        logger.error("API server forced shutdown: timed out after %.0fs", SHUTDOWN_TIMEOUT)
    else:
        logger.info("API server gracefully stopped.")
    logger.info("Application exiting.")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the server until SIGINT or SIGTERM; return the exit status."""
    parser = argparse.ArgumentParser(
        prog="walrus-sitegen",
        description="Serve the site generation and deployment API.",
    )
    parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    load_env_file()
    try:
        config = load_config(".")
    except ConfigError as exc:
        logger.error("Cannot load config: %s", exc)
        return 1

    app = build_app(config)
    return _serve(app, config.server_address)