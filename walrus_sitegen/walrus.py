"""Building a generated project and publishing it as a Walrus site."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_WORK_DIR = "tmp"
SITES_CONFIG_PATH = "sites-config.yaml"
PUBLISH_EPOCHS = "2"
SITE_OBJECT_ID_PREFIX = "New site object ID: "

Runner = Callable[[Sequence[str], "str | None"], "subprocess.CompletedProcess[str]"]


class DeployError(Exception):
    """A build or publish step failed."""


def _run_command(args: Sequence[str], cwd: str | None) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        list(args),
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        capture_output=True,
        text=True,
        errors="replace",
        check=False,
    )


def _exit_description(returncode: int) -> str:
    if returncode < 0:
        try:
            name = signal.strsignal(-returncode)
        except ValueError:
            name = None
        return f"signal: {(name or str(-returncode)).lower()}"
    return f"exit status {returncode}"


def extract_site_object_id(output: str) -> str:
    """Return the ID on the first ``New site object ID:`` line, or an empty string."""
    for line in output.split("\n"):
        line = line.strip()
        if line.startswith(SITE_OBJECT_ID_PREFIX):
            return line[len(SITE_OBJECT_ID_PREFIX):]
    return ""


class Deployer:
    """Installs, builds and publishes the project found in the work directory."""

    def __init__(
        self,
        site_builder_path: str,
        walrus_cli_path: str,
        work_dir: str | os.PathLike[str] = DEFAULT_WORK_DIR,
        runner: Runner | None = None,
    ) -> None:
        self.site_builder_path = site_builder_path
        self.walrus_cli_path = walrus_cli_path
        self.work_dir = work_dir
        self._runner = runner if runner is not None else _run_command

    def _execute(
        self, args: Sequence[str], cwd: str | None, label: str
    ) -> subprocess.CompletedProcess[str]:
        try:
            result = self._runner(args, cwd)
        except OSError as exc:
            raise DeployError(f"{label} failed: {exc} (stderr: )") from exc
        if result.returncode != 0:
            stderr = result.stderr or ""
            logger.error("%s stderr: %s", label, stderr)
            raise DeployError(
                f"{label} failed: {_exit_description(result.returncode)} (stderr: {stderr})"
            )
        return result

    def deploy_files(self) -> str:
        """Run npm install, npm run build and site-builder; return the site object ID."""
        work_dir = os.fspath(self.work_dir)

        logger.info("Running npm install in %s", work_dir)
        self._execute(["npm", "install"], work_dir, "npm install")
        logger.info("npm install completed successfully.")

        logger.info("Running npm run build in %s", work_dir)
        self._execute(["npm", "run", "build"], work_dir, "npm run build")
        logger.info("npm run build completed successfully.")

        dist_dir = os.path.join(work_dir, "dist")
        if not os.path.exists(dist_dir):
            raise DeployError(
                f"build process did not create expected dist directory at {dist_dir}"
            )

        args = [
            self.site_builder_path,
            "--config",
            SITES_CONFIG_PATH,
            "publish",
            dist_dir,
            "--epochs",
            PUBLISH_EPOCHS,
        ]
        logger.info("Running site-builder with %s folder: %s", dist_dir, " ".join(args))
        result = self._execute(args, None, "site-builder")
        output = result.stdout or ""
        logger.info("site-builder stdout: %s", output)

        site_object_id = extract_site_object_id(output)
        if not site_object_id:
            raise DeployError("failed to extract site object ID from site-builder output")
        logger.info("Site object ID: %s", site_object_id)
        return site_object_id