"""
Download adapter — fetch a release archive and unpack it.

Used for toolchains shipped as tarballs (Go on Linux). The previous
install tree is removed before extraction so versions never mix.
Destinations outside the user's home usually need root; with
``needs_sudo`` the remove/extract half runs through ``sudo rm`` and
``sudo tar`` instead of in-process.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tarfile
import time
import urllib.request
from pathlib import Path

from devbootstrap import __version__
from devbootstrap.adapters.base import Adapter, ExecutionContext
from devbootstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)


class DownloadAdapter(Adapter):
    """Download and extract ``.tar.gz`` archives.

    Action params:
        operation (str): Only 'download_extract' is supported.
        url (str): HTTPS URL of the archive.
        archive_path (str): Where to save the download.
        dest_dir (str): Directory to extract into.
        replace_dir (str): Tree removed before extracting (optional).
    """

    @property
    def name(self) -> str:
        return "download"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if context.params.get("operation") != "download_extract":
            return False, "Unknown operation. Valid: download_extract"
        for key in ("url", "archive_path", "dest_dir"):
            if not context.params.get(key):
                return False, f"Missing required param: '{key}'"
        url = context.params["url"]
        if not url.startswith(("https://", "http://")):
            return False, f"Unsupported URL scheme: {url}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.params
        url = params["url"]
        archive = Path(params["archive_path"])
        dest = Path(params["dest_dir"])
        replace = params.get("replace_dir")
        start = time.monotonic()

        try:
            size = self._download(url, archive, context.timeout)
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Download failed: {e}",
                metadata={"url": url},
            )

        try:
            if context.action.needs_sudo:
                self._extract_with_sudo(archive, dest, replace, context)
            else:
                self._extract(archive, dest, replace)
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Extract failed: {e}",
                metadata={"archive": str(archive), "dest": str(dest)},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=f"Downloaded {size} bytes and extracted into {dest}",
            duration_ms=elapsed_ms,
            metadata={"url": url, "archive": str(archive), "dest": str(dest), "size": size},
        )

    # ── Helpers ─────────────────────────────────────────────────

    @staticmethod
    def _download(url: str, target: Path, timeout: int | None) -> int:
        target.parent.mkdir(parents=True, exist_ok=True)
        req = urllib.request.Request(url, headers={"User-Agent": f"devbootstrap/{__version__}"})
        with urllib.request.urlopen(req, timeout=timeout) as resp, target.open("wb") as f:
            shutil.copyfileobj(resp, f)
        return target.stat().st_size

    @staticmethod
    def _extract(archive: Path, dest: Path, replace: str | None) -> None:
        if replace and Path(replace).exists():
            shutil.rmtree(replace)
        dest.mkdir(parents=True, exist_ok=True)
        with tarfile.open(archive, "r:gz") as tar:
            tar.extractall(dest, filter="data")

    @staticmethod
    def _extract_with_sudo(
        archive: Path,
        dest: Path,
        replace: str | None,
        ctx: ExecutionContext,
    ) -> None:
        commands = []
        if replace:
            commands.append(["sudo", "rm", "-rf", replace])
        commands.append(["sudo", "mkdir", "-p", str(dest)])
        commands.append(["sudo", "tar", "-C", str(dest), "-xzf", str(archive)])
        for cmd in commands:
            result = subprocess.run(
                cmd,
                env=ctx.env or None,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=ctx.timeout,
            )
            if result.returncode != 0:
                raise RuntimeError(
                    f"{' '.join(cmd)} exited with code {result.returncode}: "
                    f"{(result.stdout or '').strip()}"
                )
