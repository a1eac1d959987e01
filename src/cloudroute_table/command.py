"""Route table backend driving the platform ``route``/``ip`` command."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import Callable, List, Optional

from cloudroute.config import RouteSpec
from cloudroute.exceptions import RouteInstallFailure

from .base import RouteTable

LOG = logging.getLogger(__name__)

ALREADY_EXISTS_MARKERS = ("file exists", "already exists")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def _is_bsd(platform: str) -> bool:
    return platform == "darwin" or "bsd" in platform


def build_command(spec: RouteSpec, platform: str) -> List[str]:
    """Return the argv that adds ``spec`` on ``platform`` (a ``sys.platform`` value)."""

    if platform == "win32":
        return [
            "route",
            "add",
            spec.network,
            "mask",
            spec.mask,
            spec.gateway,
            "metric",
            str(spec.metric),
        ]
    if _is_bsd(platform):
        # BSD route(8) has no per-route metric.
        return ["route", "-n", "add", "-net", spec.network, "-netmask", spec.mask, spec.gateway]
    return ["ip", "route", "add", spec.destination, "via", spec.gateway, "metric", str(spec.metric)]


class CommandRouteTable(RouteTable):
    """Add routes by running one command per route."""

    def __init__(self, platform: Optional[str] = None, runner: Optional[Runner] = None) -> None:
        self._platform = platform or sys.platform
        self._runner = runner or subprocess.run

    @property
    def platform(self) -> str:
        return self._platform

    def _run(self, cmd: List[str]) -> "subprocess.CompletedProcess[str]":
        LOG.debug("Executing: %s", " ".join(cmd))
        kwargs = {}
        if self._platform == "win32":
            kwargs["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0)
        return self._runner(cmd, check=False, text=True, capture_output=True, **kwargs)

    def add_route(self, spec: RouteSpec) -> None:
        cmd = build_command(spec, self._platform)
        try:
            result = self._run(cmd)
        except OSError as exc:
            raise RouteInstallFailure(f"could not run '{cmd[0]}': {exc}") from exc

        output = f"{result.stdout or ''}\n{result.stderr or ''}".strip()
        lowered = output.lower()
        if any(marker in lowered for marker in ALREADY_EXISTS_MARKERS):
            LOG.debug("Route %s already present", spec.destination)
            return
        # route.exe may exit 0 while reporting a failed addition.
        if result.returncode != 0 or "failed" in lowered:
            raise RouteInstallFailure(
                f"'{' '.join(cmd)}' exited with {result.returncode}: {output or 'no output'}"
            )
