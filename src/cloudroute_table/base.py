"""Abstract interface for routing table backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cloudroute.config import RouteSpec


class RouteTable(ABC):
    """Base class for backends used by :class:`~cloudroute.installer.RouteInstaller`."""

    @abstractmethod
    def add_route(self, spec: RouteSpec) -> None:
        """Install ``spec``.

        Must raise :class:`~cloudroute.exceptions.RouteInstallFailure` when the
        route could not be added.  A route that already exists counts as
        installed.  Implementations are called from several worker threads at
        once.
        """
