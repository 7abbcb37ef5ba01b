"""Plugin contract for services that mount routes and capabilities on the kernel."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .kernel import Kernel


class ServicePlugin(ABC):
    """A service registers its AWS-backed capabilities and its router in ``setup``."""

    name: str

    @abstractmethod
    def setup(self, kernel: "Kernel") -> None:
        """Hook invoked once by ``Kernel.register_plugin``."""


__all__ = ["ServicePlugin"]
