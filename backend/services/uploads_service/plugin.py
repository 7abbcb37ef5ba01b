"""Uploads plugin wiring its router and service capability."""

from __future__ import annotations

from kernel import Kernel, ServicePlugin

from .deps import register_uploads_dependency
from .router import router


class UploadsPlugin(ServicePlugin):
    name = "uploads"

    def setup(self, kernel: Kernel) -> None:
        register_uploads_dependency(kernel)
        kernel.include_router(router, prefix="/api")


__all__ = ["UploadsPlugin"]
