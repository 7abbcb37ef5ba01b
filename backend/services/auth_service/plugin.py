"""Authentication plugin wiring the Cognito/OTP routes into the kernel."""

from __future__ import annotations

from kernel import Kernel, ServicePlugin

from .deps import register_dependencies
from .router import router


class AuthPlugin(ServicePlugin):
    name = "auth"

    def setup(self, kernel: Kernel) -> None:
        register_dependencies(kernel)
        kernel.include_router(router, prefix="/api")


__all__ = ["AuthPlugin"]
