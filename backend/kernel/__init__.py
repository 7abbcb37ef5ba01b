"""Microkernel runtime: the FastAPI host and the plugin contract services implement."""

from .kernel import Kernel
from .plugin import ServicePlugin

__all__ = ["Kernel", "ServicePlugin"]
