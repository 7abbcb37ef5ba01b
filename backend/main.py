"""Application entry point bootstrapping the microkernel and plugins."""

from __future__ import annotations

from fastapi import FastAPI

from kernel import Kernel
from services.auth_service.plugin import AuthPlugin
from services.uploads_service.plugin import UploadsPlugin


def create_kernel() -> Kernel:
    kernel = Kernel()
    kernel.register_plugin(AuthPlugin())
    kernel.register_plugin(UploadsPlugin())
    return kernel


kernel = create_kernel()
app: FastAPI = kernel.app


@app.get("/api/")
def root():
    return {"message": "Welcome to the SimplifAI API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
