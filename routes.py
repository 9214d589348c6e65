# routes.py
from fastapi import FastAPI
from controller.key_controller import key_router
from controller.server_controller import server_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(server_router)
    app.include_router(key_router)
