from __future__ import annotations

from fastapi import APIRouter

from . import token, web

routers: list[APIRouter] = [
    token.router,
    web.router,
]

__all__ = ["routers"]
