"""Request Dependencies — collaborators built at startup, handed to routes per request."""

from fastapi import Request

from newsletter.config import Settings
from newsletter.infrastructure.email_client import EmailClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_email_client(request: Request) -> EmailClient:
    client = getattr(request.app.state, "email_client", None)
    if client is None:
        raise RuntimeError("Email client not initialized")
    return client
