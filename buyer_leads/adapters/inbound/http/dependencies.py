"""FastAPI dependencies for the HTTP adapter."""

from fastapi import Request

from buyer_leads.domain.errors import AuthenticationError
from buyer_leads.domain.value_objects.actor_context import ActorContext
from buyer_leads.infrastructure.config.settings import settings
from buyer_leads.infrastructure.wiring.container import Container


def get_container(request: Request) -> Container:
    """Return the container the application was built with."""
    return request.app.state.container


def get_actor_context(request: Request) -> ActorContext:
    """
    Resolve the acting identity from the configured actor header.

    Args:
        request: Incoming request

    Returns:
        ActorContext for the caller

    Raises:
        AuthenticationError: If the header is missing or blank
    """
    actor_id = (request.headers.get(settings.actor_header) or "").strip()
    if not actor_id:
        raise AuthenticationError("Authentication required")
    return ActorContext(actor_id=actor_id)


def get_client_origin(request: Request) -> str:
    """
    Network origin used to rate limit single creates.

    The first X-Forwarded-For hop wins, then the socket peer.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
