"""Acting identity value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActorContext:
    """Identity on whose behalf an operation runs, issued by the identity provider."""

    actor_id: str

    def __post_init__(self) -> None:
        """Validate actor id."""
        if not self.actor_id or not self.actor_id.strip():
            raise ValueError("Actor id cannot be empty")
