"""User data model for authentication"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class User(BaseModel):
    """Registered user. Created on signup, never mutated."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,  # Immutable for thread safety
    )

    id: str
    email: str
    display_name: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_public(self) -> dict:
        """Shape returned to clients (no timestamps)."""
        return {"id": self.id, "email": self.email, "displayName": self.display_name}
