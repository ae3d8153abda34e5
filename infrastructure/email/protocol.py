"""EmailProvider protocol: services depend on this, not the concrete implementation."""

from typing import Protocol

from schemas.models.user import UserDoc


class EmailProvider(Protocol):
    """Implementations raise errors.EmailDeliveryError when a send fails."""

    async def send_verification_email(self, user: UserDoc, token: str) -> None: ...

    async def send_password_reset_email(self, user: UserDoc, token: str) -> None: ...
