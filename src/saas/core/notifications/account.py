"""Delivery seam for account links (activation, password reset).

No mail provider is wired in. The default notifier builds the link and logs
it outside production so local development can follow it; subclass and
override ``deliver`` to hand links to a real provider.
"""

from src.saas.core.config import Settings
from src.saas.core.logging import get_logger
from src.saas.models import User

logger = get_logger(__name__)


class AccountNotifier:
    def __init__(self, settings: Settings):
        self.settings = settings

    def activation_link(self, token: str) -> str:
        return f"{self.settings.app_url}/activate/{token}"

    def password_reset_link(self, token: str) -> str:
        return f"{self.settings.app_url}/reset-password?token={token}"

    def send_activation(self, user: User, token: str) -> bool:
        return self.deliver(user, "activation", self.activation_link(token))

    def send_password_reset(self, user: User, token: str) -> bool:
        return self.deliver(user, "password_reset", self.password_reset_link(token))

    def deliver(self, user: User, kind: str, link: str) -> bool:
        """Send ``link`` to the user. Returns False if it could not be delivered."""
        if self.settings.is_production:
            logger.warning(
                "No notification provider configured - link not sent",
                user_id=str(user.id),
                notification=kind,
            )
            return False

        # Dev mode: log the link instead of sending it
        logger.info("Account link", user_id=str(user.id), notification=kind, link=link)
        return True
