"""Centralized FastAPI dependencies for use with Depends()."""

from gitlab_relay.config import settings
from gitlab_relay.services.notifier import HttpNotifier, InMemoryNotifier, Notifier

_notifier: Notifier = HttpNotifier(timeout=settings.delivery_timeout_seconds)


def init_notifier(*, dry_run: bool = False) -> None:
    """Select the notifier used by the webhook route.

    ``dry_run`` swaps in ``InMemoryNotifier`` so messages are rendered and
    recorded but never sent.
    """
    global _notifier  # noqa: PLW0603

    if dry_run:
        _notifier = InMemoryNotifier()
    else:
        _notifier = HttpNotifier(timeout=settings.delivery_timeout_seconds)


def get_notifier() -> Notifier:
    """Return the application notifier instance.

    Defaults to ``HttpNotifier``; tests override this dependency.
    """
    return _notifier


__all__ = ["get_notifier", "init_notifier"]
