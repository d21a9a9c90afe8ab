"""Fire-and-forget execution of orientation actions."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from typing import Any

from iio_rotation.app.config import Configuration
from iio_rotation.domain.errors import DispatchError
from iio_rotation.domain.orientation import OrientationCategory
from iio_rotation.infrastructure.observability import get_logger, log_context

Spawner = Callable[[Sequence[str]], Any]

DEFAULT_SHELL = "sh"

_NAMED_CATEGORIES = {
    member.value: member
    for member in OrientationCategory
    if member is not OrientationCategory.UNDEFINED
}

_logger = get_logger(__name__)


class ActionDispatcher:
    """Runs the configured shell command for an orientation.

    The child process is started and left alone: nothing waits for it,
    observes its exit status or retries it.
    """

    def __init__(
        self,
        config: Configuration,
        *,
        spawn: Spawner = subprocess.Popen,
        shell: str = DEFAULT_SHELL,
    ) -> None:
        self._config = config
        self._spawn = spawn
        self._shell = shell

    def command_for(self, category: str) -> str:
        """Return the command for a normalized category key.

        Anything other than the four named orientations selects the
        ``undefined`` command.
        """
        member = _NAMED_CATEGORIES.get(category, OrientationCategory.UNDEFINED)
        return self._config.orientation.command_for(member)

    def dispatch(self, category: str) -> None:
        """Spawn the command for ``category`` without waiting for it.

        Raises:
            DispatchError: If the shell cannot be started.
        """
        command = self.command_for(category)
        with log_context(category=category or "<empty>"):
            _logger.info("Dispatching orientation action")
            try:
                self._spawn([self._shell, "-c", command])
            except OSError as exc:
                raise DispatchError(
                    f"Failed to execute action for '{category}': {exc}"
                ) from exc


def dispatch(category: str, config: Configuration) -> None:
    """Dispatch the action for ``category`` using the default shell spawner."""
    ActionDispatcher(config).dispatch(category)


__all__ = ["ActionDispatcher", "DEFAULT_SHELL", "Spawner", "dispatch"]
