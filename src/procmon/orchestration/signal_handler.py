"""
Signal handling for the sampler.

SIGINT and SIGTERM only set the shutdown event of every registered
sampler. The sampler notices the event between ticks and runs its normal
shutdown path, including the emergency archive write.
"""

import logging
import signal
import threading
from typing import Any, Dict

from .shared_state import RuntimeState

logger = logging.getLogger(__name__)

# Signal handlers cannot be bound to instances, so active states live in
# a module-level registry.
_active_states: Dict[int, RuntimeState] = {}
_active_states_lock = threading.Lock()


class SignalHandler:
    """
    Manages signal registration and cleanup for a sampler's RuntimeState.
    """

    def __init__(self, state: RuntimeState):
        self.state = state
        self._original_sigint_handler = None
        self._original_sigterm_handler = None
        self._signal_handlers_set = False

    def __enter__(self) -> "SignalHandler":
        self.register()
        self.setup_signal_handlers()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.cleanup_signal_handlers()
        self.unregister()

    def setup_signal_handlers(self) -> None:
        """Install the SIGINT and SIGTERM handlers, remembering the old ones."""
        try:
            self._original_sigint_handler = signal.signal(signal.SIGINT, self._global_signal_handler)
            self._original_sigterm_handler = signal.signal(signal.SIGTERM, self._global_signal_handler)
            self._signal_handlers_set = True
            logger.debug("Signal handlers set up for sampler")
        except ValueError as e:
            # signal.signal only works in the main thread
            logger.warning(f"Failed to set up signal handlers: {e}")

    def cleanup_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        if not self._signal_handlers_set:
            return

        try:
            if self._original_sigint_handler is not None:
                signal.signal(signal.SIGINT, self._original_sigint_handler)
            if self._original_sigterm_handler is not None:
                signal.signal(signal.SIGTERM, self._original_sigterm_handler)
            logger.debug("Signal handlers restored")
        except ValueError as e:
            logger.warning(f"Failed to restore signal handlers: {e}")
        finally:
            self._signal_handlers_set = False

    def register(self) -> None:
        with _active_states_lock:
            _active_states[id(self.state)] = self.state

    def unregister(self) -> None:
        with _active_states_lock:
            _active_states.pop(id(self.state), None)

    @staticmethod
    def _global_signal_handler(signum: int, frame: Any) -> None:
        """
        Request shutdown of every registered sampler.

        Args:
            signum: Signal number that was received
            frame: Current stack frame (unused)
        """
        logger.warning(f"{signal.Signals(signum).name} received, stopping after the current cycle")
        # runs on the main thread between bytecodes, possibly while register()
        # holds the lock, so only take a copy
        for state in list(_active_states.values()):
            state.shutdown_requested.set()
