"""
Shared state of a sampling run.

This module holds the mutable state shared between the sampler loop and
the signal handler.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SamplerState(Enum):
    """Phase of the sampler state machine."""

    IDLE = "idle"
    TICK = "tick"
    FETCH = "fetch"
    UPDATE_STORE = "update_store"
    APPEND_HISTORY = "append_history"
    RENDER_ARCHIVE = "render_archive"
    STOPPED = "stopped"


@dataclass
class RuntimeState:
    """
    Runtime state of one sampler.

    The signal handler only ever touches ``shutdown_requested``; everything
    else is written by the sampler thread.
    """

    # Set by SIGINT/SIGTERM or by stop(); observed between ticks.
    shutdown_requested: threading.Event = field(default_factory=threading.Event)

    phase: SamplerState = SamplerState.IDLE
    cycles_completed: int = 0
    skipped_ticks: int = 0
    skipped_renders: int = 0
    started_at: Optional[float] = None
    stopped_at: Optional[float] = None
    emergency_write_failed: bool = False
