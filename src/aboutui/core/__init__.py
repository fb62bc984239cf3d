"""
=============================================================================
CORE EXECUTION COMPONENTS
=============================================================================

The two places code runs in the about-ui source:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          MAIN CONTEXT                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Exactly one per AboutServer                                      │
    │  • Requests are routed here and loaders are started here            │
    │  • Every response callback runs here                                │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ post_task_and_reply
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          THREAD POOL                                 │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Worker threads that may block on disk reads                      │
    │  • Priority ordered (terms before credits)                          │
    │  • Always replies to the main context, even on failure              │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .main_context import MainContext
from .thread_pool import ThreadPool, TaskPriority, WorkerState

__all__ = [
    "MainContext",   # Single-threaded task runner with affinity checks
    "ThreadPool",    # Worker threads for blocking reads
    "TaskPriority",  # Scheduling priority for pool tasks
    "WorkerState",   # Worker lifecycle states
]
