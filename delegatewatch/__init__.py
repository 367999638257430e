"""delegatewatch: forging health monitor for round-robin DPoS delegates.

Reconciles the delegate roster, the forging schedule and recent blocks from
a peer into per-delegate forging status, and publishes rank, roster,
status and missed-block events.
"""

__version__ = "0.1.0"

from delegatewatch.core.event_bus import EventBus
from delegatewatch.core.monitor_loop import MonitorLoop
from delegatewatch.cli.app import app as cli

__all__ = ["EventBus", "MonitorLoop", "cli", "__version__"]
