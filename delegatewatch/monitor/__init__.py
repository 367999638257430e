"""delegatewatch Monitor views: read-only projections over a MonitorLoop.

Modules
-------
projection
    ``MonitorProjection`` reads a ``MonitorLoop`` and produces a frozen
    ``MonitorSnapshot``, a point-in-time view of every tracked delegate.
renderer
    ``MonitorRenderer`` turns snapshots and events into Rich renderables.
"""
