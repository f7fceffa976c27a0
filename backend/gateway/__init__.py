"""
Notes Gateway — Application Package Initializer
================================================

What: Marks the `gateway` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The gateway follows a layered architecture:

    ┌─────────────────────────────────────┐
    │         Routes (HTTP Layer)         │  ← operation endpoint, health
    ├─────────────────────────────────────┤
    │     Dispatcher (Entry Points)       │  ← operation name → handler
    ├─────────────────────────────────────┤
    │   Gateways (Record / Search)        │  ← normalize, call, notify, adapt
    ├─────────────────────────────────────┤
    │   Backend Clients & Publisher       │  ← httpx services, Redis pub/sub
    └─────────────────────────────────────┘

    The gateway never persists notes. The record service owns storage,
    the search service owns the index, and Redis carries post-mutation
    notifications to downstream subscribers.
"""

__version__ = "1.0.0"
