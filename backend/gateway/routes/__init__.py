# Routes package init
"""
Notes Gateway — API Routes Package
===================================

What:  HTTP route handlers, the only place HTTP concerns live.

Route Inventory:
    - operations.py:  POST /api/operations   (run notes/search/createNote/updateNote/deleteNote)
                      GET  /api/operations   (list entry points and their arguments)
    - health.py:      GET  /health           (collaborator health check)

Routes stay thin: read the envelope and caller identity, call the
Dispatcher, shape the response. Operation semantics live in services.
"""
