# Services package init
"""
Notes Gateway — Services Layer
===============================

What:  Operation semantics between the HTTP routes and the backend services.

Service Inventory:
    - normalize:      dynamic argument values → text, lists, timestamps, bytes
    - identity:       CallerIdentity and author defaulting
    - note_resolver:  Note → external field values
    - record_gateway: notes / createNote / updateNote / deleteNote
    - search_gateway: search
    - publisher:      post-mutation notifications over Redis pub/sub
    - dispatch:       operation name → (argument model, handler)
    - backends:       RecordService / SearchService interfaces
    - http_client, record_client, search_client: httpx implementations

Services take plain models and a CallerIdentity; none of them reads HTTP
requests, so each one is unit-tested with in-memory doubles.
"""
