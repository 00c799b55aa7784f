"""
Application services layer (use cases).

Services orchestrate the domain logic to fulfill application use cases.
They coordinate between entities, ports, and media clients.

This layer contains:
- Client resolution and capability checks
- Multi-client aggregation and per-domain facades
- Internal and client-side list management, list sync
- User data (favorites, ratings, history) and the internal catalog

Services receive repositories and the provider factory by constructor
injection (see src/container.py); the acting user is always an explicit
user_id parameter.
"""
