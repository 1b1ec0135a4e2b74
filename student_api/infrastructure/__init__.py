"""Infrastructure Layer - process boundary and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from api/ route modules
    - OS signals and sockets are only touched here

Design Decisions:
    - Lifecycle takes the app and a cancellation token as arguments, so tests
      drive it without real signals
"""
