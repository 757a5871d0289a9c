"""Services Layer — workflows that orchestrate core types over repositories and clients.

Invariants:
    - Services hold no cross-request state; each call is independent
    - Collaborator failures are wrapped into the workflow's error type with the
      failing operation named, cause chained
"""
