"""
credgate - Credential Gate and Credential Pool

The credential layer of an upstream API proxy: it gates the admin surface
behind a shared password and hands out upstream credentials.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- All state lives in the external key-value store

Modules:
- auth: Session token issuance and validation
- pool: Upstream credential registration and selection
- storage: Key-value store abstraction (Redis)
- middleware: Request gating for protected routes
- api: Request/response models and pages
- config: Environment configuration
"""

__version__ = "1.0.0"
