#!/usr/bin/env python3
"""
Core Module for the LazyMint backend

Shared infrastructure used by every service package.

COMPONENTS:
    - config/: Dataclass settings loaded from the environment and .env files
    - logger.py: Service logger setup
    - errors.py: Error taxonomy mapped to HTTP statuses
    - responses.py: Success and error response envelopes
    - validation.py: Request payload validation
    - document_store.py: Transactional JSON document store (PostgreSQL)
    - object_store.py: Public object storage (Google Cloud Storage)
    - jwt_manager.py: Bearer credential verification
    - auth_dependencies.py: FastAPI authentication dependencies
    - imaging.py: QR code and image helpers

USAGE:
    from core.config import get_settings
    from core.document_store import PostgresDocumentStore

    settings = get_settings()
    store = PostgresDocumentStore(settings.infra.postgres_dsn)
"""

__version__ = "1.0.0"
