"""Infrastructure layer — database, query composition, repositories.

This layer depends on stdlib and third-party libs (SQLAlchemy, structlog)
plus the domain layer.  It must never import from services, commands,
or output.
"""
