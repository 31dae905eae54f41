"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- storage: Object storage (OSS via S3 API) and local disk
- mongo: Site configuration persistence

These wrappers translate between external formats and our domain models.
"""
