"""Application package for the blog list backend.

This package exposes the service, repository and model modules used by
the FastAPI application, plus the pure statistics helpers in
`list_helper`. Individual modules contain the concrete implementations
and documentation.
"""
