"""Application package for the Learning Penguin study backend.

This package exposes the service, repository and model modules used by
the FastAPI application, plus the `client` subpackage that drives the
upload panel and calendar from the browser side. Individual modules
contain the concrete implementations and documentation.
"""
