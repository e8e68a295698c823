"""HTTP API for Bundle-Sentinel.

FastAPI application exposing bundle validation and a health check.
"""
