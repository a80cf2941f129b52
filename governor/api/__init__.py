"""HTTP API for Governor.

Usage:
    uvicorn governor.api.app:create_app --factory
"""
