"""
Routes package for the Users API.

This package contains route blueprints:
- api: REST API endpoints for programmatic access
"""
