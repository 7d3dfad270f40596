"""FastAPI application module for ListingRec.

This module contains the FastAPI application, route handlers, and API
endpoints for browsing items, recording views and requesting
recommendations.
"""
