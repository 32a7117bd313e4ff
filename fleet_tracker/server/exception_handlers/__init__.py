"""
Exception handlers for the Fleet Tracker server.

This package contains the application-wide exception handlers, a setup
function to register them with the FastAPI application, and the route class
that wraps webhook errors in their JSON envelope.
"""

from .envelope import EnvelopeRoute, envelope_response
from .global_handler import setup_exception_handlers

__all__ = ["EnvelopeRoute", "envelope_response", "setup_exception_handlers"]
