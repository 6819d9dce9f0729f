"""API route handlers."""

from .scoring import router as scoring_router
