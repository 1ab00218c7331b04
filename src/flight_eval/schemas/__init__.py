"""Request and response schemas for API endpoints."""
