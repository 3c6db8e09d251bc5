"""Integration adapters for external systems (Integration.app).

Keep these modules small and testable:
- No FastAPI request/response objects
- Pure IO + parsing helpers
"""
