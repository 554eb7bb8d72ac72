"""
Utility modules for DishPulse.

Cross-cutting concerns:
- Cache: TTL cache and per-identity rate limiting
"""
