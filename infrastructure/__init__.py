"""Infrastructure layer — resilience and observability for the diary service.

Modules:
    circuit_breaker  Circuit breaker for the background-removal API.
    rate_limiter     Per-client sliding-window rate limiter (Redis).
    metrics          Prometheus metrics registry.
"""
