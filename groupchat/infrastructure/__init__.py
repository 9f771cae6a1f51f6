"""
INFRASTRUCTURE LAYER - Adapters behind the domain ports

- storage/      → DocumentStore port and its Redis / in-memory backends
- persistence/  → Repository implementations over a DocumentStore
- cache/        → Redis client factory
- push/         → PushGateway adapters (FCM, logging)
- jobs/         → TaskDispatcher backends and the Redis task worker
"""
