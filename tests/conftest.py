import os

# Must be set before todo_api.config is imported; settings are cached per process.
os.environ.setdefault("IDENTITY_PROVIDER", "static")
os.environ.setdefault("IDENTITY_STATIC_TOKENS", "token-u1:U1,token-u2:U2")
os.environ.setdefault("TODO_STORE_BACKEND", "redis")
os.environ.setdefault("OTEL_ENABLED", "false")
