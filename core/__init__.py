"""Core Module - configuration, application wiring and the Redis store."""
