"""
shared/__init__.py

Shared models and helpers used across multiple modules.

This package contains common functionality that is used by the identity
layer, the session services and the orchestrator:
- models: Session state, transcript, identity and data source types
- listeners: Owner-scoped callback registry for subscriptions and notifications
"""
