"""
core/__init__.py

Core orchestration modules.

This package contains the central coordination logic of a session:
- orchestrator: Command cycle state machine, data ingestion and transcript writes
- session_gate: Binds a session to the authenticated identity
"""
