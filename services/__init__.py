"""
services package: session-scoped state holders.

- data_context: Named data sources uploaded into the session
- transcript: Append-only conversation log
"""
