"""
api package: HTTP routers of the session service.

- auth: Sign-in, sign-out and current identity
- session: Session view, data sources and commands
"""
