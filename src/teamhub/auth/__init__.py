"""Authentication and authorization.

Users sign in with email/password and receive a signed session token
(HS256 JWT), delivered as an HTTP-only cookie and echoed in the login
body for clients that can't hold cookies. Every protected request
replays it; the guard in dependencies.py turns it into a CurrentIdentity
and enforces role and ownership rules before any handler logic runs.
"""
