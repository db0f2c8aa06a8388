"""Authentication and authorization.

Learn: Users sign up or log in with email/password and receive a JWT access
token. The token is presented as "Authorization: Bearer <token>" and
resolves to a CurrentIdentity used to scope every query by user_id.
"""
