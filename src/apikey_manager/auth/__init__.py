"""Authentication.

Learn: Callers sign in with Google in the browser and send the resulting
ID token as `Authorization: Bearer <token>`. The backend verifies the
token against Google's published signing keys and uses its `sub` claim
as the owner id for every key record. There are no passwords or
sessions on this side.
"""
