class InvalidTokenException(Exception):
    """The identity provider did not accept the presented bearer token."""
