"""Users app package.

Holds the custom user model (email login) and the JWT authentication
endpoints used by the rental API.
"""
