"""Users app package.

Defines the custom user model (``apps.users.models.CustomUser``), used as
AUTH_USER_MODEL throughout the project. Bookings reference users by id only.
"""
