"""Administrative user management backend.

Keeps each identity consistent between the local relational user store and
the external identity provider that handles authentication.
"""

__version__ = "0.1.0"
