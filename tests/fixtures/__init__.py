"""Shared pytest fixtures and helpers for account tests."""

from .accounts import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
from .services import *  # noqa: F401,F403
