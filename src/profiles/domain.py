"""Profiles bounded context — member documents and their guarded mutation.

Generic profile updates go through a protected-field policy; presence,
photos and received reactions have dedicated operations of their own.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

profiles = Domain(name="profiles")
