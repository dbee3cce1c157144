"""
WildFly Tools - application server lifecycle helpers

Starts, watches and stops standalone servers and managed domains through a
management client, interprets management operation responses, and orders
server version strings.

Log records are emitted under the ``wildfly_tools`` logger. Applications that
want them in a file call :func:`configure_stdlib_logging`.
"""

from wildfly_tools.core.utils.stdlib_logging import configure_stdlib_logging

__version__ = "1.0.0"
__all__ = ["__version__", "configure_stdlib_logging"]
