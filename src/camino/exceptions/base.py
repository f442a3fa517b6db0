from __future__ import annotations


class CaminoError(Exception):
    """Root of every exception Camino raises on purpose.

    Template parse and render errors, configuration errors, property file
    errors and function registry errors all derive from this class, so an
    embedding application can catch Camino failures at one boundary.

    Attributes:
        message: Human-readable description of the failure.

    Example:
        ```python
        try:
            text = render_template(source, properties)
        except CaminoError as e:
            logger.error("render_failed", error=e.message)
        ```
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
