"""Protocol definitions for dependency injection."""

from typing import Any, Protocol


class UrlBuilder(Protocol):
    """Builds the URL of a named route.

    Route names follow the ``students.<action>`` convention; actions that
    target one record take its id as the ``student_id`` parameter.
    """

    def __call__(self, name: str, /, **path_params: Any) -> str:
        """Return the URL for a named route.

        Args:
            name: Route name, e.g. ``students.show``
            **path_params: Path parameters, e.g. ``student_id=3``

        Returns:
            URL string
        """
        ...
