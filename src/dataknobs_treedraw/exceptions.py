"""Custom exceptions for the treedraw package.

This module defines exception types for the treedraw package, built on the
common exception framework from dataknobs_common. Every error carries the
optional ``context`` dictionary of ``DataknobsError``, so callers can catch
either ``TreeDrawError`` or any ``DataknobsError``.

Most tree operations are total: lookups such as ``Node.get_child`` return
``None`` rather than raising. Errors are reserved for invalid input
(``ValidationError``), illegal structural edits (``StructuralError`` and
``CycleError``) and bad draw configuration (``ConfigurationError``).

Example:
    ```python
    from dataknobs_treedraw import Node
    from dataknobs_treedraw.exceptions import ValidationError

    root = Node("root")
    try:
        root.set_padding("")
    except ValidationError as e:
        print(e)          # padding must be at least one character
        print(e.context)  # {'node': 'root', 'padding': ''}
    ```
"""

from dataknobs_common import (
    ConfigurationError as BaseConfigurationError,
    DataknobsError,
    OperationError,
    ValidationError as BaseValidationError,
)


class TreeDrawError(DataknobsError):
    """Base exception for the treedraw package."""

    pass


class ValidationError(TreeDrawError, BaseValidationError):
    """Raised when an input value is rejected.

    Raised for an empty padding string, a negative generation index, an
    unparseable style definition, a non-positive label width limit and
    malformed tree expressions.
    """

    pass


class StructuralError(TreeDrawError, OperationError):
    """Raised when a structural edit would corrupt the tree.

    Example:
        ```python
        raise StructuralError(
            "only Node instances can be attached",
            context={"parent": "root", "child_type": "str"}
        )
        ```
    """

    pass


class CycleError(StructuralError):
    """Raised when attaching a node beneath itself or one of its descendants."""

    pass


class ConfigurationError(TreeDrawError, BaseConfigurationError):
    """Raised when draw options or an options file are invalid."""

    pass


__all__ = [
    "TreeDrawError",
    "ValidationError",
    "StructuralError",
    "CycleError",
    "ConfigurationError",
]
