from __future__ import annotations

from typing import Any, Optional


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------
class UberError(Exception):
    """Base class for every failure raised while producing an UBER document."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# -----------------------------------------------------------------------------
# Tree building
# -----------------------------------------------------------------------------
class UnsupportedRootTypeError(UberError):
    """The top-level object is neither a resource wrapper, an iterable nor a mapping."""

    def __init__(self, root: Any) -> None:
        super().__init__(f"Don't know how to handle type : {type(root)!r}")
        self.root = root


class IntrospectionError(UberError):
    """
    Reading a property (or a content/links accessor) raised.
    The original exception is chained as __cause__.
    """

    def __init__(self, target: Any, property_name: Optional[str] = None) -> None:
        if property_name:
            message = f"failed to transform object {target!r}: cannot read property '{property_name}'"
        else:
            message = f"failed to transform object {target!r}"
        super().__init__(message)
        self.target = target
        self.property_name = property_name


class CyclicGraphError(UberError):
    def __init__(self, target: Any) -> None:
        super().__init__(f"object graph contains a cycle through {type(target).__name__} at 0x{id(target):x}")
        self.target = target


# -----------------------------------------------------------------------------
# Links and actions
# -----------------------------------------------------------------------------
class MissingActionDescriptorError(UberError):
    def __init__(self, href: str) -> None:
        super().__init__(f"actionDescriptor must not be null (link {href})")
        self.href = href


class UnsupportedVerbError(UberError):
    def __init__(self, verb: Any) -> None:
        super().__init__(f"No UBER action is defined for request method {verb}")
        self.verb = verb
