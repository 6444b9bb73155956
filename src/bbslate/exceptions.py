#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the bbslate library.

Exception Hierarchy
-------------------
- BBSlateError (base exception)

  - DeserializationError (markup to document tree failures)
    - InvalidContinuationArgumentError (rule called ``next_`` with a bad argument)
    - InvalidRuleResultError (rule returned an unsupported value)

  - SerializationError (document tree to markup failures)
    - UnmatchedMarkSerializationError (no rule rendered a mark)
    - UnmatchedNodeSerializationError (no rule rendered a node)

  - TokenizationError (unbalanced markup in strict mode)

  - NodeFormatError (malformed Slate JSON)

An unmatched tag during deserialization is not an error: it is rendered
literally and logged as a warning.

"""

from __future__ import annotations

from typing import Any


class BBSlateError(Exception):
    """Base exception class for all bbslate-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class DeserializationError(BBSlateError):
    """Exception raised when markup cannot be converted to a document tree.

    These errors point at a bug in a caller-supplied rule, or at markup nested
    deeper than the interpreter's recursion limit allows. They are never
    recovered internally.

    Parameters
    ----------
    message : str
        Description of the failure
    tag : str, optional
        Tag of the element being deserialized when the failure occurred
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, tag: str | None = None, original_error: Exception | None = None):
        """Initialize the deserialization error."""
        super().__init__(message, original_error)
        self.tag = tag


class InvalidContinuationArgumentError(DeserializationError):
    """Raised when a rule calls ``next_`` with something other than elements or None."""

    def __init__(self, argument: Any, tag: str | None = None):
        """Initialize with the offending argument."""
        message = f"The `next_` argument was called with invalid children: {argument!r}."
        super().__init__(message, tag=tag)
        self.argument = argument


class InvalidRuleResultError(DeserializationError):
    """Raised when a deserialize rule returns a value the engine does not understand.

    Parameters
    ----------
    result : any
        The value returned by the rule
    rule : any
        The rule that produced it
    tag : str, optional
        Tag of the element being deserialized

    """

    def __init__(self, result: Any, rule: Any, tag: str | None = None):
        """Initialize with the offending result and rule."""
        message = f"Rule {type(rule).__name__} returned an invalid deserialized representation: {result!r}."
        super().__init__(message, tag=tag)
        self.result = result
        self.rule = rule


class SerializationError(BBSlateError):
    """Exception raised when a document tree cannot be rendered to markup.

    Parameters
    ----------
    message : str
        Description of the failure
    node_type : str, optional
        ``type`` of the node or mark that could not be rendered
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, node_type: str | None = None, original_error: Exception | None = None):
        """Initialize the serialization error."""
        super().__init__(message, original_error)
        self.node_type = node_type


class UnmatchedMarkSerializationError(SerializationError):
    """Raised when no rule claims a mark during serialization."""

    def __init__(self, mark_type: str | None):
        """Initialize with the unclaimed mark type."""
        super().__init__(f'No serializer defined for mark type "{mark_type}".', node_type=mark_type)


class UnmatchedNodeSerializationError(SerializationError):
    """Raised when no rule claims a block, inline or leaf string during serialization."""

    def __init__(self, node_type: str | None):
        """Initialize with the unclaimed node type."""
        super().__init__(f'No serializer defined for node type "{node_type}".', node_type=node_type)


class TokenizationError(BBSlateError):
    """Exception raised for unbalanced markup when tokenizing in strict mode.

    Parameters
    ----------
    message : str
        Description of the problem
    position : int, optional
        Character offset of the offending tag in the source text

    """

    def __init__(self, message: str, position: int | None = None):
        """Initialize the tokenization error."""
        super().__init__(message)
        self.position = position


class NodeFormatError(BBSlateError):
    """Exception raised when a Slate JSON structure cannot be converted to nodes."""

    def __init__(self, message: str, payload: Any = None, original_error: Exception | None = None):
        """Initialize with the offending payload."""
        super().__init__(message, original_error)
        self.payload = payload
