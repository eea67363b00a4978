"""Middleware token type for string references.

This module defines the MiddlewareToken dataclass that carries the parsed
form of a string middleware reference: ``name`` or ``name:arg1,arg2``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MiddlewareToken:
    """Parsed string middleware reference.

    The grammar is a plain name optionally followed by a single colon and a
    comma-separated argument block. Only the first colon splits; arguments
    are raw strings and are never trimmed, coerced or re-parsed.

    Attributes:
        name: Alias, group or resolver key.
        arguments: Raw string arguments, empty when none were given.
        has_argument_block: True when the token contained a colon, even if
            the argument block itself was empty.

    Example:
        >>> token = MiddlewareToken.parse("throttle:60,1")
        >>> token.name
        'throttle'
        >>> token.arguments
        ('60', '1')
        >>> str(token)
        'throttle:60,1'
    """

    name: str
    arguments: tuple[str, ...] = ()
    has_argument_block: bool = False

    def has_arguments(self) -> bool:
        """Check if the token carries an argument block.

        Returns:
            True for ``name:...`` tokens.

        Example:
            >>> MiddlewareToken.parse("auth").has_arguments()
            False
            >>> MiddlewareToken.parse("auth:admin").has_arguments()
            True
        """
        return self.has_argument_block

    @classmethod
    def parse(cls, token: str) -> MiddlewareToken:
        """Parse a string reference.

        Args:
            token: ``name`` or ``name:arg1,arg2,...``.

        Returns:
            MiddlewareToken for the string.

        Example:
            >>> MiddlewareToken.parse("gate:foo,bar").arguments
            ('foo', 'bar')
            >>> MiddlewareToken.parse("gate:").arguments
            ('',)
        """
        name, sep, args_part = token.partition(":")
        if not sep:
            return cls(name=name)
        return cls(name=name, arguments=tuple(args_part.split(",")), has_argument_block=True)

    def __str__(self) -> str:
        if not self.has_argument_block:
            return self.name
        return f"{self.name}:{','.join(self.arguments)}"
