"""
Rule resolution for sanction.

Privileges, Permits and Permissions are all *rules*: values that resolve,
given a layer-specific context, into a flat list of terminal results. A rule
takes one of four shapes:

    TerminalRule   an Approval (or any role object, for permits), used as-is
    DeferredRule   an awaitable producing another rule
    SequenceRule   an ordered list/tuple of rules, resolved concurrently
    CallableRule   a function of the context producing another rule

Rules can be built explicitly with terminal(), deferred(), sequence() and
call(), or given as plain Python values, in which case Resolver.classify()
picks the variant. A value with no resolvable shape raises
InvalidRuleTypeError; it is never treated as a denial.

Concurrency:
    Elements of a sequence are resolved with asyncio.gather(), so their
    awaitables overlap. Results are joined by position, not completion
    order. Nothing is ever cancelled: every element runs to completion, and
    if any failed, the error of the first failing element by position is
    raised. Errors of later siblings are discarded.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from sanction.errors import InvalidRuleTypeError
from sanction.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Values that never act as a passed-through terminal
_SCALARS = (str, bytes, bytearray, int, float, complex, type(None))


# =============================================================================
# Rule Variants
# =============================================================================


@dataclass(frozen=True)
class TerminalRule:
    """A terminal result, used as-is."""

    value: Any


@dataclass(frozen=True)
class DeferredRule:
    """An awaitable that produces another rule."""

    awaitable: Awaitable[Any]

    def __post_init__(self) -> None:
        if not inspect.isawaitable(self.awaitable):
            raise InvalidRuleTypeError(
                layer="deferred",
                rule_type=type(self.awaitable).__name__,
            )


@dataclass(frozen=True)
class SequenceRule:
    """An ordered collection of rules of the same layer."""

    rules: tuple[Any, ...]


@dataclass(frozen=True)
class CallableRule:
    """A function of the layer context that produces another rule."""

    function: Callable[..., Any]

    def __post_init__(self) -> None:
        if not callable(self.function):
            raise InvalidRuleTypeError(
                layer="callable",
                rule_type=type(self.function).__name__,
            )


RuleVariant = TerminalRule | DeferredRule | SequenceRule | CallableRule


def terminal(value: Any) -> TerminalRule:
    """Build a terminal rule."""
    return TerminalRule(value)


def deferred(awaitable: Awaitable[Any]) -> DeferredRule:
    """Build a rule from an awaitable."""
    return DeferredRule(awaitable)


def sequence(*rules: Any) -> SequenceRule:
    """Build a rule from an ordered collection of rules."""
    return SequenceRule(tuple(rules))


def call(function: Callable[..., Any]) -> CallableRule:
    """Build a rule from a function of the layer context."""
    return CallableRule(function)


# =============================================================================
# Resolver
# =============================================================================


class Resolver(Generic[T]):
    """
    Recursive normalizer for one rule layer.

    Each layer differs only in its terminal type and the context its
    callables receive:

        privilege   Approval  (role,)
        permit      any role  (target,)
        permission  Approval  (privilege, target)

    A passthrough resolver returns terminals exactly as given. Any object
    that is not awaitable, a sequence, callable or a scalar is a terminal,
    so caller-defined role types keep their identity.

    Attributes:
        layer: Layer name used in error messages and logs
        terminal_type: Pydantic model of the layer's terminal results
        passthrough: Whether terminals are returned without validation
    """

    def __init__(self, layer: str, terminal_type: type, passthrough: bool = False) -> None:
        self.layer = layer
        self.terminal_type = terminal_type
        self.passthrough = passthrough

    def classify(self, rule: Any) -> RuleVariant:
        """
        Pick the variant for a rule value.

        Plain values are checked in order: awaitable, list/tuple, terminal
        (an instance of the terminal type, or a mapping of its fields),
        callable. A passthrough resolver then takes any remaining
        non-scalar object as a terminal. Strings are never sequences.

        Raises:
            InvalidRuleTypeError: If the value has no resolvable shape
        """
        if isinstance(rule, (TerminalRule, DeferredRule, SequenceRule, CallableRule)):
            return rule
        if inspect.isawaitable(rule):
            return DeferredRule(rule)
        if isinstance(rule, (list, tuple)):
            return SequenceRule(tuple(rule))
        if isinstance(rule, (self.terminal_type, Mapping)):
            return TerminalRule(rule)
        if callable(rule):
            return CallableRule(rule)
        if self.passthrough and not isinstance(rule, _SCALARS):
            return TerminalRule(rule)
        raise self._invalid(rule)

    async def resolve(self, rule: Any, *context: Any) -> list[T]:
        """
        Resolve a rule into a flat, ordered list of terminal results.

        Args:
            rule: The rule value to resolve
            *context: The arguments passed to callable rules

        Returns:
            Terminal results in depth-first input order

        Raises:
            InvalidRuleTypeError: If any nested value is unresolvable
        """
        variant = self.classify(rule)

        if isinstance(variant, DeferredRule):
            return await self.resolve(await variant.awaitable, *context)

        if isinstance(variant, SequenceRule):
            if not variant.rules:
                return []
            results = await asyncio.gather(
                *(self.resolve(item, *context) for item in variant.rules),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            return [value for result in results for value in result]

        if isinstance(variant, TerminalRule):
            return [self._coerce(variant.value)]

        return await self.resolve(variant.function(*context), *context)

    def _coerce(self, value: Any) -> T:
        """Validate a terminal value into the layer's terminal type."""
        if self.passthrough:
            return value
        if isinstance(value, self.terminal_type):
            return value
        if isinstance(value, Mapping):
            try:
                return self.terminal_type.model_validate(dict(value))
            except ValidationError as e:
                raise self._invalid(value) from e
        raise self._invalid(value)

    def _invalid(self, rule: Any) -> InvalidRuleTypeError:
        rule_type = type(rule).__name__
        logger.debug("rule_invalid", layer=self.layer, rule_type=rule_type)
        return InvalidRuleTypeError(layer=self.layer, rule_type=rule_type)


async def maybe_await(value: Any) -> Any:
    """Await value if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value
