"""Matchers describe the arguments a mocked method is expected to receive."""

from __future__ import annotations

import abc
import re
from collections.abc import Callable, Iterable, Mapping, Sized
from typing import Any


class Matcher(abc.ABC):
    """A representation of a class of values."""

    @abc.abstractmethod
    def matches(self, x: Any) -> bool:
        """Return whether ``x`` is a match."""

    @abc.abstractmethod
    def __str__(self) -> str:
        """Describe what the matcher matches."""


class GotFormatter(abc.ABC):
    """Controls how a received value is shown in failure messages."""

    @abc.abstractmethod
    def got(self, got: Any) -> str:
        """Format the received value."""


def get_string(x: Any) -> str:
    """Render a value for messages without calling a mock's own ``__str__``."""
    if getattr(x, "_expectmock_instance", False) is True:
        return type(x).__name__
    return str(x)


def format_gotten_arg(matcher: Matcher, arg: Any) -> str:
    """Render a received argument, honouring the matcher's GotFormatter."""
    if isinstance(matcher, GotFormatter):
        return matcher.got(arg)
    return f"{arg} ({type(arg).__name__})"


def _compatible_types(a: Any, b: Any) -> bool:
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    ta, tb = type(a), type(b)
    return issubclass(ta, tb) or issubclass(tb, ta)


def _deep_equal(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is b
    if not _compatible_types(a, b):
        return False
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(_deep_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, Mapping):
        if a.keys() != b.keys():
            return False
        return all(_deep_equal(value, b[key]) for key, value in a.items())
    try:
        return bool(a == b)
    except Exception:
        return False


def _is_instance(x: Any, target: type) -> bool:
    if not isinstance(x, target):
        return False
    if isinstance(x, bool) and not issubclass(target, bool) and issubclass(target, int):
        return False
    return True


class _AnyMatcher(Matcher):
    def matches(self, x: Any) -> bool:
        return True

    def __str__(self) -> str:
        return "is anything"


class _CondMatcher(Matcher):
    def __init__(self, fn: Callable[[Any], bool]) -> None:
        self._fn = fn

    def matches(self, x: Any) -> bool:
        return bool(self._fn(x))

    def __str__(self) -> str:
        return "adheres to a custom condition"


class _EqMatcher(Matcher):
    def __init__(self, x: Any) -> None:
        self._x = x

    def matches(self, x: Any) -> bool:
        return _deep_equal(self._x, x)

    def __str__(self) -> str:
        return f"is equal to {get_string(self._x)} ({type(self._x).__name__})"


class _NilMatcher(Matcher):
    def matches(self, x: Any) -> bool:
        return x is None

    def __str__(self) -> str:
        return "is nil"


class _NotMatcher(Matcher):
    def __init__(self, matcher: Matcher) -> None:
        self._matcher = matcher

    def matches(self, x: Any) -> bool:
        return not self._matcher.matches(x)

    def __str__(self) -> str:
        return f"not({self._matcher})"


class _RegexMatcher(Matcher):
    def __init__(self, pattern: str) -> None:
        self._regex = re.compile(pattern)

    def matches(self, x: Any) -> bool:
        if isinstance(x, str):
            return self._regex.search(x) is not None
        if isinstance(x, (bytes, bytearray)):
            return self._regex.search(bytes(x).decode("utf-8", errors="replace")) is not None
        return False

    def __str__(self) -> str:
        return f"matches regex {self._regex.pattern}"


class _AssignableToTypeOfMatcher(Matcher):
    def __init__(self, target: type) -> None:
        self._target = target

    def matches(self, x: Any) -> bool:
        return _is_instance(x, self._target)

    def __str__(self) -> str:
        return f"is assignable to {self._target.__name__}"


class _AnyOfMatcher(Matcher):
    def __init__(self, matchers: list[Matcher]) -> None:
        self._matchers = matchers

    def matches(self, x: Any) -> bool:
        return any(m.matches(x) for m in self._matchers)

    def __str__(self) -> str:
        return " | ".join(str(m) for m in self._matchers)


class _AllMatcher(Matcher):
    def __init__(self, matchers: list[Matcher]) -> None:
        self._matchers = matchers

    def matches(self, x: Any) -> bool:
        return all(m.matches(x) for m in self._matchers)

    def __str__(self) -> str:
        return "; ".join(str(m) for m in self._matchers)


class _LenMatcher(Matcher):
    def __init__(self, n: int) -> None:
        self._n = n

    def matches(self, x: Any) -> bool:
        return isinstance(x, Sized) and len(x) == self._n

    def __str__(self) -> str:
        return f"has length {self._n}"


class _InAnyOrderMatcher(Matcher):
    def __init__(self, x: Any) -> None:
        self._x = x

    def matches(self, x: Any) -> bool:
        if not isinstance(x, (list, tuple)) or not isinstance(self._x, (list, tuple)):
            return False
        given, wanted = list(x), list(self._x)
        if len(given) != len(wanted):
            return False
        used = [False] * len(given)
        for item in wanted:
            wanted_matcher = eq(item)
            for j, candidate in enumerate(given):
                if not used[j] and wanted_matcher.matches(candidate):
                    used[j] = True
                    break
            else:
                return False
        return all(used)

    def __str__(self) -> str:
        return f"has the same elements as {self._x}"


class _WantFormattedMatcher(Matcher):
    def __init__(self, stringer: Any, matcher: Matcher) -> None:
        self._stringer = stringer
        self._matcher = matcher

    def matches(self, x: Any) -> bool:
        return self._matcher.matches(x)

    def __str__(self) -> str:
        if callable(self._stringer):
            return str(self._stringer())
        return str(self._stringer)


class _GotFormattedMatcher(Matcher, GotFormatter):
    def __init__(self, formatter: GotFormatter | Callable[[Any], str], matcher: Matcher) -> None:
        self._formatter = formatter
        self._matcher = matcher

    def matches(self, x: Any) -> bool:
        return self._matcher.matches(x)

    def got(self, got: Any) -> str:
        if isinstance(self._formatter, GotFormatter):
            return self._formatter.got(got)
        return str(self._formatter(got))

    def __str__(self) -> str:
        return str(self._matcher)


def _matcher_or_eq(x: Any) -> Matcher:
    return x if isinstance(x, Matcher) else eq(x)


def as_matcher(x: Any) -> Matcher:
    """Turn an expected argument into a matcher: matchers pass through, None matches None."""
    if isinstance(x, Matcher):
        return x
    if x is None:
        return nil()
    return eq(x)


def all_of(*args: Any) -> Matcher:
    """Match when every given matcher (or value) matches."""
    return _AllMatcher([_matcher_or_eq(a) for a in args])


def any_value() -> Matcher:
    """Match anything."""
    return _AnyMatcher()


def cond(fn: Callable[[Any], bool]) -> Matcher:
    """Match when ``fn`` returns true for the argument."""
    return _CondMatcher(fn)


def any_of(*args: Any) -> Matcher:
    """Match when at least one of the given matchers (or values) matches."""
    return _AnyOfMatcher([_matcher_or_eq(a) for a in args])


def eq(x: Any) -> Matcher:
    """Match values equal to ``x`` with a compatible type."""
    return _EqMatcher(x)


def length(n: int) -> Matcher:
    """Match sized values of length ``n``."""
    return _LenMatcher(n)


def nil() -> Matcher:
    """Match None."""
    return _NilMatcher()


def not_(x: Any) -> Matcher:
    """Invert a matcher, or match anything not equal to a value."""
    return _NotMatcher(_matcher_or_eq(x))


def regex(pattern: str) -> Matcher:
    """Match strings or bytes in which ``pattern`` is found; raises re.error if invalid."""
    return _RegexMatcher(pattern)


def assignable_to_type_of(x: Any) -> Matcher:
    """Match instances of ``x`` if it is a type, otherwise of ``type(x)``."""
    return _AssignableToTypeOfMatcher(x if isinstance(x, type) else type(x))


def in_any_order(x: Iterable[Any]) -> Matcher:
    """Match lists or tuples holding the same elements as ``x`` in any order."""
    return _InAnyOrderMatcher(x)


def want_formatter(stringer: Any, matcher: Matcher) -> Matcher:
    """Replace a matcher's description with ``stringer`` (a callable or any object)."""
    return _WantFormattedMatcher(stringer, matcher)


def got_formatter_adapter(formatter: GotFormatter | Callable[[Any], str], matcher: Matcher) -> Matcher:
    """Attach a formatter for received values to a matcher."""
    return _GotFormattedMatcher(formatter, matcher)