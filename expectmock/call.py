"""Expected calls on a mock: how often, with what arguments, and what they do."""

from __future__ import annotations

import os
import traceback
import types
import typing
from collections.abc import Callable, MutableMapping, MutableSequence, MutableSet, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from expectmock.matchers import Matcher, as_matcher, format_gotten_arg

INFINITE_CALLS = 100_000_000

Action = Callable[[list], Optional[list]]

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_SCALARS = (bool, int, float, complex, str, bytes)
_IMMUTABLE = _SCALARS + (tuple, frozenset)
_ZERO_VALUES = {bool: False, int: 0, float: 0.0, complex: 0j, str: "", bytes: b""}
_NAMED_TYPES = {
    t.__name__: t
    for t in (bool, int, float, complex, str, bytes, bytearray, list, dict, set, frozenset, tuple, object)
}
_CO_VARARGS = 0x04  # code-object flag set when a function takes *args
_EMPTY = object()


class MatchError(Exception):
    """Raised when actual arguments do not satisfy an expected call."""


@dataclass(frozen=True)
class _Signature:
    in_types: tuple
    variadic: bool
    return_annotation: Any


def _caller_origin() -> str:
    for frame in reversed(traceback.extract_stack()):
        if os.path.dirname(os.path.abspath(frame.filename)) != _PACKAGE_DIR:
            return f"{frame.filename}:{frame.lineno}"
    return "unknown file"


def _resolve(annotation: Any) -> Any:
    if annotation is _EMPTY:
        return Any
    if isinstance(annotation, str):
        if annotation == "None":
            return None
        return _NAMED_TYPES.get(annotation, Any)
    return annotation


def _describe(f: Any) -> _Signature | None:
    if isinstance(f, type) or not callable(f):
        return None
    target = f
    if not isinstance(target, (types.FunctionType, types.MethodType)):
        target = f.__call__
    if isinstance(target, types.MethodType):
        func, skip = target.__func__, 1
    elif isinstance(target, types.FunctionType):
        func, skip = target, 0
    else:
        return None
    if not isinstance(func, types.FunctionType):
        return None
    code = func.__code__
    count = code.co_argcount
    names = code.co_varnames[:count]
    variadic = bool(code.co_flags & _CO_VARARGS)
    if variadic:
        names += (code.co_varnames[count + code.co_kwonlyargcount],)
    names = names[skip:]
    annotations = func.__annotations__ or {}
    return _Signature(
        in_types=tuple(_resolve(annotations.get(name, _EMPTY)) for name in names),
        variadic=variadic,
        return_annotation=annotations.get("return", _EMPTY),
    )


def _as_signature(signature: Any) -> _Signature | None:
    if signature is None or isinstance(signature, _Signature):
        return signature
    if callable(signature):
        described = _describe(signature)
        if described is None:
            raise TypeError(f"cannot read the signature of {type(signature).__name__}")
        return described
    raise TypeError(f"expected a signature or a callable, got {type(signature).__name__}")


def _shape_of(f: Callable[..., Any]) -> tuple[int, bool] | None:
    described = _describe(f)
    if described is None:
        return None
    return len(described.in_types), described.variadic


def _output_types(return_annotation: Any) -> list[Any]:
    annotation = _resolve(return_annotation)
    if annotation is None or annotation is type(None):
        return []
    if typing.get_origin(annotation) is tuple:
        items = typing.get_args(annotation)
        if items and not (len(items) == 2 and items[1] is Ellipsis) and items != ((),):
            return [_resolve(item) for item in items]
    return [annotation]


def _zero_value(t: Any) -> Any:
    return _ZERO_VALUES.get(t) if isinstance(t, type) else None


def _type_name(t: Any) -> str:
    return t.__name__ if isinstance(t, type) else str(t)


def _accepts(want: Any, value: Any) -> bool:
    if want is Any or want is object:
        return True
    if want is None or want is type(None):
        return value is None
    origin = typing.get_origin(want)
    if origin is typing.Union or origin is types.UnionType:
        return any(_accepts(member, value) for member in typing.get_args(want))
    if value is None:
        return not (isinstance(want, type) and want in _SCALARS)
    if origin is not None:
        want = origin
    if not isinstance(want, type):
        return True
    if isinstance(value, bool) and want in (int, float, complex):
        return False
    if want in (float, complex) and isinstance(value, int):
        return True
    try:
        return isinstance(value, want)
    except TypeError:
        return True


def _assign(target: Any, value: Any) -> None:
    if isinstance(target, MutableMapping):
        target.clear()
        target.update(value)
    elif isinstance(target, MutableSet):
        target.clear()
        for item in value:
            target.add(item)
    elif isinstance(target, MutableSequence):
        items = list(value)
        if len(items) > len(target):
            raise IndexError(f"cannot copy {len(items)} items into a sequence of length {len(target)}")
        target[: len(items)] = items
    elif hasattr(target, "__dict__") and not isinstance(target, type):
        if not isinstance(value, type(target)):
            raise TypeError(f"cannot assign {type(value).__name__} to {type(target).__name__}")
        target.__dict__.clear()
        target.__dict__.update(vars(value))
    else:
        raise TypeError(f"cannot set an argument of type {type(target).__name__}")


@dataclass(eq=False)
class Call:
    """An expected call to a mock."""

    reporter: Any = field(repr=False)
    receiver: Any = None
    method: str = ""
    signature: Any = None
    args: list[Matcher] = field(default_factory=list)
    origin: str = ""
    pre_reqs: list[Call] = field(default_factory=list, repr=False)
    min_calls: int = 1
    max_calls: int = 1
    num_calls: int = 0
    actions: list[Action] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.signature = _as_signature(self.signature)
        if self.signature is None:
            self._in_types: list[Any] = []
            self._out_types: list[Any] = []
            self._variadic = False
        else:
            self._in_types = list(self.signature.in_types)
            self._out_types = _output_types(self.signature.return_annotation)
            self._variadic = self.signature.variadic

    @property
    def _num_in(self) -> int:
        return len(self._in_types)

    @property
    def _receiver_type(self) -> str:
        return type(self.receiver).__name__

    def _zero_values(self, _args: list) -> list:
        return [_zero_value(t) for t in self._out_types]

    def any_times(self) -> Call:
        """Allow the call zero or more times."""
        self.min_calls, self.max_calls = 0, INFINITE_CALLS
        return self

    def min_times(self, n: int) -> Call:
        """Require at least ``n`` calls; an untouched maximum of 1 becomes unbounded."""
        self.min_calls = n
        if self.max_calls == 1:
            self.max_calls = INFINITE_CALLS
        return self

    def max_times(self, n: int) -> Call:
        """Allow at most ``n`` calls; an untouched minimum of 1 becomes 0."""
        self.max_calls = n
        if self.min_calls == 1:
            self.min_calls = 0
        return self

    def times(self, n: int) -> Call:
        """Require exactly ``n`` calls."""
        self.min_calls = self.max_calls = n
        return self

    def _add_callback(self, f: Callable[..., Any], name: str, keep_result: bool) -> None:
        if not callable(f):
            raise TypeError(f"argument to {name} must be callable, got {type(f).__name__}")
        shape = _shape_of(f)

        def action(args: list) -> list | None:
            if shape is not None and shape[0] != self._num_in:
                count, variadic = shape
                if variadic:
                    self.reporter.fatal(
                        f"wrong number of arguments in {name} func for {self._receiver_type}.{self.method} "
                        "The function signature must match the mocked method, "
                        "a variadic function cannot be used."
                    )
                else:
                    self.reporter.fatal(
                        f"wrong number of arguments in {name} func for {self._receiver_type}.{self.method}: "
                        f"got {count}, want {self._num_in} [{self.origin}]"
                    )
                return None
            result = f(*args)
            return self._as_returns(result) if keep_result else None

        self.actions.append(action)

    def _as_returns(self, result: Any) -> list:
        outs = len(self._out_types)
        if outs == 0:
            return []
        if outs > 1 and isinstance(result, tuple):
            return list(result)
        return [result]

    def do_and_return(self, f: Callable[..., Any]) -> Call:
        """Run ``f`` with the call's arguments and return what it returns."""
        self._add_callback(f, "DoAndReturn", keep_result=True)
        return self

    def do(self, f: Callable[..., Any]) -> Call:
        """Run ``f`` with the call's arguments, ignoring its result."""
        self._add_callback(f, "Do", keep_result=False)
        return self

    def return_(self, *args: Any) -> Call:
        """Declare the values the mocked call returns."""
        rets = list(args)
        outs = self._out_types
        if len(rets) != len(outs):
            self.reporter.fatal(
                f"wrong number of arguments to Return for {self._receiver_type}.{self.method}: "
                f"got {len(rets)}, want {len(outs)} [{self.origin}]"
            )
        for i, (ret, want) in enumerate(zip(rets, outs)):
            if _accepts(want, ret):
                continue
            if ret is None:
                self.reporter.fatal(
                    f"argument {i} to Return for {self._receiver_type}.{self.method} is None, "
                    f"but {_type_name(want)} cannot be None [{self.origin}]"
                )
            else:
                self.reporter.fatal(
                    f"wrong type of argument {i} to Return for {self._receiver_type}.{self.method}: "
                    f"{type(ret).__name__} is not assignable to {_type_name(want)} [{self.origin}]"
                )
        self.actions.append(lambda _args: list(rets))
        return self

    def set_arg(self, n: int, value: Any) -> Call:
        """Copy ``value`` into the ``n``-th argument, which must be a mutable container or object."""
        if n < 0 or n >= self._num_in:
            self.reporter.fatal(f"SetArg({n}, ...) called for a method with {self._num_in} args [{self.origin}]")
        else:
            want = self._in_types[n]
            if isinstance(want, type) and want in _IMMUTABLE:
                self.reporter.fatal(
                    f"SetArg({n}, ...) referring to argument of immutable type {want.__name__} [{self.origin}]"
                )

        def action(args: list) -> None:
            _assign(args[n], value)
            return None

        self.actions.append(action)
        return self

    def is_pre_req(self, other: Call) -> bool:
        """Return whether ``other`` is a direct or indirect prerequisite of this call."""
        return any(other is pre or pre.is_pre_req(other) for pre in self.pre_reqs)

    def after(self, pre_req: Call) -> Call:
        """Only match this call once ``pre_req`` has been satisfied."""
        if self is pre_req:
            self.reporter.fatal("A call isn't allowed to be its own prerequisite")
        if pre_req.is_pre_req(self):
            self.reporter.fatal(
                f"Loop in call order: {self} is a prerequisite to {pre_req} (possibly indirectly)."
            )
        self.pre_reqs.append(pre_req)
        return self

    def satisfied(self) -> bool:
        """Return whether the minimum number of calls has been made."""
        return self.num_calls >= self.min_calls

    def exhausted(self) -> bool:
        """Return whether the maximum number of calls has been made."""
        return self.num_calls >= self.max_calls

    def __str__(self) -> str:
        arguments = ", ".join(str(m) for m in self.args)
        return f"{self._receiver_type}.{self.method}({arguments}) {self.origin}"

    def _mismatch(self, index: int, matcher: Matcher, got: Any) -> MatchError:
        return MatchError(
            f"expected call at {self.origin} doesn't match the argument at index {index}.\n"
            f"Got: {format_gotten_arg(matcher, got)}\nWant: {matcher}"
        )

    def _check_fixed(self, args: list) -> None:
        if len(args) != len(self.args):
            raise MatchError(
                f"expected call at {self.origin} has the wrong number of arguments. "
                f"Got: {len(args)}, want: {len(self.args)}"
            )
        for i, (matcher, arg) in enumerate(zip(self.args, args)):
            if not matcher.matches(arg):
                raise self._mismatch(i, matcher, arg)

    def _check_variadic(self, args: list) -> None:
        fixed = self._num_in - 1
        count = len(self.args)
        if count < fixed:
            raise MatchError(
                f"expected call at {self.origin} has the wrong number of matchers. Got: {count}, want: {fixed}"
            )
        if count != self._num_in and len(args) != count:
            raise MatchError(
                f"expected call at {self.origin} has the wrong number of arguments. "
                f"Got: {len(args)}, want: {count}"
            )
        if len(args) < count - 1:
            raise MatchError(
                f"expected call at {self.origin} has the wrong number of arguments. "
                f"Got: {len(args)}, want: greater than or equal to {count - 1}"
            )
        for i, matcher in enumerate(self.args):
            if i < fixed:
                if not matcher.matches(args[i]):
                    raise self._mismatch(i, matcher, args[i])
                continue
            if i < len(args) and matcher.matches(args[i]):
                continue
            rest = args[i:]
            if matcher.matches(rest):
                break
            raise self._mismatch(i, matcher, rest)

    def check(self, args: Sequence[Any]) -> None:
        """Raise MatchError explaining why ``args`` do not satisfy this call."""
        args = list(args)
        if self._variadic:
            self._check_variadic(args)
        else:
            self._check_fixed(args)
        for pre in self.pre_reqs:
            if not pre.satisfied():
                raise MatchError(
                    f"expected call at {self.origin} doesn't have a prerequisite call satisfied:\n"
                    f"{pre}\nshould be called before:\n{self}"
                )
        if self.exhausted():
            raise MatchError(f"expected call at {self.origin} has already been called the max number of times")

    def drop_prereqs(self) -> list[Call]:
        """Stop checking prerequisites and return the ones there were."""
        pre_reqs, self.pre_reqs = self.pre_reqs, []
        return pre_reqs

    def call(self) -> list[Action]:
        """Count one call and return the actions to run."""
        self.num_calls += 1
        return self.actions


def new_call(reporter: Any, receiver: Any, method: str, signature: Any, *args: Any) -> Call:
    """Create an expected call whose default action returns zero values."""
    call = Call(
        reporter=reporter,
        receiver=receiver,
        method=method,
        signature=signature,
        args=[as_matcher(a) for a in args],
        origin=_caller_origin(),
    )
    call.actions.append(call._zero_values)
    return call


def _find_call(arg: Any) -> Call | None:
    if isinstance(arg, Call):
        return arg
    attributes = getattr(arg, "__dict__", None)
    if attributes is None:
        return None
    return next((value for value in attributes.values() if isinstance(value, Call)), None)


def in_order(*args: Any) -> None:
    """Declare that the given calls (or objects wrapping one) happen in order."""
    calls = []
    for position, arg in enumerate(args):
        call = _find_call(arg)
        if call is None:
            raise TypeError(
                f"invalid argument at position {position} of type {type(arg).__name__}, "
                "in_order expects Call or objects wrapping a Call"
            )
        calls.append(call)
    for earlier, later in zip(calls, calls[1:]):
        later.after(earlier)