import collections.abc
import re
from dataclasses import dataclass

import pytest

from expectmock.matchers import (
    GotFormatter,
    Matcher,
    all_of,
    any_of,
    any_value,
    as_matcher,
    assignable_to_type_of,
    cond,
    eq,
    format_gotten_arg,
    get_string,
    got_formatter_adapter,
    in_any_order,
    length,
    nil,
    not_,
    regex,
    want_formatter,
)


class A(list):
    pass


@dataclass
class B:
    name: str


@dataclass
class Dog:
    breed: str = ""
    name: str = ""


@pytest.mark.parametrize(
    "matcher, yes, no",
    [
        (any_value(), [3, None, "foo"], []),
        (
            any_of(nil(), length(2), 1, 2, 3),
            [None, "hi", "to", 1, 2, 3],
            ["s", "", 0, 4, 10],
        ),
        (eq(4), [4], [3, "blah", None, 4.0, "4"]),
        (nil(), [None], ["", 0, object(), ValueError("err")]),
        (not_(eq(4)), [3, "blah", None, 4.0], [4]),
        (
            regex("[0-9]{2}:[0-9]{2}"),
            ["23:02", "[23:02]: Hello world", b"23:02"],
            [4, "23-02", "hello world", True, b"23-02"],
        ),
        (all_of(any_value(), eq(4)), [4], [3, "blah", None, 4.0]),
        (
            length(2),
            [[1, 2], "ab", {"a": 0, "b": 1}, ("a", "b")],
            [[1], "a", 42, 42.0, False, ("a",)],
        ),
        (eq(A(["a", "b"])), [["a", "b"], A(["a", "b"])], [["a"], A(["b"])]),
        (cond(lambda x: x.name == "Dam"), [B(name="Dam")], [B(name="Dave")]),
    ],
)
def test_matchers(matcher, yes, no):
    for x in yes:
        assert matcher.matches(x), f"{x!r} {matcher}"
    for x in no:
        assert not matcher.matches(x), f"{x!r} {matcher}"


class _StubMatcher(Matcher):
    def __init__(self, result):
        self.result = result
        self.seen = []

    def matches(self, x):
        self.seen.append(x)
        return self.result

    def __str__(self):
        return "stub"


def test_not_matcher_inverts_child():
    inner = _StubMatcher(True)
    assert not_(inner).matches(4) is False
    assert inner.seen == [4]

    inner = _StubMatcher(False)
    assert not_(inner).matches(5) is True
    assert inner.seen == [5]


@pytest.mark.parametrize(
    "pattern, value, want_match, want_string",
    [
        (r"^\d+$", "2302", True, r"matches regex ^\d+$"),
        (
            "^[0-9]{2}:[0-9]{2}$",
            "[23:02]: Hello world",
            False,
            "matches regex ^[0-9]{2}:[0-9]{2}$",
        ),
        (
            '^{"id":[0-9]{2}}$',
            b'{"id":12}',
            True,
            'matches regex ^{"id":[0-9]{2}}$',
        ),
    ],
)
def test_regex_matcher(pattern, value, want_match, want_string):
    matcher = regex(pattern)
    assert matcher.matches(value) is want_match
    assert str(matcher) == want_string


def test_regex_invalid_pattern_raises():
    with pytest.raises(re.error):
        regex(r"^[0-9]\\?{2}:[0-9]{2}$")


def test_assignable_to_type_of():
    assert assignable_to_type_of("abc").matches(4) is False
    assert assignable_to_type_of("abc").matches("def") is True
    assert assignable_to_type_of(0).matches(4) is True
    assert assignable_to_type_of(0).matches("def") is False
    assert assignable_to_type_of(0).matches(True) is False
    assert assignable_to_type_of(Dog()).matches(Dog(breed="pug", name="Fido")) is True
    assert assignable_to_type_of(Dog()).matches(B(name="Fido")) is False
    assert assignable_to_type_of(Dog).matches(Dog()) is True
    assert assignable_to_type_of(collections.abc.Mapping).matches({"k": "v"}) is True
    assert assignable_to_type_of(collections.abc.Mapping).matches([]) is False


def test_assignable_to_type_of_description():
    assert str(assignable_to_type_of("abc")) == "is assignable to str"
    assert str(assignable_to_type_of(Dog)) == "is assignable to Dog"


@pytest.mark.parametrize(
    "wanted, given, want_match",
    [
        ([1, 2, 3], [1, 2, 3], True),
        ([1, 2, 3], [1, 3, 2], True),
        ([1, 2, 3], [1, 2, 4], False),
        ([1, 2, 3], [1, 2], False),
        ([1, 2, 3], [1, 2, 3, 4], False),
        ([], [], True),
        ([1.0, 2.0, 3.0], [1, 2, 3], False),
        ((1, 2, 3), (1, 2, 3), True),
        ((1, 2, 3), (1, 3, 2), True),
        ((1, 2, 3), (1, 2, 4), False),
        ((1, 2, 3), (1, 2, 3, 4), False),
        ((1, 2, 3), (1, 2), False),
        ("123", "123", False),
        (123, [123], False),
        ([123], 123, False),
        (123, 123, False),
        ([[1], [1, 2], [1, 2, 3]], [[1], [1, 2], [1, 2, 3]], True),
        ([[1], [1, 2, 3], [1, 2]], [[1], [1, 2], [1, 2, 3]], True),
        ([[1], [1, 2, 3], [1, 2]], [[1], [1, 2, 4], [1, 3]], False),
        ([[1], [1, 2], [1, 2, 3]], [[1], [1, 2]], False),
        ([[1], [1, 2]], [[1], [1, 2], [1, 2, 3]], False),
        ([["a", "b"]], [A(["a", "b"])], True),
    ],
)
def test_in_any_order(wanted, given, want_match):
    assert in_any_order(wanted).matches(given) is want_match


def test_descriptions():
    assert str(any_value()) == "is anything"
    assert str(eq(15)) == "is equal to 15 (int)"
    assert str(nil()) == "is nil"
    assert str(not_(eq(4))) == "not(is equal to 4 (int))"
    assert str(not_(4)) == "not(is equal to 4 (int))"
    assert str(length(2)) == "has length 2"
    assert str(cond(lambda x: True)) == "adheres to a custom condition"
    assert str(any_of(nil(), 1)) == "is nil | is equal to 1 (int)"
    assert str(all_of(any_value(), eq(4))) == "is anything; is equal to 4 (int)"
    assert str(in_any_order([1, 2, 3])) == "has the same elements as [1, 2, 3]"


def test_want_formatter_changes_description_only():
    matcher = want_formatter(lambda: "is equal to fifteen", eq(15))
    assert str(matcher) == "is equal to fifteen"
    assert matcher.matches(15) is True
    assert matcher.matches(3) is False


def test_want_formatter_accepts_plain_object():
    matcher = want_formatter("fifteen", eq(15))
    assert str(matcher) == "fifteen"


def test_got_formatter_adapter_with_function():
    matcher = got_formatter_adapter(lambda i: f"{i:02d}", eq(15))
    assert format_gotten_arg(matcher, 3) == "03"
    assert str(matcher) == "is equal to 15 (int)"
    assert matcher.matches(15) is True
    assert matcher.matches(3) is False


def test_got_formatter_adapter_with_formatter_object():
    class Braces(GotFormatter):
        def got(self, got):
            return f"test{{{got}}}"

    matcher = got_formatter_adapter(Braces(), eq(0))
    assert format_gotten_arg(matcher, 1) == "test{1}"


def test_format_gotten_arg_default():
    assert format_gotten_arg(eq(15), 3) == "3 (int)"
    assert format_gotten_arg(eq("x"), "y") == "y (str)"


def test_get_string():
    class Named:
        def __str__(self):
            return "meow"

    class FakeMock:
        _expectmock_instance = True

        def __str__(self):
            raise AssertionError("must not be called")

    assert get_string(Named()) == "meow"
    assert get_string(FakeMock()) == "FakeMock"
    assert get_string(5) == "5"


def test_as_matcher():
    m = eq(3)
    assert as_matcher(m) is m
    assert str(as_matcher(None)) == "is nil"
    assert as_matcher(None).matches(None) is True
    assert as_matcher(7).matches(7) is True
    assert as_matcher(7).matches(8) is False