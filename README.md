# expectmock

`expectmock` provides the building blocks of an expectation-based mock:

- **argument matchers**, in `expectmock.matchers`;
- **expected calls**, in `expectmock.call`. Each one knows how often it may happen, what it does when it happens, and which calls must come before it;
- **naming helpers** for code that writes mock classes, in `expectmock.naming`.

It has no dependencies beyond the standard library.

## Matchers

All matchers are instances of `expectmock.matchers.Matcher`. A matcher has a `matches(x)` method, and `str(matcher)` describes what it accepts.

| Function | Matches |
| --- | --- |
| `any_value()` | anything |
| `eq(x)` | values equal to `x` whose type is compatible with it. `True` does not equal `1`. Lists, tuples and mappings are compared element by element. |
| `nil()` | `None` |
| `not_(x)` | whatever `x` (a matcher, or a value compared with `eq`) does not match |
| `all_of(*xs)` | values that every matcher or value accepts |
| `any_of(*xs)` | values that at least one matcher or value accepts |
| `length(n)` | sized values of length `n` |
| `regex(pattern)` | `str`, `bytes` or `bytearray` values in which `pattern` is found. An invalid pattern raises `re.error`. |
| `assignable_to_type_of(x)` | instances of `x` if it is a type, otherwise instances of `type(x)` |
| `in_any_order(xs)` | lists or tuples holding the same elements as `xs`, in any order. Strings are not treated as collections. |
| `cond(fn)` | values for which `fn(value)` is true |

```python
from expectmock.matchers import any_of, nil, length, regex

any_of(nil(), length(2), 1, 2, 3).matches("hi")   # True
regex("[0-9]{2}:[0-9]{2}").matches(b"23:02")      # True
str(regex(r"^\d+$"))                              # 'matches regex ^\\d+$'
```

`as_matcher(x)` turns an expected argument into a matcher:

- a matcher is returned as it is;
- `None` becomes `nil()`;
- anything else becomes `eq(x)`.

Two adapters control how a mismatch is described:

- `want_formatter(stringer, matcher)` replaces the matcher's description. `stringer` is a callable returning the text, or any object whose `str()` is used.
- `got_formatter_adapter(formatter, matcher)` controls how the received value is shown. `formatter` is a `GotFormatter` or a plain callable.

`format_gotten_arg(matcher, arg)` renders a received value. It uses the matcher's formatter if there is one, and otherwise gives `"<value> (<type name>)"`.

`get_string(x)` renders a value for messages. For an object that sets `_expectmock_instance = True`, it gives only the type name and does not call that object's own `__str__`.

## Expected calls

`new_call(reporter, receiver, method, signature, *args)` creates a `Call`. Its arguments are:

- `reporter`: any object with a `fatal(message)` method. It is called when the expectation is set up wrongly, or when an action is given a function of the wrong arity.
- `signature`: a callable whose parameters and annotations describe the mocked method, usually the bound method itself.
- `args`: the expected arguments, each turned into a matcher with `as_matcher`.

By default a call is expected exactly once. Its first action returns a zero value (`0`, `""`, `False`, ... or `None`) for each annotated return type.

```python
from expectmock.call import MatchError, new_call
from expectmock.matchers import any_value


class Reporter:
    def fatal(self, message):
        raise AssertionError(message)


class Store:
    def get(self, key: str) -> int:
        ...


store = Store()
call = new_call(Reporter(), store, "get", store.get, any_value()).return_(1).times(2)

call.check(["a"])           # passes silently; raises MatchError on a mismatch
actions = call.call()       # counts one call and returns the actions
result = None
for action in actions:
    returned = action(["a"])
    if returned is not None:
        result = returned   # the last non-None list is the call's return values
# result == [1]
```

### How often

- `times(n)` requires exactly `n` calls.
- `min_times(n)` requires at least `n` calls. If the maximum is still 1, it becomes unbounded.
- `max_times(n)` allows at most `n` calls. If the minimum is still 1, it becomes 0.
- `any_times()` allows any number of calls, including none.

`satisfied()` tells whether the minimum number of calls has been reached. `exhausted()` tells whether the maximum has been reached.

### What it does

- `return_(*values)` declares the return values. They are checked against the signature's return annotation, and `reporter.fatal` is called on a wrong count or type.
- `do(f)` runs `f` with the call's arguments and ignores its result.
- `do_and_return(f)` runs `f` with the call's arguments and uses its result as the return values.
- `set_arg(n, value)` changes argument `n` in place:
  - a list gets its leading elements overwritten;
  - a dict or set gets its contents replaced;
  - a plain object gets its attributes replaced.

  An argument annotated with an immutable type is reported through `reporter.fatal`.

### Matching

`check(args)` raises `MatchError` with an explanation in any of these cases:

- the number of arguments is wrong;
- an argument does not match;
- a prerequisite is unsatisfied;
- the call is already exhausted.

For a signature that takes `*args`, the last matcher may match either each trailing argument or the list of all remaining ones.

### Ordering

- `after(other)` makes a call match only once `other` is satisfied. A call made its own prerequisite, or a loop in the order, is reported through `reporter.fatal`.
- `in_order(*calls)` chains `after` across its arguments. It also accepts objects that hold a `Call` in one of their attributes, and raises `TypeError` for anything else.
- `is_pre_req(other)` tells whether `other` is a direct or indirect prerequisite.
- `drop_prereqs()` clears the prerequisites and returns them.

## Naming helpers

`expectmock.naming` has these helpers:

- `IdentifierAllocator(taken)` hands out identifiers that clash with none already taken. `allocate("m")` gives `"m"`, then `"m_2"`, `"m_3"`, and so on. It supports `in` and `len()`.
- `make_arg_string(names, types)` builds a parameter list and writes the type once per run of equal types. For example, `["a", "b"]` with `["int", "int"]` gives `"a, b int"`.
- `sanitize(s)` makes a string usable as a package name. Invalid characters become `_`, and a lone `_` becomes `x`.
- `mock_name(type_name, mock_names)` gives the explicit name from `mock_names` if there is one, and `"Mock" + type_name` otherwise.

## What this package does not do

There is no controller that:

- keeps the expected calls of a test;
- routes each actual call on a receiver to the call that matches it;
- runs that call's actions for you;
- reports unmet expectations when a test ends.

The caller does that work with `check`, `call` and `satisfied`.

There is also no command that generates mock classes. The naming helpers are what such a generator would use, but the package does not read interface definitions, write source files, or work out package import paths.

## Running the tests

Install the package with its `test` extra, then run `pytest` from the project root.