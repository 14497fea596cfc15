"""Naming helpers for generated mock code: identifiers, argument lists, package names."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence


class IdentifierAllocator:
    """Hands out identifiers that do not clash with ones already taken."""

    def __init__(self, taken: Iterable[str] = ()) -> None:
        self._taken: set[str] = set(taken)

    def allocate(self, want: str) -> str:
        """Return ``want``, or ``want_2``, ``want_3``, ... if it is taken, and mark it taken."""
        candidate = want
        suffix = 2
        while candidate in self._taken:
            candidate = f"{want}_{suffix}"
            suffix += 1
        self._taken.add(candidate)
        return candidate

    def __contains__(self, name: object) -> bool:
        return name in self._taken

    def __len__(self) -> int:
        return len(self._taken)

    def __iter__(self) -> Iterator[str]:
        return iter(self._taken)


def make_arg_string(arg_names: Sequence[str] | None, arg_types: Sequence[str] | None) -> str:
    """Join names and types into a parameter list, giving a type once per run of equal types."""
    names = list(arg_names or [])
    types = list(arg_types or [])
    parts = []
    for i, name in enumerate(names):
        if i + 1 < len(types) and types[i] == types[i + 1]:
            parts.append(name)
        else:
            parts.append(f"{name} {types[i]}")
    return ", ".join(parts)


def sanitize(s: str) -> str:
    """Turn a string into a usable package name, replacing invalid characters with ``_``."""
    out: list[str] = []
    for ch in s:
        if not out:
            ok = ch.isalpha() or ch == "_"
        else:
            ok = ch.isalpha() or ch.isdecimal() or ch == "_"
        out.append(ch if ok else "_")
    result = "".join(out)
    return "x" if result == "_" else result


def mock_name(type_name: str, mock_names: Mapping[str, str] | None = None) -> str:
    """Return the mock type name for an interface: an explicit one, or ``Mock`` + its name."""
    if mock_names and type_name in mock_names:
        return mock_names[type_name]
    return "Mock" + type_name