from collections.abc import Iterable, Iterator
from typing import Union

import attr


@attr.frozen
class Nil:
    """The empty list. Every proper list ends in `NIL`.

    Do not instantiate directly; use the `NIL` singleton below."""

    def __bool__(self):
        return False

    def __iter__(self) -> Iterator["SExp"]:
        return iter(())

    def __len__(self):
        return 0


NIL = Nil()


@attr.frozen
class Symbol:
    text: str


@attr.frozen
class String:
    text: str


@attr.frozen
class Integer:
    value: int


@attr.frozen(eq=False, repr=False)
class Cons:
    """A cons cell holding one list element and the rest of the list.

    Iterating over a `Cons` yields the heads of a proper list in order. A
    `TypeError` is raised if the chain ends in anything other than `NIL`.

    Equality, hashing and repr walk the tail chain in a loop, so only nesting
    depth (not list length) consumes stack."""

    head: "SExp"
    tail: "SExp"

    def _cells(self) -> tuple[list["SExp"], "SExp"]:
        """Return the heads along the tail chain and the final non-cons tail."""
        heads: list[SExp] = []
        node: SExp = self
        while isinstance(node, Cons):
            heads.append(node.head)
            node = node.tail
        return heads, node

    def __eq__(self, other):
        if not isinstance(other, Cons):
            return NotImplemented
        a: SExp = self
        b: SExp = other
        while isinstance(a, Cons) and isinstance(b, Cons):
            if a is b:
                return True
            if a.head != b.head:
                return False
            a, b = a.tail, b.tail
        return a == b

    def __hash__(self):
        heads, end = self._cells()
        return hash((Cons, tuple(heads), end))

    def __repr__(self):
        heads, end = self._cells()
        prefix = "".join(f"Cons({head!r}, " for head in heads)
        return f"{prefix}{end!r}{')' * len(heads)}"

    def __bool__(self):
        return True

    def __iter__(self) -> Iterator["SExp"]:
        node: SExp = self
        while isinstance(node, Cons):
            yield node.head
            node = node.tail
        if not isinstance(node, Nil):
            raise TypeError(f"Improper list ends in {node!r}")

    def __len__(self):
        return sum(1 for _ in self)


SExp = Union[Cons, Nil, Symbol, String, Integer]


def is_proper_list(form: SExp) -> bool:
    """Return True if `form` is `NIL` or a chain of `Cons` cells ending in
    `NIL`."""
    while isinstance(form, Cons):
        form = form.tail
    return isinstance(form, Nil)


def from_iterable(items: Iterable[SExp]) -> Union[Cons, Nil]:
    """Build a proper list holding `items` in order."""
    lst: Union[Cons, Nil] = NIL
    for item in reversed(list(items)):
        lst = Cons(item, lst)
    return lst


def list_(*items: SExp) -> Union[Cons, Nil]:
    """Creates a new list from members."""
    return from_iterable(items)
