## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import string

from .types import TiList, Value, is_number, is_list, kind_name
from .errors import TiNameError, TiTypeError, TiIndexError


NUMBER_NAMES = tuple(string.ascii_uppercase)
LIST_NAMES = tuple(f"L{chr(0x2080 + i)}" for i in range(1, 7))     # L₁ … L₆


class Environment:
    """Variable store for one program run.

    Two registries are kind-locked: the number slots A–Z and the list slots L₁–L₆,
    checked on every assignment.  Any other name lives in an untyped overflow map
    and may change kind freely.
    """

    def __init__(self):
        self.numbers: dict[str, float] = {name: 0.0 for name in NUMBER_NAMES}
        self.lists: dict[str, TiList] = {name: TiList([1.0]) for name in LIST_NAMES}
        self.overflow: dict[str, Value] = {}

    def _region(self, name: str) -> dict:
        if name in self.numbers: return self.numbers
        if name in self.lists: return self.lists
        return self.overflow

    def is_defined(self, name: str) -> bool:
        return name in self._region(name)

    def names(self) -> list[str]:
        return [*self.numbers, *self.lists, *self.overflow]

    def snapshot(self) -> dict[str, Value]:
        return {n: (v.copy() if is_list(v) else v) for n, v in ((n, self.get(n)) for n in self.names())}

    def get(self, name: str) -> Value:
        region = self._region(name)
        if name not in region:
            raise TiNameError(f"Undefined variable `{name}`.", ti_name=name)
        return region[name]

    def _get_list(self, name: str) -> TiList:
        if not is_list(value := self.get(name)):
            raise TiTypeError(f"Variable `{name}` holds a {kind_name(value)}, not a list.", ti_name=name)
        return value

    def _whole_index(self, name: str, index) -> int:
        if not is_number(index):
            raise TiTypeError(f"Index into `{name}` must be a number, got {kind_name(index)}.", ti_name=name)
        if not index.is_integer():
            raise TiIndexError(f"Index {index} into `{name}` is not a whole number.", ti_name=name)
        return int(index)

    def get_list_element(self, name: str, index: Value) -> float:
        position = self._whole_index(name, index)
        lst = self._get_list(name)
        if not 1 <= position <= lst.size:
            raise TiIndexError(f"Index {position} is out of range for `{name}` of size {lst.size}.", ti_name=name)
        return lst.get(position)

    def assign(self, name: str, value: Value) -> None:
        if name in self.numbers and not is_number(value):
            raise TiTypeError(f"Cannot assign a {kind_name(value)} to number variable `{name}`.", ti_name=name)
        if name in self.lists and not is_list(value):
            raise TiTypeError(f"Cannot assign a {kind_name(value)} to list variable `{name}`.", ti_name=name)
        if not (is_number(value) or is_list(value)):
            raise TiTypeError(f"Cannot assign a {kind_name(value)} to `{name}`.", ti_name=name)
        # Lists are stored by copy so no two variables share one.
        self._region(name)[name] = value.copy() if is_list(value) else value

    def assign_list_element(self, name: str, value: Value, index: Value) -> None:
        if not is_number(value):
            raise TiTypeError(f"Cannot assign a {kind_name(value)} to an element of `{name}`.", ti_name=name)
        position = self._whole_index(name, index)
        lst = self._get_list(name)
        if not 1 <= position <= lst.size + 1:
            raise TiIndexError(f"Index {position} is out of range for `{name}` of size {lst.size}.", ti_name=name)

        if position == lst.size + 1:
            lst.append(value)
        else:
            lst.set(position, value)
