"""
Base data structures intended for inheritance.

Every structure in :py:mod:`psd_codec.psd` derives from
:py:class:`BaseElement` and is decorated with attrs_ to declare its fields.
Reading always goes through a :py:class:`~psd_codec.psd.bin_utils.Cursor`;
writing accepts any seekable binary file object.

.. _attrs: https://www.attrs.org/en/stable/index.html
"""

import io
import logging
from collections import OrderedDict
from enum import Enum
from typing import Any, BinaryIO, TypeVar

from attrs import define, field, fields

from psd_codec.psd.bin_utils import Cursor, trimmed_repr, write_bytes

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="BaseElement")


class BaseElement:
    """
    Base element of the PSD file structs.

    .. py:classmethod:: read(cls, fp)

        Read the element from a :py:class:`~psd_codec.psd.bin_utils.Cursor`.

    .. py:method:: write(self, fp)

        Write the element to a file-like object and return the written size.

    .. py:classmethod:: frombytes(self, data, *args, **kwargs)

        Read the element from bytes.

    .. py:method:: tobytes(self, *args, **kwargs)

        Write the element to bytes.
    """

    @classmethod
    def read(cls: type[T], fp: Cursor, **kwargs: Any) -> T:
        raise NotImplementedError()

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        raise NotImplementedError()

    @classmethod
    def frombytes(cls: type[T], data: bytes, *args: Any, **kwargs: Any) -> T:
        with Cursor(data) as f:
            return cls.read(f, *args, **kwargs)

    def tobytes(self, *args: Any, **kwargs: Any) -> bytes:
        with io.BytesIO() as f:
            self.write(f, *args, **kwargs)
            return f.getvalue()

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("{name}(...)".format(name=self.__class__.__name__))
            return

        with p.group(2, "{name}(".format(name=self.__class__.__name__), ")"):
            p.breakable("")
            field_list = [f for f in fields(self.__class__) if f.repr]  # type: ignore[arg-type]
            for idx, field_item in enumerate(field_list):
                if idx:
                    p.text(",")
                    p.breakable()
                p.text("{field}=".format(field=field_item.name))
                value = getattr(self, field_item.name)
                if isinstance(value, bytes):
                    p.text(trimmed_repr(value))
                elif isinstance(value, Enum):
                    p.text(value.name)
                else:
                    p.pretty(value)
            p.breakable("")


@define(repr=False, eq=False)
class ValueElement(BaseElement):
    """
    Single value wrapper that has a `value` attribute.

    Comparison and truth testing delegate to the wrapped value, so a
    ``ColorModeData`` compares equal to its raw bytes.

    .. py:attribute:: value

        Internal value.
    """

    value: object = None

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ValueElement):
            other = other.value
        return self.value == other

    def __ne__(self, other: Any) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash(self.value)

    def __bool__(self) -> bool:
        return bool(self.value)

    def __len__(self) -> int:
        return len(self.value)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        if isinstance(self.value, bytes):
            return trimmed_repr(self.value)
        return self.value.__repr__()

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        p.text(self.__repr__())


@define(repr=False)
class ListElement(BaseElement):
    """
    List-like element that has `items` list.
    """

    _items: list = field(factory=list, converter=list)

    def append(self, x: Any) -> None:
        return self._items.append(x)

    def extend(self, L: Any) -> None:
        return self._items.extend(L)

    def index(self, x: Any) -> int:
        return self._items.index(x)

    def __len__(self) -> int:
        return self._items.__len__()

    def __iter__(self) -> Any:
        return self._items.__iter__()

    def __getitem__(self, key: Any) -> Any:
        return self._items.__getitem__(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        return self._items.__setitem__(key, value)

    def __repr__(self) -> str:
        return self._items.__repr__()

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("[...]")
            return

        with p.group(2, "[", "]"):
            p.breakable("")
            for idx, value in enumerate(self._items):
                if idx:
                    p.text(",")
                    p.breakable()
                if isinstance(value, bytes):
                    value = trimmed_repr(value)
                p.pretty(value)
            p.breakable("")

    def write(self, fp: BinaryIO, *args: Any, **kwargs: Any) -> int:
        written = 0
        for item in self:
            if hasattr(item, "write"):
                written += item.write(fp, *args, **kwargs)
            elif isinstance(item, bytes):
                written += write_bytes(fp, item)
        return written


@define(repr=False)
class DictElement(BaseElement):
    """
    Dict-like element that has `items` OrderedDict.

    Subclasses override :py:meth:`_key_converter` to accept alternative key
    spellings, e.g. raw bytes for enum keys.
    """

    _items: OrderedDict = field(factory=OrderedDict, converter=OrderedDict)

    def get(self, key: Any, *args: Any) -> Any:
        key = self._key_converter(key)
        return self._items.get(key, *args)

    def items(self) -> Any:
        return self._items.items()

    def keys(self) -> Any:
        return self._items.keys()

    def values(self) -> Any:
        return self._items.values()

    def __len__(self) -> int:
        return self._items.__len__()

    def __iter__(self) -> Any:
        return self._items.__iter__()

    def __getitem__(self, key: Any) -> Any:
        key = self._key_converter(key)
        return self._items.__getitem__(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        key = self._key_converter(key)
        return self._items.__setitem__(key, value)

    def __contains__(self, key: Any) -> bool:
        key = self._key_converter(key)
        return self._items.__contains__(key)

    def __repr__(self) -> str:
        return dict.__repr__(self._items)

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("{...}")
            return

        with p.group(2, "{", "}"):
            p.breakable("")
            for idx, (key, value) in enumerate(self._items.items()):
                if idx:
                    p.text(",")
                    p.breakable()
                p.pretty(key)
                p.text(": ")
                if isinstance(value, bytes):
                    value = trimmed_repr(value)
                p.pretty(value)
            p.breakable("")

    @classmethod
    def _key_converter(cls, key: Any) -> Any:
        return key

    def write(self, fp: BinaryIO, *args: Any, **kwargs: Any) -> int:
        written = 0
        for value in self.values():
            if hasattr(value, "write"):
                written += value.write(fp, *args, **kwargs)
            elif isinstance(value, bytes):
                written += write_bytes(fp, value)
        return written
