#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Type hints used internally by this package.
"""

from __future__ import annotations

from typing import (
    Dict, List, Optional, Union, Any, TypeVar, Tuple, Set, overload,
    Callable, Iterable, Iterator, Sequence, Mapping, MutableMapping,
    Awaitable, Coroutine, AsyncIterator, AsyncIterable, AsyncContextManager,
    NamedTuple, Type, cast, TYPE_CHECKING,
  )

from types import TracebackType

from typing_extensions import Self

if TYPE_CHECKING:
    Jsonable = Union[str, int, float, bool, None, Dict[str, 'Jsonable'], List['Jsonable']]
    """A Type hint for a simple JSON-serializable value; i.e., str, int, float, bool, None, Dict[str, Jsonable], List[Jsonable]"""
else:
    Jsonable = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]
    """A Type hint for a simple JSON-serializable value; i.e., str, int, float, bool, None, Dict[str, Jsonable], List[Jsonable]"""

JsonableDict = Dict[str, Jsonable]
"""A type hint for a simple JSON-serializable dict; i.e., Dict[str, Jsonable]"""

HostAndPort = Tuple[str, int]
"""A type hint for a (host, port) socket address tuple."""
