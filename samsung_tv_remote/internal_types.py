# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Type hints used throughout the package. Intended to be star-imported.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    AsyncIterator,
    Callable,
    ContextManager,
    Dict,
    Generator,
    Iterable,
    Iterator,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Set,
    Tuple,
    Type,
    Union,
    cast,
  )
from types import TracebackType

JsonableDict = Dict[str, 'Jsonable']
JsonableList = List['Jsonable']
Jsonable = Union[JsonableDict, JsonableList, str, int, float, bool, None]

HostAndPort = Tuple[str, int]
"""A (host, port) tuple."""
