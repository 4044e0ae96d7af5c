# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Type hints used internally by this package"""

from typing import (
    TYPE_CHECKING,
    Any,
    AsyncContextManager,
    AsyncIterator,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Self,
    Tuple,
    Type,
    Union,
  )

from types import TracebackType

Jsonable = Union[str, int, float, bool, None, Dict[str, 'Jsonable'], List['Jsonable']]
"""A type that can be serialized to JSON"""

JsonableDict = Dict[str, Jsonable]
"""A JSON-serializable dictionary"""

__all__ = [
    'TYPE_CHECKING',
    'Any',
    'AsyncContextManager',
    'AsyncIterator',
    'Callable',
    'Dict',
    'Iterable',
    'List',
    'Mapping',
    'Optional',
    'Self',
    'Tuple',
    'Type',
    'Union',
    'TracebackType',
    'Jsonable',
    'JsonableDict',
  ]
