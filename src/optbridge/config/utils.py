"""Utilities for checking and converting configuration values.

This module provides helper functions for use within Pydantic model validation
logic. They convert configuration inputs into immutable NumPy arrays and check
that arrays describing the same entities have consistent sizes.
"""

from enum import IntEnum
from typing import Any, Type

import numpy as np
from numpy.typing import ArrayLike, NDArray


def immutable_array(
    array_like: ArrayLike,
    **kwargs: Any,  # noqa: ANN401
) -> NDArray[Any]:
    """Convert input to an immutable NumPy array.

    This function takes various array-like inputs (e.g., lists, tuples, other
    NumPy arrays) and converts them into a NumPy array. It then sets the
    `writeable` flag of the resulting array to `False`, making it immutable.

    Args:
        array_like: The input data to convert (e.g., list, tuple, NumPy array).
        kwargs:     Additional keyword arguments passed directly to `numpy.array`.

    Returns:
        A new NumPy array, with its `writeable` flag set to `False`.
    """
    array = np.array(array_like, **kwargs)
    array.setflags(write=False)
    return array


def check_array_size(array: NDArray[Any], name: str, size: int) -> None:
    """Check that a 1D array has the expected number of elements.

    Args:
        array: The array to check.
        name:  A descriptive name for the array (used in error messages).
        size:  The expected size.

    Raises:
        ValueError: If the size of the array does not match.
    """
    if array.size != size:
        msg = f"{name} has length {array.size}, expected {size}"
        raise ValueError(msg)


def check_enum_values(value: NDArray[np.ubyte], enum_type: Type[IntEnum]) -> None:
    """Check if enum values in a NumPy array are valid members of an IntEnum.

    Args:
        value:     A NumPy array containing integer values (typically `np.ubyte`)
                   representing potential enum members.
        enum_type: The `IntEnum` class to validate against.

    Raises:
        ValueError: If any value in the `value` array does not correspond to a
                    member of the `enum_type`.
    """
    min_enum = min(item.value for item in enum_type)
    max_enum = max(item.value for item in enum_type)
    if np.any(value < min_enum) or np.any(value > max_enum):
        msg = "invalid enumeration value"
        raise ValueError(msg)


def _convert_1d_array(array: ArrayLike | None) -> NDArray[np.float64] | None:
    if array is None:
        return array
    return immutable_array(array, dtype=np.float64, ndmin=1)


def _convert_enum_array(array: ArrayLike | None) -> NDArray[np.ubyte] | None:
    if array is None:
        return array
    return immutable_array(array, dtype=np.ubyte, ndmin=1)

