"""Annotated types for Pydantic models providing input conversion and validation.

These types leverage Pydantic's `BeforeValidator` to automatically convert
input values (like lists or scalars) into standardized, immutable NumPy arrays
during model initialization.

- [`Array1D`][optbridge.config.validated_types.Array1D]: Converts input to an
  immutable 1D `np.float64` array.
- [`ArrayEnum`][optbridge.config.validated_types.ArrayEnum]: Converts input to
  an immutable 1D `np.ubyte` array (suitable for integer enum values).
"""

from typing import Annotated

import numpy as np
from numpy.typing import NDArray
from pydantic import BeforeValidator

from .utils import _convert_1d_array, _convert_enum_array

Array1D = Annotated[NDArray[np.float64], BeforeValidator(_convert_1d_array)]
"""Convert to an immutable 1D numpy array of floating point values."""

ArrayEnum = Annotated[NDArray[np.ubyte], BeforeValidator(_convert_enum_array)]
"""Convert to an immutable numpy array of numerical enumeration values."""
