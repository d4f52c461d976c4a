"""Binary serialisation of vectors and matrices of doubles."""

from __future__ import annotations

import struct

import numpy as np

_DOUBLE = np.dtype("<f8")
_HEADER = struct.Struct("<I")


def serialise_vector(vector) -> bytes:
    """Encode a vector as its raw 8-byte doubles."""
    return np.ascontiguousarray(np.asarray(vector, dtype=_DOUBLE).ravel()).tobytes()


def serialise_matrix(matrix) -> bytes:
    """Encode a matrix as a uint32 row count followed by column-major doubles."""
    array = np.asarray(matrix, dtype=_DOUBLE)
    if array.ndim != 2:
        raise ValueError("matrix must be two-dimensional")
    return _HEADER.pack(array.shape[0]) + array.tobytes(order="F")


def unserialise_vector(data: bytes) -> np.ndarray:
    """Decode a vector produced by :func:`serialise_vector`."""
    if len(data) % _DOUBLE.itemsize:
        raise ValueError("vector data length is not a multiple of 8 bytes")
    return np.frombuffer(data, dtype=_DOUBLE).astype(np.float64)


def unserialise_matrix(data: bytes) -> np.ndarray:
    """Decode a matrix produced by :func:`serialise_matrix`."""
    if len(data) < _HEADER.size:
        raise ValueError("matrix data is shorter than its header")
    (rows,) = _HEADER.unpack_from(data)
    body = data[_HEADER.size:]
    if rows == 0:
        if body:
            raise ValueError("matrix with zero rows carries data")
        return np.zeros((0, 0))
    cols = len(body) // rows // _DOUBLE.itemsize
    if rows * cols * _DOUBLE.itemsize != len(body):
        raise ValueError("matrix data length does not match its row count")
    values = np.frombuffer(body, dtype=_DOUBLE).astype(np.float64)
    return values.reshape((rows, cols), order="F")