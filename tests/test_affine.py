import io

import numpy as np
import pytest

from nnuekit.affine import AffineTransform
from nnuekit.common import NnueFormatError


def _layer_with_params(inputs=3, outputs=2, seed=0):
    rng = np.random.default_rng(seed)
    layer = AffineTransform(inputs, outputs)
    layer.biases = rng.integers(-1000, 1000, size=outputs, dtype=np.int32)
    layer.weights = rng.integers(
        -128, 128, size=(outputs, layer.padded_input_dimensions), dtype=np.int8
    )
    return layer


def test_padded_dimensions():
    layer = AffineTransform(30, 32)
    assert layer.padded_input_dimensions == 32
    assert AffineTransform(33, 1).padded_input_dimensions == 64


def test_hash_with_zero_previous():
    layer = AffineTransform(1024, 16)
    assert layer.hash_value(0) == 0xCC03DAE4 + 16


def test_hash_is_32_bit():
    layer = AffineTransform(30, 32)
    value = layer.hash_value(0xFFFFFFFF)
    assert 0 <= value <= 0xFFFFFFFF


def test_hash_depends_on_previous():
    layer = AffineTransform(30, 32)
    assert layer.hash_value(1) != layer.hash_value(2)
    assert layer.hash_value(5) == layer.hash_value(5)


def test_identity_weights():
    layer = AffineTransform(2, 2)
    layer.biases = np.array([1, 2], dtype=np.int32)
    weights = np.zeros((2, layer.padded_input_dimensions), dtype=np.int8)
    weights[0, 0] = 1
    weights[1, 1] = 1
    layer.weights = weights
    assert layer.propagate([10, 20]).tolist() == [11, 22]


def test_zero_layer_outputs_biases():
    layer = AffineTransform(4, 3)
    layer.biases = np.array([5, -6, 7], dtype=np.int32)
    assert layer.propagate([255, 255, 255, 255]).tolist() == [5, -6, 7]


def test_padding_weights_ignored():
    layer = _layer_with_params()
    x = [3, 4, 5]
    before = layer.propagate(x)
    layer.weights[:, 3:] = 100
    assert layer.propagate(x).tolist() == before.tolist()


def test_extra_inputs_ignored():
    layer = _layer_with_params()
    assert layer.propagate([1, 2, 3, 99, 99]).tolist() == layer.propagate([1, 2, 3]).tolist()


def test_output_dtype():
    layer = _layer_with_params()
    out = layer.propagate([1, 2, 3])
    assert out.dtype == np.int32 and out.shape == (2,)


def test_too_few_inputs():
    layer = AffineTransform(3, 2)
    with pytest.raises(ValueError):
        layer.propagate([1, 2])


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        AffineTransform(0, 2)
    with pytest.raises(ValueError):
        AffineTransform(2, -1)


def test_round_trip():
    layer = _layer_with_params(seed=3)
    buf = io.BytesIO()
    layer.write_parameters(buf)
    data = buf.getvalue()
    assert len(data) == 4 * 2 + 2 * 32

    other = AffineTransform(3, 2)
    other.read_parameters(io.BytesIO(data))
    assert other.biases.tolist() == layer.biases.tolist()
    assert other.weights.tolist() == layer.weights.tolist()
    assert other.propagate([7, 8, 9]).tolist() == layer.propagate([7, 8, 9]).tolist()


def test_wire_layout_biases_first():
    layer = AffineTransform(1, 1)
    layer.biases = np.array([1], dtype=np.int32)
    weights = np.zeros((1, 32), dtype=np.int8)
    weights[0, 0] = -1
    layer.weights = weights
    buf = io.BytesIO()
    layer.write_parameters(buf)
    data = buf.getvalue()
    assert data[:4] == b"\x01\x00\x00\x00"
    assert data[4:5] == b"\xff"


def test_truncated_stream():
    layer = AffineTransform(3, 2)
    with pytest.raises(NnueFormatError):
        layer.read_parameters(io.BytesIO(b"\x00" * 10))