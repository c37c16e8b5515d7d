import json
import random
import zlib

import pytest

from rocketwire.utils.compression import compress, uncompress


def test_uncompress_zlib_stream():
    original = "hello, go"
    compressed = zlib.compress(original.encode())
    assert uncompress(compressed) == original.encode()


def test_compress_every_level_round_trips():
    raw = b"The quick brown fox jumps over the lazy dog"
    for level in range(1, 10):
        compressed = compress(raw, level)
        assert uncompress(compressed) == raw


def _random_data(n, seed):
    return random.Random(seed).randbytes(n)


def _json_data(n):
    table = {f"compression_key_{i}": f"compression_value_{i}" for i in range(n)}
    return json.dumps(table).encode()


@pytest.mark.parametrize("i", range(0, 100, 7))
def test_random_data_round_trips(i):
    data = _random_data(i * 100, i)
    level = i % 9 + 1
    assert uncompress(compress(data, level)) == data


@pytest.mark.parametrize("i", range(0, 100, 7))
def test_json_data_round_trips(i):
    data = _json_data(i * 100)
    level = i % 9 + 1
    assert uncompress(compress(data, level)) == data


@pytest.mark.parametrize("level", [0, 10, -1])
def test_unsupported_level_raises(level):
    with pytest.raises(ValueError, match="unsupported compress level"):
        compress(b"data", level)


def test_uncompress_invalid_data_returned_unchanged():
    data = b"not a zlib stream"
    assert uncompress(data) == data


def test_compress_shrinks_repetitive_data():
    data = b"a" * 10000
    assert len(compress(data, 9)) < len(data)