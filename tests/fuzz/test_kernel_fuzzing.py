"""
Fuzz Tests for CFBx Components

This module contains property-based tests for the word buffer kernel,
the doubling operator and the cipher feedback mode using hypothesis.
"""

import pytest
import hypothesis.strategies as st
from hypothesis import given, settings, Verbosity
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'python-core'))

from cfbx.engine import CfbxConfig, CfbxEngine
from cfbx.gf128 import double
from cfbx.words import (
    WordBuffer,
    equals,
    leftmost_bytes,
    rightmost_bytes,
    shift_left,
    shift_out_bytes,
    xor,
    xor_tail,
)


# Hypothesis strategies for fuzz testing
binary_data = st.binary(min_size=0, max_size=256)
non_empty_data = st.binary(min_size=1, max_size=256)
blocks_128 = st.binary(min_size=16, max_size=16)
aes_keys = st.sampled_from([16, 24, 32]).flatmap(lambda n: st.binary(min_size=n, max_size=n))
segment_sizes = st.sampled_from([8, 16, 32, 64, 128])
shift_amounts = st.integers(min_value=0, max_value=31)


def _reference_encrypt(mode_name: str, key: bytes, iv: bytes, plaintext: bytes) -> bytes:
    """Encrypt with the cryptography package's own CFB implementation."""
    from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
    try:
        from cryptography.hazmat.decrepit.ciphers import modes as decrepit_modes
        if hasattr(decrepit_modes, mode_name):
            modes = decrepit_modes
    except ImportError:
        pass

    encryptor = Cipher(algorithms.AES(key), getattr(modes, mode_name)(iv)).encryptor()
    return encryptor.update(plaintext) + encryptor.finalize()


@st.composite
def buffer_and_length(draw):
    """A buffer and a byte count no larger than it."""
    data = draw(binary_data)
    n = draw(st.integers(min_value=0, max_value=len(data)))
    return data, n


@st.composite
def equal_length_pair(draw):
    data = draw(binary_data)
    other = draw(st.binary(min_size=len(data), max_size=len(data)))
    return data, other


class TestKernelFuzzing:
    """Property tests for the word buffer kernel."""

    @given(pair=equal_length_pair())
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_xor_involution(self, pair):
        a, b = (WordBuffer.from_bytes(x) for x in pair)

        assert equals(xor(xor(a.clone(), b), b), a)

    @given(case=buffer_and_length())
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_leftmost_bytes(self, case):
        data, n = case
        left = leftmost_bytes(WordBuffer.from_bytes(data), n)

        assert left.sig_bytes == n
        assert left.to_bytes() == data[:n]

    @given(case=buffer_and_length())
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_rightmost_bytes_reconstructs(self, case):
        data, n = case
        buf = WordBuffer.from_bytes(data)

        right = rightmost_bytes(buf, n)
        rebuilt = leftmost_bytes(buf, buf.sig_bytes - n).concat(right)

        assert right.to_bytes() == data[len(data) - n:]
        assert equals(rebuilt, buf)

    @given(data=non_empty_data, n=shift_amounts)
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_shift_left_matches_integer_shift(self, data, n):
        buf = WordBuffer.from_bytes(data).clamp()
        width = len(buf.words) * 32
        value = int.from_bytes(b''.join(w.to_bytes(4, 'big') for w in buf.words), 'big')

        carry = shift_left(buf, n)

        shifted = int.from_bytes(b''.join(w.to_bytes(4, 'big') for w in buf.words), 'big')
        assert shifted == (value << n) & ((1 << width) - 1)
        assert carry == (value >> (width - n) if n else 0)

    @given(case=buffer_and_length())
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_shift_out_bytes_splits(self, case):
        data, n = case
        if n == 0:
            return
        buf = WordBuffer.from_bytes(data)

        head = shift_out_bytes(buf, n)

        assert head.to_bytes() == data[:n]
        assert buf.to_bytes() == data[n:]

    @given(pair=equal_length_pair(), extra=binary_data)
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_xor_tail_matches_bytes(self, pair, extra):
        tail, mask = pair
        data = extra + tail

        result = xor_tail(WordBuffer.from_bytes(data), WordBuffer.from_bytes(mask))

        assert result.to_bytes() == extra + bytes(x ^ y for x, y in zip(tail, mask))

    @given(data=non_empty_data, extra=st.integers(min_value=1, max_value=3))
    @settings(verbosity=Verbosity.quiet, max_examples=50)
    def test_equals_requires_same_sig_bytes(self, data, extra):
        buf = WordBuffer.from_bytes(data)
        longer = WordBuffer(buf.words + [0], buf.sig_bytes)
        longer.sig_bytes = min(buf.sig_bytes + extra, len(longer.words) * 4)

        assert equals(buf, buf)
        assert not equals(buf, longer)


class TestDoubleFuzzing:
    """Property tests for GF(2^128) doubling."""

    @given(block=blocks_128)
    @settings(verbosity=Verbosity.quiet, max_examples=200)
    def test_double_matches_integer_arithmetic(self, block):
        value = int.from_bytes(block, 'big')
        expected = (value << 1) & ((1 << 128) - 1)
        if value >> 127:
            expected ^= 0x87

        assert double(WordBuffer.from_bytes(block)).to_bytes() == expected.to_bytes(16, 'big')


class TestModeFuzzing:
    """Property tests for the cipher feedback mode."""

    @given(plaintext=binary_data, key=aes_keys, iv=blocks_128, segment_size=segment_sizes)
    @settings(verbosity=Verbosity.quiet, max_examples=50, deadline=None)
    def test_roundtrip(self, plaintext, key, iv, segment_size):
        config = CfbxConfig(segment_size=segment_size)

        ciphertext = CfbxEngine(config).encrypt(plaintext, key, iv).ciphertext

        assert len(ciphertext) == len(plaintext)
        assert CfbxEngine(config).decrypt(ciphertext, key, iv).plaintext == plaintext

    @given(plaintext=binary_data, key=aes_keys, iv=blocks_128)
    @settings(verbosity=Verbosity.quiet, max_examples=50, deadline=None)
    def test_cfb8_matches_cryptography(self, plaintext, key, iv):
        expected = _reference_encrypt("CFB8", key, iv, plaintext)

        engine = CfbxEngine(CfbxConfig(segment_size=8))
        assert engine.encrypt(plaintext, key, iv).ciphertext == expected

    @given(plaintext=binary_data, key=aes_keys, iv=blocks_128)
    @settings(verbosity=Verbosity.quiet, max_examples=50, deadline=None)
    def test_cfb128_matches_cryptography(self, plaintext, key, iv):
        expected = _reference_encrypt("CFB", key, iv, plaintext)

        engine = CfbxEngine(CfbxConfig(segment_size=128))
        assert engine.encrypt(plaintext, key, iv).ciphertext == expected
