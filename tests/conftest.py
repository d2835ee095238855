# CFBx Test Configuration
# This file contains test settings and fixtures

import pytest
import sys
import os

# Add package root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'python-core'))

from cfbx.cipher import BlockCipher


# NIST SP 800-38A, appendix F.3
NIST_AES128_KEY = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
NIST_IV = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
NIST_PLAINTEXT = bytes.fromhex(
    "6bc1bee22e409f96e93d7e117393172a"
    "ae2d8a571e03ac9c9eb76fac45af8e51"
    "30c81c46a35ce411e5fbc1191a0a52ef"
    "f69f2445df4f9b17ad2b417be66c3710"
)


class IdentityCipher(BlockCipher):
    """Block cipher stand-in whose 'encryption' leaves the block unchanged."""

    block_size = 4

    def __init__(self):
        self.calls = 0

    def encrypt_block(self, buffer, offset):
        self.calls += 1


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return os.path.dirname(os.path.dirname(__file__))


@pytest.fixture(scope="session")
def python_core_path(project_root):
    """Return path to python-core directory."""
    return os.path.join(project_root, 'python-core')


@pytest.fixture
def temp_directory(tmp_path):
    """Provide a temporary directory for test operations."""
    return tmp_path


@pytest.fixture
def sample_data(temp_directory):
    """Provide sample data for testing."""
    data_file = temp_directory / "sample.txt"
    data_file.write_text("Hello, World! This is test data for CFBx encryption.")
    return data_file


@pytest.fixture
def nist_key():
    return NIST_AES128_KEY


@pytest.fixture
def nist_iv():
    return NIST_IV


@pytest.fixture
def nist_plaintext():
    return NIST_PLAINTEXT


@pytest.fixture
def identity_cipher():
    """Provide a block cipher whose keystream equals the feedback register."""
    return IdentityCipher()
