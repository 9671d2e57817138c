"""Pytest configuration and shared fixtures."""

import gzip
import os

import pytest

from test_data import FASTA_CONTENT

# Ensure a non-interactive backend is used for tests running in headless
# environments (e.g. CI).  This must be set before pyplot is imported.
os.environ.setdefault('MPLBACKEND', 'Agg')


@pytest.fixture
def fasta_file(tmp_path):
    """Write a plain FASTA file and return its path."""
    path = tmp_path / 'test.fasta'
    path.write_text(FASTA_CONTENT)
    return str(path)


@pytest.fixture
def gzip_fasta_file(tmp_path):
    """Write a gzipped FASTA file and return its path."""
    path = tmp_path / 'test.fasta.gz'
    with gzip.open(str(path), 'wt') as f:
        f.write(FASTA_CONTENT)
    return str(path)


@pytest.fixture
def write_weights(tmp_path):
    """Return a helper that writes a newline-delimited weight file."""

    def _write(name, values):
        path = tmp_path / name
        path.write_text(''.join(f'{v}\n' for v in values))
        return str(path)

    return _write
