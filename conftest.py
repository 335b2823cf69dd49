#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shared fixtures: SRM files synthesized in memory.

"""
import io
import struct

import pytest


def build_srm(chunks, *, version=7, markers=(), blocks=None, summary=None,
              days=48000, wheel=2096, recint=(1, 1), comment=b'',
              data_count=None, magic=None):
    """Assemble the bytes of an SRM file.

    `chunks` holds ``(watts, cad, hr, speed, alt, temp)`` tuples for version 7
    and ``(pwr_spd_bytes, cad, hr)`` tuples for version 6. `markers` are the
    raw ``(start, end)`` pairs of the rider's markers and `blocks` the raw
    ``(hsec_since_midnight, chunk_count)`` pairs; one block spanning every
    chunk by default.
    """
    n = len(chunks)
    blocks = [(0, n)] if blocks is None else blocks
    summary = (1, n) if summary is None else summary
    data_count = n if data_count is None else data_count

    out = magic if magic is not None else b'SRM' + str(version).encode()
    out += struct.pack('>2H2B2HxB70s', days, wheel, recint[0], recint[1],
                       len(blocks), len(markers), len(comment) + 1, comment)
    for start, end in [summary] + list(markers):
        out += struct.pack('>255sB7H', b'lap', 1, start, end, 250, 140, 90,
                           300, 0)
    for hsec, count in blocks:
        out += struct.pack('>lH', hsec, count)
    out += struct.pack('>3Hx', 500, 1234, data_count)
    for chunk in chunks:
        if version == 6:
            out += struct.pack('>3s2B', *chunk)
        else:
            out += struct.pack('>H2BLlh', *chunk)
    return out


def steady_chunks(n, watts=200, cad=90, hr=140, speed=10000, alt=50):
    """`n` identical version 7 chunks (speed in mm/s, i.e. 36 kph)."""
    return [(watts, cad, hr, speed, alt, 215)] * n


@pytest.fixture
def srm_bytes():
    return build_srm


@pytest.fixture
def srm_stream():
    def make(*args, **kwargs):
        return io.BytesIO(build_srm(*args, **kwargs))
    return make


@pytest.fixture
def steady():
    return steady_chunks
