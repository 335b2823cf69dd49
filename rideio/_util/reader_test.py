#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import pytest

from rideio import srm
from rideio._types import ActivityData
from rideio._util import cli, exceptions
from rideio._util.reader import FormatRegistry, default_registry, smart_reader


class NullReader:
    def open_ride_file(self, source, errors):
        errors.append('nothing here')
        return None


def test_explicit_registration():
    registry = FormatRegistry()
    assert 'srm' not in registry

    srm.register(registry)
    assert 'SRM' in registry
    assert registry.descriptions() == {'srm': 'SRM training files'}
    assert isinstance(registry.reader_for('ride.SRM'), srm.SrmFileReader)

    with pytest.raises(ValueError):
        srm.register(registry)


def test_unknown_format():
    with pytest.raises(exceptions.UnknownFormatError):
        default_registry().reader_for('ride.fit')


def test_path_without_extension():
    with pytest.raises(exceptions.UnknownFormatError) as err:
        default_registry().reader_for('/tmp/ride')
    assert '/tmp/ride' not in str(err.value)


def test_smart_reader(srm_bytes, steady, tmp_path):
    path = tmp_path / 'ride.srm'
    path.write_bytes(srm_bytes(steady(5), blocks=[(0, 3), (100, 2)]))

    data = smart_reader(str(path))
    assert isinstance(data, ActivityData)
    assert len(data) == 5
    assert len(data.warnings) == 1

    raw = smart_reader(str(path), vanilla=True)
    assert 'watts' in raw.columns and 'secs' in raw.columns


def test_smart_reader_failure(tmp_path):
    path = tmp_path / 'ride.srm'
    path.write_bytes(b'SRM6')
    with pytest.raises(exceptions.FormatError):
        smart_reader(str(path))

    registry = FormatRegistry()
    registry.register_reader('srm', 'broken', NullReader())
    with pytest.raises(exceptions.FormatError, match='nothing here'):
        smart_reader(str(path), registry=registry)


def test_cli_writes_csv(srm_bytes, steady, tmp_path):
    path = tmp_path / 'ride.srm'
    path.write_bytes(srm_bytes(steady(3), markers=[(2, 2)]))

    out = tmp_path / 'ride.csv'
    assert cli.parse([str(path), '--output', str(out)]) == 0
    lines = out.read_text().splitlines()
    assert lines[0].startswith('time,')
    assert len(lines) == 4

    out = tmp_path / 'intervals.csv'
    assert cli.parse([str(path), '--intervals', '--output', str(out)]) == 0
    assert out.read_text().splitlines()[0] == 'start,stop,name'


def test_cli_reports_bad_file(tmp_path, capsys):
    path = tmp_path / 'ride.srm'
    path.write_bytes(b'XYZ7')
    assert cli.parse([str(path)]) == 1
    assert "this doesn't look like an srm file!" in capsys.readouterr().err
