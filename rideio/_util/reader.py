#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Dispatch files to readers by format tag (i.e. file extension).

Readers are registered explicitly: each format subpackage exposes a
``register(registry)`` function and `default_registry` calls them.

"""
from os.path import splitext

from pandas import DataFrame

from rideio import srm
from rideio._types import RidePoint
from rideio._util import exceptions


class FormatRegistry:
    """Maps format tags to reader objects.

    A reader is anything with an ``open_ride_file(source, errors)`` method
    returning a `RideFile`, or None on failure.
    """

    def __init__(self):
        self._readers = {}

    def __contains__(self, tag):
        return tag.lower() in self._readers

    def register_reader(self, tag, description, reader):
        tag = tag.lower()
        if tag in self._readers:
            raise ValueError('a %s reader is already registered' % tag)
        self._readers[tag] = (description, reader)

    def descriptions(self):
        return {tag: desc for tag, (desc, _) in self._readers.items()}

    def reader(self, tag):
        try:
            _, reader = self._readers[tag.lower()]
        except KeyError:
            raise exceptions.UnknownFormatError(tag) from None
        return reader

    def reader_for(self, file_path):
        ext = splitext(file_path)[-1][1:]   # drop period from the extension
        return self.reader(ext)

    def open_ride_file(self, file_path, errors):
        return self.reader_for(file_path).open_ride_file(file_path, errors)


def default_registry():
    """A fresh registry knowing every format this package can read."""
    registry = FormatRegistry()
    srm.register(registry)
    return registry


def smart_reader(file_path, *, vanilla=False, registry=None):
    """Dispatch a file reader based on file extension.

    Parameters
    ----------
    file_path : str
        Path to the file to be read.
    vanilla : bool, optional
        Return a spruced up subclass of the `pandas.DataFrame` (`ActivityData`)
        and benefit from some extra data pruning and functionality, or be
        boring and get the raw data untouched.
    registry : FormatRegistry, optional
        Where to look up readers; `default_registry()` if not given.

    Returns
    -------
    ActivityData or DataFrame
        The output depends on the `vanilla` argument.

    Raises
    ------
    UnknownFormatError
        If the file type (based on the extension) is not supported.
    FormatError
        If the file couldn't be decoded.
    """
    if registry is None:
        registry = default_registry()

    errors = []
    ride = registry.open_ride_file(file_path, errors)
    if ride is None:
        raise exceptions.FormatError('; '.join(errors))

    if not vanilla:
        return ride.to_activitydata(warnings=errors)
    else:
        return DataFrame.from_records(ride.data_points,
                                      columns=RidePoint._fields)
