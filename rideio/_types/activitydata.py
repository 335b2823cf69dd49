#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import numpy as np
from pandas import DataFrame, TimedeltaIndex, to_timedelta

from rideio._types import columns


class ActivityData(DataFrame):
    """Tabular view of a decoded ride, indexed by elapsed time.

    Besides the sample columns, a few attributes describe the ride as a
    whole: `start` (timestamp of the first sample), `device_type`,
    `intervals` (a list of ``RideInterval``) and `warnings` (any
    diagnostics collected while decoding).
    """
    _metadata = ['start', 'device_type', 'intervals', 'warnings']

    @property
    def _constructor(self):
        return self.__class__

    def __finalize__(self, other, method=None, **kwargs):
        """Propagate metadata from other to self."""
        for name in self._metadata:
            object.__setattr__(self, name, getattr(other, name, None))
        return self

    def __getitem__(self, key):
        """Create the illusion of Series subclasses in the DataFrame."""
        item = super().__getitem__(key)
        try:
            return columns.REGISTRY[key](item)
        except (KeyError, TypeError):   # not special, or not a column
            return item

    @property
    def time(self):   # makes accessing the index more readable
        if isinstance(self.index, TimedeltaIndex):
            return self.index
        else:
            # because recursion problems with super().__getattr__()
            raise AttributeError('index is not TimedeltaIndex')

    def named_intervals(self):
        """The intervals that came from device markers (i.e. have a name)."""
        return [ival for ival in (getattr(self, 'intervals', None) or [])
                if ival.name]

    # Private methods
    # ---------------
    def _finish_up(self, *, column_spec, start=None, timeoffsets=None,
                   **metadata):
        """A pseudo-init method, used internally."""
        for old_key, column_cls in column_spec.items():
            try:
                old_column = self.pop(old_key)  # no default
            except KeyError:
                continue

            new = column_cls(old_column)
            self[new.colname] = new

        self.start = start
        for name, value in metadata.items():
            setattr(self, name, value)

        if timeoffsets is not None:
            seconds = np.asarray(timeoffsets, dtype=float)
            self.index = TimedeltaIndex(to_timedelta(seconds, unit='s'),
                                        name='time')

        # No point hanging on to completely empty columns!
        self.dropna(axis=1, how='all', inplace=True)
