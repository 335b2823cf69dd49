#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
A generic container for decoded ride data.

File readers don't build frames directly. They push events into a
`RideFile`: device type and start time first, then samples in time order,
then intervals. `RideFile.to_activitydata` turns the result into an
`ActivityData` frame.

"""
from collections import namedtuple

from rideio._types import columns
from rideio._types.activitydata import ActivityData


RidePoint = namedtuple('RidePoint', ['secs', 'cad', 'hr', 'km', 'kph', 'nm',
                                     'watts', 'alt', 'lon', 'lat', 'headwind',
                                     'interval'])

RideInterval = namedtuple('RideInterval', ['start', 'stop', 'name'])

# Channels every RidePoint carries but not every format provides.
RESERVED_FIELDS = ('lon', 'lat', 'headwind')

COLUMN_SPEC = {
    'alt': columns.Altitude,
    'cad': columns.Cadence,
    'hr': columns.HeartRate,
    'interval': columns.IntervalCounter,
    'km': columns.Distance._from_km,
    'kph': columns.Speed._from_kph,
    'nm': columns.Torque,
    'watts': columns.Power,
}


class RideFile:
    """Append-only sink for one decoded ride."""

    def __init__(self):
        self.device_type = None
        self.start_time = None
        self.rec_int_secs = None
        self.data_points = []
        self.intervals = []

    def __len__(self):
        return len(self.data_points)

    def set_device_type(self, device_type):
        self.device_type = device_type

    def set_start_time(self, start_time):
        self.start_time = start_time

    def set_rec_int_secs(self, rec_int_secs):
        self.rec_int_secs = rec_int_secs

    def append_point(self, secs, cad, hr, km, kph, nm, watts, alt,
                     lon, lat, headwind, interval):
        point = RidePoint(secs, cad, hr, km, kph, nm, watts, alt,
                          lon, lat, headwind, interval)
        if self.data_points and secs < self.data_points[-1].secs:
            raise ValueError('points must be appended in time order '
                             '(%s s after %s s)'
                             % (secs, self.data_points[-1].secs))
        self.data_points.append(point)
        return point

    def add_interval(self, start, stop, name):
        interval = RideInterval(start, stop, name)
        self.intervals.append(interval)
        return interval

    def to_activitydata(self, *, start=None, warnings=()):
        """Build an `ActivityData` frame indexed by elapsed time.

        Parameters
        ----------
        start : datetime, optional
            Override for the ride's start (e.g. a timezone-aware version of
            `start_time`).
        warnings : sequence of str, optional
            Decode diagnostics to keep alongside the data.
        """
        data = ActivityData.from_records(
            [point._asdict() for point in self.data_points],
            columns=RidePoint._fields)

        for reserved in RESERVED_FIELDS:   # always zero; not real channels
            del data[reserved]

        timeoffsets = data.pop('secs')
        data._finish_up(column_spec=COLUMN_SPEC,
                        start=start if start is not None else self.start_time,
                        timeoffsets=timeoffsets,
                        device_type=self.device_type,
                        intervals=list(self.intervals),
                        warnings=list(warnings))
        return data
