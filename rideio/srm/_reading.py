#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from contextlib import contextmanager
from datetime import datetime, timedelta
import logging
from math import pi
from struct import Struct

import pytz

from rideio._types import RideFile, RideInterval, RidePoint
from rideio._util import exceptions


log = logging.getLogger(__name__)

FORMAT_TAG = 'srm'
DESCRIPTION = 'SRM training files'
DEVICE_TYPE = 'SRM'

MAGIC = b'SRM'
SUPPORTED_VERSIONS = (6, 7)

DATETIME_1880 = datetime(year=1880, month=1, day=1)

# Every multi-byte field is big-endian, whatever the host.
HEADER = Struct('>2H2B2HxB70s')
MARKER = Struct('>255sB7H')
BLOCK = Struct('>lH')
CALIBRATION = Struct('>3Hx')
CHUNK_V6 = Struct('>3s2B')
CHUNK_V7 = Struct('>H2BLlh')   # altitude signed: rides below sea level exist


class SRMStream:
    """Forward-only cursor over the raw bytes of an SRM file.

    Every read is length-checked, so a short file fails loudly instead of
    handing garbage to the decoder.
    """
    __slots__ = ('_raw', 'offset', 'version')

    def __init__(self, raw):
        self._raw = raw
        self.offset = 0
        self.version = None

    def read(self, size, what='data'):
        data = self._raw.read(size) or b''
        if len(data) != size:
            raise exceptions.TruncatedFileError(
                size, len(data), '%s at byte %d' % (what, self.offset))
        self.offset += size
        return data

    def unpack(self, struct, what='data'):
        return struct.unpack(self.read(struct.size, what))


class SRMHeader:
    __slots__ = ('days_since_1880', 'wheel_circum', 'recording_interval',
                 'block_count', 'marker_count', 'comment_len', '_comment')

    def __init__(self, srmfile):
        values = list(srmfile.unpack(HEADER, 'header'))   # list, for pop()

        recint1, recint2 = values.pop(2), values.pop(2)
        if recint1 == 0 or recint2 == 0:
            raise exceptions.FormatError(
                'invalid recording interval %d/%d' % (recint1, recint2))
        values.insert(2, recint1 / recint2)   # seconds; 1 / Hz

        for name, value in zip(self.__slots__, values):
            setattr(self, name, value)

    @property
    def comment(self):
        keep = min(max(self.comment_len - 1, 0), len(self._comment))
        text = self._comment[:keep].split(b'\x00', 1)[0]
        return text.decode('utf-8', 'replace')

    @property
    def date(self):
        # Training date (days since Jan 1, 1880)
        return DATETIME_1880 + timedelta(days=self.days_since_1880)

    @property
    def rec_int_ms(self):
        return round(self.recording_interval * 1000)


def fixup_range(start, end):
    """Make a 1-based [start, end] chunk range consistent.

    Chunk indices start at 1, but some srmwin versions wrote 0. Others
    wrote markers with start > end.
    """
    start, end = max(start, 1), max(end, 1)
    if start > end:
        start, end = end, start
    return start, end


class SRMMarker:
    __slots__ = ('_comment', 'active', 'start', 'end', 'average_watts',
                 'average_hr', 'average_cadence', 'average_speed', 'pwc150')

    def __init__(self, start, end, **fields):
        for name in self.__slots__:
            setattr(self, name, fields.get(name, 0))
        self._comment = fields.get('_comment', b'')
        self.start, self.end = fixup_range(start, end)

    @classmethod
    def from_stream(cls, srmfile):
        fields = dict(zip(cls.__slots__, srmfile.unpack(MARKER, 'marker')))
        return cls(fields.pop('start'), fields.pop('end'), **fields)

    @property
    def comment(self):
        return self._comment.split(b'\x00', 1)[0].decode('utf-8', 'replace')

    def __repr__(self):
        return '<SRMMarker start=%d end=%d>' % (self.start, self.end)


class SRMBlock:
    __slots__ = ('timestamp', 'chunk_count')

    def __init__(self, timestamp, chunk_count):
        self.timestamp = timestamp
        self.chunk_count = chunk_count

    @classmethod
    def from_stream(cls, srmfile, date):
        # srmcmd writes a *signed* count of hundredths since midnight.
        hsec_since_midnight, chunk_count = srmfile.unpack(BLOCK, 'block')
        timestamp = date + timedelta(milliseconds=hsec_since_midnight * 10)
        return cls(timestamp, chunk_count)

    def end(self, rec_int_ms):
        """When the chunk after this block's last one would have been due."""
        return self.timestamp + timedelta(
            milliseconds=rec_int_ms * self.chunk_count)


class SRMCalibrationData:
    __slots__ = ('zero', 'slope', 'data_count')

    def __init__(self, srmfile):
        self.zero, self.slope, self.data_count = srmfile.unpack(
            CALIBRATION, 'calibration data')


class SRMPreamble:
    """Everything in the file ahead of the chunks.

    The first of the ``marker_count + 1`` markers summarises the whole file;
    the rest are the rider's intervals.
    """
    __slots__ = ('header', 'markers', 'blocks', 'calibration')

    def __init__(self, srmfile):
        self.header = header = SRMHeader(srmfile)
        log.debug('SRM%d header: %s, %d blocks, %d markers, %gs interval',
                  srmfile.version, header.date.date(), header.block_count,
                  header.marker_count, header.recording_interval)

        if header.block_count == 0:
            # No block, no timestamps.
            raise exceptions.FormatError('srm file has no data blocks')

        self.markers = [SRMMarker.from_stream(srmfile)
                        for _ in range(header.marker_count + 1)]
        self.blocks = [SRMBlock.from_stream(srmfile, header.date)
                       for _ in range(header.block_count)]
        self.calibration = SRMCalibrationData(srmfile)

    @property
    def data_count(self):
        return self.calibration.data_count


class SRMChunk:
    __slots__ = ('watts', 'cad', 'hr', 'kph', 'alt', 'temp')

    def __init__(self, srmfile):
        if srmfile.version == 6:
            pwr_spd, self.cad, self.hr = srmfile.unpack(CHUNK_V6, 'chunk')
            self.watts, self.kph = self.compact_power_speed(pwr_spd)
            self.alt, self.temp = 0.0, None
        else:
            (self.watts, self.cad, self.hr,
             speed, self.alt, temp) = srmfile.unpack(CHUNK_V7, 'chunk')
            self.kph = speed * 3.6 / 1000
            self.temp = temp * 0.1

    @staticmethod
    def compact_power_speed(pwr_spd):
        # Ew.
        watts = (pwr_spd[1] & 0x0f) | (pwr_spd[2] << 0x4)
        kph = ((pwr_spd[1] & 0xf0) << 3 | (pwr_spd[0] & 0x7f)) * 3.0 / 26.0
        return watts, kph

    @property
    def torque(self):
        return crank_torque(self.watts, self.cad)


def crank_torque(watts, cad):
    """Crank torque (N.m) from power (W) and cadence (rpm).

    Zero when not pedalling, rather than a division by zero.
    """
    if cad == 0:
        return 0.0
    return watts / (2 * pi * cad) * 60


def block_gap(block, next_block, rec_int_ms):
    """Seconds between the end of `block` and the start of `next_block`."""
    return (next_block.timestamp - block.end(rec_int_ms)).total_seconds()


def gen_points(srmfile, preamble, errors):
    """Decode the chunks following the preamble into `RidePoint` objects.

    Backwards jumps in time between blocks are appended to `errors`.
    """
    header, markers = preamble.header, preamble.markers
    blocks = preamble.blocks
    rec_int, rec_int_ms = header.recording_interval, header.rec_int_ms

    blknum, blkidx, interval = 0, 0, 0
    mrknum = 1 if header.marker_count > 0 else 0
    km, secs = 0.0, 0.0

    for i in range(preamble.data_count):
        chunk = SRMChunk(srmfile)

        if mrknum < len(markers) and i == markers[mrknum].end:
            interval += 1
            mrknum += 1

        # markers count from 1
        if i > 0 and mrknum < len(markers) and i == markers[mrknum].start - 1:
            interval += 1

        km += rec_int * chunk.kph / 3600

        yield RidePoint(secs=secs, cad=chunk.cad, hr=chunk.hr, km=km,
                        kph=chunk.kph, nm=chunk.torque, watts=chunk.watts,
                        alt=chunk.alt, lon=0.0, lat=0.0, headwind=0.0,
                        interval=interval)

        blkidx += 1
        if (blkidx == blocks[blknum].chunk_count
                and blknum + 1 < len(blocks)):
            gap = block_gap(blocks[blknum], blocks[blknum + 1], rec_int_ms)
            blknum += 1
            blkidx = 0
            if gap < rec_int:
                message = ('ERROR: time goes backwards by %g s '
                           'on trans to block %d' % (gap, blknum))
                log.warning(message)
                errors.append(message)
                secs += rec_int   # for lack of a better option
            else:
                secs += gap
        else:
            secs += rec_int


def gen_intervals(markers, points, rec_int):
    """Turn the rider's markers into contiguous time ranges.

    Each marker gives a named interval (its 1-based position in the table);
    unnamed intervals fill the gaps before, between and after them.
    """
    if not points:
        return

    last_index = len(points) - 1
    finish = points[-1].secs + rec_int
    last = 0.0

    # skip the summary marker
    for ordinal, marker in enumerate(markers[1:], start=1):
        start = marker.start - 1
        if start > last_index:   # names no decoded sample
            continue
        end = min(marker.end - 1, last_index)
        start_secs = points[start].secs
        end_secs = points[end].secs + rec_int

        yield RideInterval(last, start_secs, '')
        yield RideInterval(start_secs, end_secs, str(ordinal))
        last = end_secs

    if last < finish:
        yield RideInterval(last, finish, '')


@contextmanager
def open_srm(source):
    """Check the magic number and yield an `SRMStream` positioned after it.

    `source` is either a path or a binary file object at offset 0; only files
    opened here are closed here.
    """
    if hasattr(source, 'read'):
        reader, owned = source, False
    else:
        reader, owned = open(source, 'rb'), True

    try:
        srmfile = SRMStream(reader)

        magic = srmfile.read(4, 'magic number')
        if magic[:3] != MAGIC or not magic[3:].isdigit():
            raise exceptions.InvalidFileError('srm')

        srmfile.version = magic[3] - ord('0')
        if srmfile.version not in SUPPORTED_VERSIONS:
            raise exceptions.UnsupportedVersionError('srm', srmfile.version)

        yield srmfile
    finally:
        if owned:
            reader.close()


def decode(source, ride=None, errors=None):
    """Decode an SRM file into a ride-data sink.

    Parameters
    ----------
    source : str or binary file object
        The file to decode.
    ride : RideFile, optional
        Sink to populate; a new one is created if not given.
    errors : list, optional
        Diagnostics for recoverable problems are appended here.

    Returns
    -------
    RideFile

    Raises
    ------
    FormatError
        If the file can't be decoded. Nothing is added to `ride` in that
        case.
    """
    ride = RideFile() if ride is None else ride
    warnings = []

    with open_srm(source) as srmfile:
        preamble = SRMPreamble(srmfile)
        points = list(gen_points(srmfile, preamble, warnings))

    rec_int = preamble.header.recording_interval
    intervals = list(gen_intervals(preamble.markers, points, rec_int))

    if errors is not None:
        errors.extend(warnings)

    ride.set_device_type(DEVICE_TYPE)
    ride.set_start_time(preamble.blocks[0].timestamp)
    ride.set_rec_int_secs(rec_int)
    for point in points:
        ride.append_point(*point)
    for interval in intervals:
        ride.add_interval(*interval)

    return ride


def gen_records(source):
    """Iterate over the decoded samples as dictionaries.

    Each record is a single sample, keyed like `RidePoint`, plus an absolute
    ``timestamp``. Note this can be passed to the `from_records` constructor
    method of `pandas.DataFrame`s.
    """
    ride = decode(source)
    for point in ride.data_points:
        record = point._asdict()
        record['timestamp'] = ride.start_time + timedelta(seconds=point.secs)
        yield record


def read_and_format(file_path, *, tz_str=None):
    errors = []
    ride = decode(file_path, errors=errors)

    start = ride.start_time
    if tz_str is not None:   # srm timestamps are wall-clock, no zone
        start = pytz.timezone(tz_str).localize(start)

    return ride.to_activitydata(start=start, warnings=errors)


class SrmFileReader:
    """The object a `FormatRegistry` hands SRM files to."""

    def open_ride_file(self, source, errors):
        """Decode `source`, reporting every problem through `errors`.

        Returns the populated `RideFile`, or None if the file couldn't be
        read at all.
        """
        try:
            return decode(source, errors=errors)
        except exceptions.FormatError as e:
            errors.append(str(e))
        except OSError as e:
            errors.append("can't open file %s (%s)" % (source, e.strerror))
        return None


def register(registry):
    """Make SRM files readable through `registry`."""
    registry.register_reader(FORMAT_TAG, DESCRIPTION, SrmFileReader())
    return registry
