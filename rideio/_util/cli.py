#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
parse is installed as an executable console_script with this package.

"""
from argparse import ArgumentParser
from functools import partial
import logging
from os import path

from pandas import DataFrame
import pytz

from rideio._types import RideInterval
from rideio._util import console, exceptions
from rideio._util.reader import default_registry


def build_parser(valid_formats):
    parser = ArgumentParser(description='decode a ride file to csv')

    parser.add_argument('input',
                        type=str,
                        help='raw file to read')
    parser.add_argument('--output',
                        type=str,
                        metavar='filename',
                        default=None,
                        help='optional; file to write to')
    parser.add_argument('--format',
                        type=str,
                        default=None,
                        help='optional; format of the file',
                        choices=valid_formats)
    parser.add_argument('--intervals',
                        action='store_true',
                        help='write the intervals instead of the samples')
    parser.add_argument('--tz',
                        type=str,
                        default=None,
                        metavar='zone',
                        help='optional; timezone the device clock was set to')
    parser.add_argument('--verbose',
                        action='store_true',
                        help='log decoding details')
    return parser


def parse(argv=None):
    registry = default_registry()
    parser = build_parser(sorted(registry.descriptions()))
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.ERROR,
                        format='%(levelname)s %(name)s: %(message)s')

    # Script begins
    fmt = args.format or path.splitext(args.input)[-1][1:]
    errors = []
    try:
        reader = registry.reader(fmt)
    except exceptions.UnknownFormatError as e:
        console.report([str(e)], 'fail')
        return 1

    ride = reader.open_ride_file(args.input, errors)
    if ride is None:
        console.report(errors, 'fail')
        return 1
    console.report(errors, 'warning')

    if args.intervals:
        data = DataFrame.from_records(ride.intervals,
                                      columns=RideInterval._fields)
        write = partial(data.to_csv, index=False, encoding='utf-8')
    else:
        start = ride.start_time
        if args.tz is not None:
            start = pytz.timezone(args.tz).localize(start)
        data = ride.to_activitydata(start=start, warnings=errors)
        write = partial(data.to_csv,
                        na_rep='NA', index_label='time', encoding='utf-8')

    if args.output is None:
        print(write(), end='')
    else:
        write(args.output)

    return 0


if __name__ == '__main__':
    raise SystemExit(parse())
