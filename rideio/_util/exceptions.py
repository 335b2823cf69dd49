#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exceptions for this package.

"""


class RideIOError(Exception):
    """Base exception."""
    _default_message = ''

    def __init__(self, message=None):
        super().__init__(message if message else self._default_message)


class FormatError(RideIOError):
    """The file can't be decoded; nothing should be kept from it."""
    _default_message = 'malformed file'


class InvalidFileError(FormatError):
    def __init__(self, fmt):
        determiner = 'an' if fmt[0] in ('aeiou' + 's') else 'a'  # grammar
        message = "this doesn't look like %s %s file!" % (determiner, fmt)
        super().__init__(message)


class UnsupportedVersionError(FormatError):
    def __init__(self, fmt, version):
        message = 'unsupported %s format version: %r' % (fmt, version)
        super().__init__(message)


class TruncatedFileError(FormatError):
    def __init__(self, wanted, got, what='data'):
        message = ('unexpected end of file reading %s '
                   '(wanted %d bytes, got %d)' % (what, wanted, got))
        super().__init__(message)


class UnknownFormatError(RideIOError):
    def __init__(self, tag):
        super().__init__('%s is not a supported file type' % tag)
