#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Unit-aware column types for decoded ride channels.

Each class wraps a `pandas.Series` and records the channel's base unit.
Alternative constructors (``_from_*``) convert from the units a ride file
stores into that base unit.

"""
from pandas import Series


REGISTRY = {}    # grows at import-time via the below metaclass


class SpecialRegistrar(type):
    def __init__(cls, name, bases, namespace):
        if getattr(cls, 'colname', None) is not None:
            REGISTRY[cls.colname] = cls
        super().__init__(name, bases, namespace)


class series_property:
    """A simple descriptor that emulates property, but returns a Series."""
    def __init__(self, fget):
        self.fget = fget
        self.__doc__ = fget.__doc__

    def __get__(self, obj, objtype=None):
        return Series(self.fget(obj))


class SpecialColumn(Series, metaclass=SpecialRegistrar):
    _metadata = ['colname', 'base_unit']

    colname = None
    base_unit = None

    def __init__(self, data, *args, **kwargs):
        super().__init__(data, *args, **kwargs)
        self.name = type(self).colname     # use *class* attribute

    @property
    def _constructor(self):
        return self.__class__

    def __finalize__(self, other, method=None, **kwargs):
        """Propagate metadata from other to self."""
        for name in self._metadata:
            value = getattr(other, name, None)
            if value is not None:   # else keep the class attribute
                object.__setattr__(self, name, value)
        return self


# ----------------------------------------------------------
# NOTE: subclasses should follow the structure...
#   + classmethods (i.e. alternative constructors; private!)
#   + properties
# ----------------------------------------------------------


class Altitude(SpecialColumn):
    colname = 'alt'
    base_unit = 'm'


class Cadence(SpecialColumn):
    colname = 'cad'
    base_unit = 'rpm'


class Distance(SpecialColumn):
    colname = 'dist'
    base_unit = 'm'

    @classmethod
    def _from_km(cls, data, *args, **kwargs):
        return cls(data * 1000, *args, **kwargs)

    @series_property
    def km(self):
        """ metres --> kilometres """
        return self / 1000


class HeartRate(SpecialColumn):
    colname = 'hr'
    base_unit = 'bpm'


class IntervalCounter(SpecialColumn):
    colname = 'interval'
    base_unit = '#'


class Power(SpecialColumn):
    colname = 'pwr'
    base_unit = 'watts'


class Speed(SpecialColumn):
    colname = 'speed'
    base_unit = 'm/s'

    @classmethod
    def _from_kph(cls, data, *args, **kwargs):
        return cls(data / 60**2 * 1000, *args, **kwargs)

    @series_property
    def kph(self):
        """ metres/second --> kilometres/hour """
        return self * 60**2 / 1000


class Torque(SpecialColumn):
    colname = 'torque'
    base_unit = 'N.m'
