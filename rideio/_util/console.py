#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Prettify console output with ANSI escape codes.

"""
import sys


TEXT_DECORATIONS = {
    'header': '\033[95m',
    'green': '\033[92m',
    'warning': '\033[93m',
    'fail': '\033[91m',
    'bold': '\033[1m',
    'end': '\033[0m',
}


def decorate(text, *decorations):
    """Return a text string with ANSI escape codes pre- and appended.

    Parameters
    ----------
    text : str
        Text to be decorated.
    *decorations : str
        Keys of `TEXT_DECORATIONS`, e.g. 'warning' or 'bold'.
    """
    decors = ''.join(TEXT_DECORATIONS[d] for d in decorations)
    end = TEXT_DECORATIONS['end']
    return decors + text + end


def printd(text, *decorations, **kwargs):
    """Print decorated."""
    print(decorate(text, *decorations), **kwargs)


def report(messages, *decorations, file=None):
    """Print each message decorated, to stderr unless told otherwise.

    Decorations are only applied when writing to a terminal.
    """
    file = sys.stderr if file is None else file
    tty = getattr(file, 'isatty', lambda: False)()
    for message in messages:
        if tty and decorations:
            printd(message, *decorations, file=file)
        else:
            print(message, file=file)
