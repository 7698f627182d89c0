#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
League Archive Core Package
Exports the copy engine, value model and table registry for clean imports
"""

from core.errors import CopyError, SourceError, SinkError, UnsupportedValueError
from core.octal_decoder import decode_bytes
from core.values import SourceValue, ValueKind, adapt_value, adapt_row
from core.tables import TableDescriptor, TABLES, get_table
from core.archiver import Archiver

__version__ = "1.0.0"

__all__ = [
    'Archiver',
    'CopyError',
    'SinkError',
    'SourceError',
    'SourceValue',
    'TABLES',
    'TableDescriptor',
    'UnsupportedValueError',
    'ValueKind',
    'adapt_row',
    'adapt_value',
    'decode_bytes',
    'get_table',
]
