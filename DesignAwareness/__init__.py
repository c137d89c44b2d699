"""
Design Awareness interchange package.

Validates, normalizes and (de)serializes design-process tracking documents:
design models, realtime and async projects, sessions, entries and notes.
"""
import logging

# Applications using this package should configure their own logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())

VERSION = "1.0.0"
