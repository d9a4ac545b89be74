"""Observation store layer.

This package is the single owner of the record table, the latest index
and the count index.  Nothing outside it writes to them.
"""
