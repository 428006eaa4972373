"""Utility functions and classes for sqltrace."""

from sqltrace.utils import logging

__all__ = ("logging",)
