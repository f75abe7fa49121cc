# src/readqc/errors.py
from __future__ import annotations


class ReadQCError(Exception):
    """Base class for errors that abort a whole run."""

    exit_code = 1


class ConfigError(ReadQCError):
    """Invalid or incomplete run configuration; raised before DISCOVER or during it."""

    exit_code = 2


class NoInputError(ConfigError):
    """Directory scan found no usable input at all."""


class FatalAdapterMissing(ReadQCError):
    """A required external tool (FastQC, Trimmomatic) cannot be located."""

    exit_code = 3
