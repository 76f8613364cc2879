"""Sampling method enum."""

from enum import StrEnum


class SamplingMethod(StrEnum):
    """How patch origins are placed inside the mask region."""

    RANDOM = "random"
    UNIFORM = "uniform"
