"""Initialization of builder package."""

from .base import IDX_TYPE, Coordinate, FamilyBlock
from .blocks import *
