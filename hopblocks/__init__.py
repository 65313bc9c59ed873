"""Initialization of HopBlocks package."""
from .builder import *
from .utils import Timer, TestHelper, print_banner_line
