#!/usr/bin/env python

from .groups import root
from . import commands

if __name__ == "__main__":
    root()
