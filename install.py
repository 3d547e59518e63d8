# !/usr/bin/env python3
# filename: install.py
# -*- coding: utf-8 -*-
"""
Entry point for the AVD golden image installer.
"""

import sys

from avd_installer.cli import main

if __name__ == "__main__":
    sys.exit(main())
