# avd_installer/__init__.py
# -*- coding: utf-8 -*-
"""
Provisioning for Azure Virtual Desktop golden images.

Downloads and silently installs the line-of-business applications, agents
and runtimes the session hosts need, then applies the operating system
changes that prepare the image for capture.
"""

__version__ = "2.3.0"
