"""
This package contains scripts for the application.

The workflows are exposed here so they can be called from a unified CLI.
"""

from . import echo_demo, listen, send_message

__all__ = ["echo_demo", "listen", "send_message"]
