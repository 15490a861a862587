#!/usr/bin/env python
"""
Command-line entry point for the hospital records API.

Defaults ``DJANGO_SETTINGS_MODULE`` to ``hospital_admin.settings``;
besides the stock commands it exposes ``seed_demo`` for local data.
"""
import os
import sys


def main() -> None:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hospital_admin.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Is it installed (pip install -e .) and is "
            "the virtual environment active?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
