#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Taskflow - multi-user task tracking
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Development settings by default
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Taskflow shortcuts
    if len(sys.argv) > 1:
        command = sys.argv[1]

        # Initial setup
        if command == 'setup':
            print("🚀 Setting up Taskflow...")

            print("📊 Applying migrations...")
            execute_from_command_line([sys.argv[0], 'migrate'])

            print("📁 Collecting static files...")
            execute_from_command_line([sys.argv[0], 'collectstatic', '--noinput'])

            print("✅ Setup complete! Create an operator with: python manage.py createsuperuser")
            return

        # Expired one-time codes
        elif command == 'cleanup':
            print("🧹 Removing expired verification codes...")
            execute_from_command_line([sys.argv[0], 'purge_expired_otps'])
            return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
