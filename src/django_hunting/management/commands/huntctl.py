"""Django management command for huntctl."""

import sys

from django.core.management.base import BaseCommand

from django_hunting.cli import cli


class Command(BaseCommand):
    help = "Hunting ground operator commands (auto-close visits, occupancy)"

    def add_arguments(self, parser):
        parser.add_argument("cli_args", nargs="*", metavar="args")

    def handle(self, *args, **options):
        cli_args = list(options.get("cli_args", []))
        if not cli_args:
            cli_args = ["--help"]
        try:
            cli(args=cli_args, prog_name="huntctl", standalone_mode=True)
        except SystemExit as e:
            if e.code != 0:
                sys.exit(e.code)
