import subprocess
import sys

from rich.console import Console
from rich.pretty import pprint

from clio import *


def show(parser):
    command = ["ifconfig"]
    if parser.has_args():
        command.append(parser.get_arg(0))
    subprocess.run(command, check=False)


def build():
    parser = ArgParser("Help!", "Version!", shell=True)
    parser.command("show", "Command!", show)
    return parser


if __name__ == '__main__':
    parser = build()
    parser.parse(sys.argv)
    if not parser.has_cmd():
        Console(stderr=True).print("Missing cmd", soft_wrap=True)
        sys.exit(1)
    pprint(parser)
