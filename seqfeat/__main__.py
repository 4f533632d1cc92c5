# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" The command line entry point for seqfeat """

import sys
from typing import List

from seqfeat import config
from seqfeat.main import run_seqfeat


def main(args: List[str]) -> int:
    """ Builds the options from the given arguments and runs seqfeat with them

        Arguments:
            args: the command line arguments, excluding the program name

        Returns:
            the exit code to use
    """
    options = config.build_config(args)
    return run_seqfeat(options)


def entrypoint() -> None:
    """ Wraps main() to exit with its return code, and exits quietly on SIGINT """
    try:
        sys.exit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        sys.exit(2)


if __name__ == '__main__':
    entrypoint()
