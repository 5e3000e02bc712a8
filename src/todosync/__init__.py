# SPDX-License-Identifier: MIT

from todosync.cleanup import register_cleanup
from todosync.initialize import initialize
from todosync.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
