"""Command-line entry point: ``chip8vm ROM``."""

import logging
import os
import sys
from typing import List, Optional

from .errors import Chip8Error
from .vm import Chip8VM, read_program

logger = logging.getLogger("chip8vm")

LOG_LEVEL_ENV = "CHIP8VM_LOG_LEVEL"


def configure_logging() -> int:
    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return level


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    if argv is None:
        argv = sys.argv[1:]

    configure_logging()

    if len(argv) != 1:
        print("usage: chip8vm ROM", file=sys.stderr)
        return 2

    try:
        program = read_program(argv[0])
    except Chip8Error as e:
        logger.error("%s", e.describe())
        return 1

    # pygame is only needed once there is something to run
    from .frontend import Emulator, PygameDisplay

    display = PygameDisplay(title=f"CHIP-8 - {os.path.basename(argv[0])}")
    vm = Chip8VM(display)
    try:
        vm.load(program)
        Emulator(vm, display).run()
    except Chip8Error as e:
        logger.error("%s", e.describe())
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
