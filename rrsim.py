"""
rrsim.py


Discrete-time simulation of a round-robin CPU scheduler with contended
I/O devices, followed by a FIFO page-replacement pass.


Objects:
- Process / ProcessState
- Device
- IOManager (random I/O requests, device admission and wait queues)
- Scheduler (ready queue)
- System (the clock and control loop)
- MemorySimulator / FIFOPageTable
- Parser for the pipe-delimited input file


Usage:
python rrsim.py input.txt [--seed N] [--quantum N] [--max-time N] [-v]


Input format (one record per line, blank lines and '#' comments skipped):
    algorithm|quantum|memory_policy|memory_size|page_size|allocation%|device_count
    name|capacity|operation_time                                  (device_count lines)
    creation|pid|execution|priority|memory|page,page,...|io_chance  (one per process)
"""


import sys
import random
import logging
import argparse
import dataclasses

from simio.parser import parse_input
from simio.report import format_report
from core.config import DEFAULT_MAX_TIME
from core.errors import SimulationError
from core.system import System


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='rrsim (round-robin scheduler, device and paging simulator)')
    parser.add_argument('input', help='Path to the pipe-delimited simulation input')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the random I/O decisions')
    parser.add_argument('--quantum', type=int, default=None, help='Override the quantum given in the input')
    parser.add_argument('--max-time', type=int, default=DEFAULT_MAX_TIME,
                        help='Abort if the clock passes this value (default %(default)s)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging of simulation events')
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(message)s', stream=sys.stderr)
    try:
        config, devices, processes = parse_input(args.input)
        if args.quantum is not None:
            config = dataclasses.replace(config, quantum=args.quantum)
        system = System(config, devices, processes, rng=random.Random(args.seed), max_time=args.max_time)
        result = system.start()
    except (SimulationError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(format_report(result))
    return 0


# ------------------------------- CLI ---------------------------------
if __name__ == '__main__':
    sys.exit(main())
