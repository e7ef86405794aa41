# Pipe-delimited simulation input parser
import re
from typing import List, Tuple

from core.config import SimulationConfig
from core.device import Device
from core.errors import ConfigurationError
from core.process import Process


def _int(token: str, what: str, lineno: int) -> int:
    try:
        return int(token.strip())
    except ValueError:
        raise ConfigurationError(f"line {lineno}: {what} must be an integer, got {token!r}") from None


def _float(token: str, what: str, lineno: int) -> float:
    try:
        return float(token.strip())
    except ValueError:
        raise ConfigurationError(f"line {lineno}: {what} must be a number, got {token!r}") from None


def parse_config_line(line: str, lineno: int = 1) -> SimulationConfig:
    # algorithm|quantum|policy|memory_size|page_size|allocation%|device_count
    parts = line.split('|')
    if len(parts) != 7:
        raise ConfigurationError(f"line {lineno}: expected 7 configuration fields, got {len(parts)}")
    return SimulationConfig(
        algorithm=parts[0].strip(),
        quantum=_int(parts[1], 'quantum', lineno),
        memory_policy=parts[2].strip(),
        memory_size=_int(parts[3], 'memory size', lineno),
        page_size=_int(parts[4], 'page size', lineno),
        allocation_percentage=_float(parts[5], 'allocation percentage', lineno),
        device_count=_int(parts[6], 'device count', lineno),
    )


def parse_device_line(line: str, lineno: int) -> Device:
    # name|capacity|operation_time
    parts = line.split('|')
    if len(parts) != 3:
        raise ConfigurationError(f"line {lineno}: expected 3 device fields, got {len(parts)}")
    return Device(parts[0].strip(),
                  _int(parts[1], 'device capacity', lineno),
                  _int(parts[2], 'device operation time', lineno))


def parse_page_sequence(token: str, lineno: int) -> List[int]:
    return [_int(page, 'page', lineno) for page in re.split(r'[,\s]+', token.strip()) if page]


def parse_process_line(line: str, lineno: int) -> Process:
    # creation|pid|execution|priority|memory|pages|io_chance (io_chance optional)
    parts = line.split('|')
    if len(parts) not in (6, 7):
        raise ConfigurationError(f"line {lineno}: expected 6 or 7 process fields, got {len(parts)}")
    io_chance = _int(parts[6], 'io chance', lineno) if len(parts) == 7 and parts[6].strip() else 0
    return Process(
        pid=_int(parts[1], 'pid', lineno),
        creation_time=_int(parts[0], 'creation time', lineno),
        execution_time=_int(parts[2], 'execution time', lineno),
        priority=_int(parts[3], 'priority', lineno),
        memory_needed=_int(parts[4], 'memory needed', lineno),
        page_sequence=parse_page_sequence(parts[5], lineno),
        io_chance=io_chance,
    )


def parse_lines(lines) -> Tuple[SimulationConfig, List[Device], List[Process]]:
    config = None
    devices: List[Device] = []
    processes: List[Process] = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        if config is None:
            config = parse_config_line(line, lineno)
        elif len(devices) < config.device_count:
            devices.append(parse_device_line(line, lineno))
        else:
            processes.append(parse_process_line(line, lineno))
    if config is None:
        raise ConfigurationError("input has no configuration line")
    if len(devices) < config.device_count:
        raise ConfigurationError(f"{config.device_count} devices declared but only {len(devices)} listed")
    return config, devices, processes


def parse_input(path: str) -> Tuple[SimulationConfig, List[Device], List[Process]]:
    with open(path, 'r') as fh:
        return parse_lines(fh)
