# Plain-text report of a finished simulation
from typing import List

from core.system import SimulationResult


def format_process_table(result: SimulationResult) -> List[str]:
    header = f"{'PID':<6}{'Start':>8}{'Finish':>8}{'Turnaround':>12}{'Waiting':>9}{'Ready':>8}{'Blocked':>9}{'IO':>6}"
    lines = [header, '-' * len(header)]
    for p in sorted(result.processes, key=lambda p: p.pid):
        lines.append(f"{p.pid:<6}{p.start_time:>8}{p.finish_time:>8}{p.turnaround_time:>12}"
                     f"{p.waiting_time:>9}{p.ready_time:>8}{p.blocked_time:>9}{p.total_io_time:>6}")
    return lines


def format_devices(result: SimulationResult) -> List[str]:
    if not result.devices:
        return ["(no devices)"]
    lines = []
    for d in result.devices:
        lines.append(f"{d.name}: capacity={d.capacity} op_time={d.operation_time} "
                     f"completed={d.completed} busy={d.busy_time}")
    return lines


def format_memory(result: SimulationResult) -> List[str]:
    mem = result.memory
    if mem is None:
        return []
    lines = [f"policy {mem.policy}"]
    if mem.policy == 'local':
        for pid in sorted(mem.replacements):
            lines.append(f"pid {pid}: frames={mem.frames[pid]} fifo_replacements={mem.replacements[pid]}")
    else:
        lines.append(f"frames {mem.global_frames}")
    lines.append(f"page faults {mem.total_faults}")
    lines.append(f"total fifo replacements {mem.total_replacements}")
    return lines


def format_report(result: SimulationResult) -> str:
    cfg = result.config
    lines = [
        f"algorithm {cfg.algorithm or 'RR'} quantum {cfg.quantum}",
        f"found {len(result.devices)} devices",
        f"found {len(result.processes)} processes",
        "",
        "== processes ==",
    ]
    lines.extend(format_process_table(result))
    lines.append(f"average turnaround {result.average_turnaround:.2f}")
    lines.append(f"average waiting {result.average_waiting:.2f}")
    lines.append(f"cpu busy {result.cpu_busy_time} of {result.final_time} ({result.cpu_utilisation:.1f}%)")
    lines.extend(["", "== devices =="])
    lines.extend(format_devices(result))
    lines.extend(["", "== memory =="])
    lines.extend(format_memory(result))
    lines.append("")
    lines.append(f"measurements {result.final_time} {int(result.cpu_utilisation)}")
    return "\n".join(lines)
