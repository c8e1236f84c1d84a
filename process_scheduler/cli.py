from __future__ import annotations

import argparse
import logging
import shlex
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS
from .config import DEFAULT_LOG_LEVEL, DEFAULT_QUANTUM, SimulationOptions
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .log import configure_logging
from .metrics import summarize_process_metrics
from .models import Algorithm, Process, ScheduleResult
from .session import SchedulerSession
from .workload_io import load_workload

logger = logging.getLogger(__name__)

ALGORITHM_NAMES = [alg.value for alg in ALGORITHMS]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="process-scheduler",
        description="CPU scheduling simulator (FCFS, Round Robin, SJF, Priority).",
    )
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help=f"Logging verbosity on stderr (default: {DEFAULT_LOG_LEVEL}).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHM_NAMES)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (ignored by the others, default: {DEFAULT_QUANTUM}).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHM_NAMES),
        help=f"Algorithms to compare (default: {' '.join(ALGORITHM_NAMES)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    shell_parser = subparsers.add_parser(
        "shell",
        help="Interactive session: add and remove processes, then run a simulation.",
    )
    shell_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Optional workload file to preload into the session.",
    )
    shell_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Initial quantum for RR (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def _process_table(processes: Sequence[Process], title: str) -> Table:
    headers = [
        "ID",
        "Arrive",
        "Burst",
        "Priority",
        "State",
        "Start",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    table = Table(title=title, box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"ID", "Priority", "State"} else "right"
        table.add_column(h, justify=justify)

    def cell(value: Optional[int]) -> str:
        return "" if value is None else str(value)

    for p in processes:
        table.add_row(
            str(p.pid),
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            p.state.value,
            cell(p.start_time),
            cell(p.completion_time),
            cell(p.turnaround_time),
            cell(p.waiting_time),
            cell(p.response_time),
        )
    return table


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm.label}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()
    console.print(_process_table(result.processes, "Per-process metrics"))
    console.print()

    summary = summarize_process_metrics(result.processes)
    if result.system:
        sys = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
        sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
        sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")
        sys_table.add_row("Starvation count", str(sys.starvation_count))

        console.print(sys_table)


def _run_compare(processes: List[Process], algorithms: Sequence[str], quantum: int, console: Console) -> None:
    """
    Run each algorithm on its own session over the same workload and print
    the averages side by side.
    """
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for name in algorithms:
        session = SchedulerSession(options=SimulationOptions(quantum=quantum))
        session.add_processes(processes)
        annotated = session.run_simulation(name)
        result = session.last_result
        summary = summarize_process_metrics(annotated)
        summary_table.add_row(
            result.algorithm.label,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
        )

    console.print(summary_table)


class InteractiveShell:
    """
    Line-oriented stand-in for the data-entry form: each line is one command.
    Errors are printed inline and never end the session.
    """

    HELP = (
        "Commands:\n"
        "  add ID ARRIVAL BURST [PRIORITY]   register a process\n"
        "  remove ID                         drop a process\n"
        "  list                              show registered processes\n"
        "  load FILE                         add processes from a JSON/CSV workload\n"
        "  algorithm NAME                    select fcfs, rr, sjf or priority\n"
        "  quantum N                         set the round-robin quantum\n"
        "  run [NAME]                        run the simulation\n"
        "  clear                             remove every process\n"
        "  help                              show this text\n"
        "  quit                              leave the shell"
    )

    def __init__(self, session: SchedulerSession, console: Console) -> None:
        self.session = session
        self.console = console
        self.algorithm = Algorithm.FCFS
        self._commands: Dict[str, Callable[[List[str]], None]] = {
            "add": self._add,
            "remove": self._remove,
            "rm": self._remove,
            "list": self._list,
            "ls": self._list,
            "load": self._load,
            "algorithm": self._algorithm,
            "algo": self._algorithm,
            "quantum": self._quantum,
            "run": self._run,
            "clear": self._clear,
            "help": self._help,
        }

    def execute(self, line: str) -> bool:
        """
        Run one command line. Returns False once the user asks to quit.
        """
        try:
            words = shlex.split(line)
        except ValueError as exc:
            self.console.print(f"[red]Error: {escape(str(exc))}[/red]")
            return True
        if not words:
            return True

        name, args = words[0].lower(), words[1:]
        if name in {"q", "quit", "exit"}:
            return False

        handler = self._commands.get(name)
        if handler is None:
            self.console.print(f"[red]Unknown command: {escape(name)}[/red] (try 'help')")
            return True

        try:
            handler(args)
        except (SchedulerError, OSError) as exc:
            logger.debug("Command %r failed: %s", line, exc)
            self.console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return True

    def loop(self, read: Callable[[str], str] = input) -> None:
        self.console.print("[bold cyan]Process Scheduler[/bold cyan] [dim](help for commands, quit to leave)[/dim]")
        while True:
            try:
                line = read(f"[{self.algorithm.value}] > ")
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                return
            if not self.execute(line):
                return

    def _usage(self, text: str) -> None:
        self.console.print(f"[yellow]Usage: {text}[/yellow]")

    def _add(self, args: List[str]) -> None:
        if len(args) not in (3, 4):
            self._usage("add ID ARRIVAL BURST [PRIORITY]")
            return
        process = self.session.add_process(*args)
        self.console.print(f"[green]Added process {process.pid}[/green]")

    def _remove(self, args: List[str]) -> None:
        if len(args) != 1:
            self._usage("remove ID")
            return
        if self.session.remove_process(args[0]):
            self.console.print(f"Removed process {escape(args[0])}")
        else:
            self.console.print(f"[yellow]No process with id {escape(args[0])}[/yellow]")

    def _list(self, args: List[str]) -> None:
        processes = self.session.list_processes()
        if not processes:
            self.console.print("No processes added yet")
            return
        self.console.print(_process_table(processes, "Processes"))

    def _load(self, args: List[str]) -> None:
        if len(args) != 1:
            self._usage("load FILE")
            return
        added = self.session.add_processes(load_workload(Path(args[0])))
        self.console.print(f"[green]Loaded {len(added)} processes from {args[0]}[/green]")

    def _algorithm(self, args: List[str]) -> None:
        if len(args) != 1:
            self._usage(f"algorithm {{{','.join(ALGORITHM_NAMES)}}}")
            return
        self.algorithm = Algorithm.parse(args[0])
        self.console.print(f"Algorithm set to {self.algorithm.label}")

    def _quantum(self, args: List[str]) -> None:
        if len(args) != 1:
            self._usage("quantum N")
            return
        try:
            quantum = int(args[0])
        except ValueError:
            self.console.print(f"[red]Invalid quantum: {args[0]}[/red]")
            return
        self.session.options = SimulationOptions(quantum=quantum)
        self.console.print(f"Quantum set to {quantum}")

    def _run(self, args: List[str]) -> None:
        if args:
            self.algorithm = Algorithm.parse(args[0])
        self.session.run_simulation(self.algorithm)
        _print_result(self.session.last_result, self.console)

    def _clear(self, args: List[str]) -> None:
        self.session.registry.clear()
        self.console.print("Cleared all processes")

    def _help(self, args: List[str]) -> None:
        self.console.print(self.HELP, markup=False)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    console = Console()

    try:
        if args.command == "run":
            session = SchedulerSession(options=SimulationOptions(quantum=args.quantum))
            session.add_processes(load_workload(Path(args.workload)))
            session.run_simulation(args.algorithm)
            _print_result(session.last_result, console)
            return 0

        if args.command == "compare":
            processes = load_workload(Path(args.workload))
            _run_compare(processes, args.algorithms, args.quantum, console)
            return 0

        if args.command == "shell":
            session = SchedulerSession(options=SimulationOptions(quantum=args.quantum))
            shell = InteractiveShell(session, console)
            if args.workload:
                shell.execute(shlex.join(["load", args.workload]))
            shell.loop()
            return 0
    except (SchedulerError, OSError) as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
