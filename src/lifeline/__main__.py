"""Entry point: python -m lifeline <command>

- birth YYYY-MM-DD     Set the birth date
- stats                Weeks lived / remaining
- timeline [PERIOD]    Years, the months of YYYY, or the calendar of YYYY-MM
- show YYYY-MM-DD      Print the memory for a day
- add YYYY-MM-DD TITLE Save a memory (empty title deletes)
- export YYYY-MM-DD    Write the memory as markdown into the export dir
- import PATH          Save a memory from an exported markdown file
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from lifeline.config import LifelineConfig, load_config
from lifeline.journal import Journal
from lifeline.memory.models import EMOTIONS
from lifeline.storage import JsonFileStore
from lifeline.timeline.index import PeriodStatus
from lifeline.timeline.views import WEEKDAY_LABELS

_MARKERS = {
    PeriodStatus.HAS_MEMORY: "●",
    PeriodStatus.PAST: "·",
    PeriodStatus.CURRENT: "◉",
    PeriodStatus.FUTURE: "○",
}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _open_journal(config: LifelineConfig) -> Journal:
    journal = Journal(config, JsonFileStore(config.data_dir))
    journal.load()
    return journal


def _cmd_birth(journal: Journal, args: list[str]) -> int:
    if not args:
        print("Usage: python -m lifeline birth YYYY-MM-DD")
        return 1
    try:
        profile = journal.set_birth_date(args[0])
    except ValueError as e:
        print(f"Invalid date: {e}", file=sys.stderr)
        return 1
    print(f"Birth date set to {profile.to_iso()}")
    return 0


def _cmd_stats(journal: Journal, args: list[str]) -> int:
    stats = journal.stats()
    if stats is None:
        print("No birth date yet. Run: python -m lifeline birth YYYY-MM-DD")
        return 1
    print(f"Weeks lived:     {stats.weeks_lived:,} / {stats.total_weeks:,} ({stats.percentage_lived}%)")
    print(f"Weeks remaining: {stats.weeks_remaining:,}")
    print(f"Days lived:      {stats.days_lived:,}")
    print(f"Years lived:     {stats.years_lived}")
    print(f"Memories:        {len(journal.memories)}")
    return 0


def _cmd_timeline(journal: Journal, args: list[str]) -> int:
    if journal.profile is None:
        print("No birth date yet. Run: python -m lifeline birth YYYY-MM-DD")
        return 1
    target = args[0] if args else None
    if target is not None:
        year, _, month = target.partition("-")
        if not journal.descend(year) or (month and not journal.descend(target)):
            print(f"Invalid period: {target}", file=sys.stderr)
            return 1

    cells = journal.view()
    if journal.navigation.selected is None:
        line = [f"{c.period.year}{_MARKERS[c.status]}" for c in cells]
        for i in range(0, len(line), 10):
            print("  ".join(line[i:i + 10]))
    elif isinstance(cells, list) and cells and isinstance(cells[0], list):
        print(" ".join(f"{d:>3}" for d in WEEKDAY_LABELS))
        for row in cells:
            print(" ".join(
                "   " if cell is None else f"{cell.period.day.day:>2}{_MARKERS[cell.status]}"
                for cell in row
            ))
    else:
        for cell in cells:
            print(f"{cell.label} {_MARKERS[cell.status]} {cell.count} memories")
    return 0


def _cmd_show(journal: Journal, args: list[str]) -> int:
    if not args:
        print("Usage: python -m lifeline show YYYY-MM-DD")
        return 1
    record = journal.memories.get(args[0])
    if record is None:
        print(f"No memory for {args[0]}")
        return 1
    emotion = EMOTIONS[record.emotion]
    print(f"{record.date}  {emotion.icon} {record.title}")
    for label, value in (("Where", record.location), ("With", record.people)):
        if value:
            print(f"{label}: {value}")
    if record.description:
        print()
        print(record.description)
    if record.video is not None:
        print(f"\n[video: {record.video.container}, {record.video.size} bytes]")
    return 0


def _cmd_add(journal: Journal, args: list[str]) -> int:
    if not args:
        print("Usage: python -m lifeline add YYYY-MM-DD TITLE")
        return 1
    try:
        editor = journal.open_editor(args[0])
    except ValueError as e:
        print(f"Invalid date: {e}", file=sys.stderr)
        return 1
    editor.update(title=" ".join(args[1:]))
    stored = journal.save_editor()
    print(f"Saved {args[0]}" if stored else f"Removed {args[0]}")
    return 0


def _cmd_export(journal: Journal, args: list[str]) -> int:
    if not args:
        print("Usage: python -m lifeline export YYYY-MM-DD")
        return 1
    path = journal.export_memory(args[0])
    if path is None:
        print(f"No memory for {args[0]}")
        return 1
    print(f"Exported to {path}")
    return 0


def _cmd_import(journal: Journal, args: list[str]) -> int:
    if not args:
        print("Usage: python -m lifeline import PATH")
        return 1
    try:
        stored = journal.import_memory(Path(args[0]))
    except OSError as e:
        print(f"Cannot read {args[0]}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Invalid memory file: {e}", file=sys.stderr)
        return 1
    if stored is None:
        print(f"Nothing imported from {args[0]}: the memory has no title")
        return 1
    print(f"Imported {stored.date}")
    return 0


_COMMANDS = {
    "birth": _cmd_birth,
    "stats": _cmd_stats,
    "timeline": _cmd_timeline,
    "show": _cmd_show,
    "add": _cmd_add,
    "export": _cmd_export,
    "import": _cmd_import,
}


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "stats"
    handler = _COMMANDS.get(cmd)
    if handler is None:
        print(__doc__)
        sys.exit(1)

    config = load_config()
    _setup_logging(config.log_level)
    journal = _open_journal(config)
    try:
        code = handler(journal, sys.argv[2:])
    finally:
        journal.shutdown()
    sys.exit(code)


if __name__ == "__main__":
    main()
