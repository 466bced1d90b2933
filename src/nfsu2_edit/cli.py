"""NFSU2 Save Editor - interactive money and car performance editor."""
from __future__ import annotations

import os
from pathlib import Path

import click

from nfsu2_core.errors import CorruptDataError, FormatError, SaveIOError
from nfsu2_core.protocol import MONEY_MAX, MONEY_MIN, NUM_CAR_SLOTS, Performance
from nfsu2_edit.backup import backup, backup_path
from nfsu2_edit.record import SaveRecord

PROGRAM_NAME = "NFSU2SaveE"
MAJOR_VERSION = 1
MINOR_VERSION = 0
VERSION = f"{MAJOR_VERSION}.{MINOR_VERSION}"

# Exit codes; 2 is click's own usage error code
EXIT_OK = 0
EXIT_USAGE = 2
EXIT_UNREADABLE = 3
EXIT_INVALID = 4
EXIT_CORRUPT = 5

NO_CHANGE = -1

OPTION_PERFORMANCE = {
    0: Performance.NILL,
    1: Performance.MAX,
}


def money_from_input(value: int) -> int | None:
    """Money to store for a prompt answer, or None to leave it unchanged."""
    if value == NO_CHANGE or value <= 0:
        return None
    return value


def performance_from_input(option: int) -> Performance | None:
    return OPTION_PERFORMANCE.get(option)


def edit_interactively(save: SaveRecord) -> None:
    # IntRange keeps the answer inside the signed 32-bit money field;
    # click re-prompts on anything it cannot convert.
    new_money = click.prompt(
        "New Money(-1 to not change)",
        type=click.IntRange(MONEY_MIN, MONEY_MAX),
    )
    click.echo()

    money = money_from_input(new_money)
    if money is not None:
        save.set_money(money)

    used = [i for i in range(NUM_CAR_SLOTS) if save.slot_used(i)]
    for car, index in enumerate(used, start=1):
        option = click.prompt(
            f"Change performance of car {car}? (0 Nill, 1 Max, 2 No effect)",
            type=int,
        )
        mode = performance_from_input(option)
        if mode is not None:
            save.change_car_performance(index, mode)


def edit_save(savefile: Path, do_backup: bool) -> bool:
    """Run one editing session. Returns True if the changes were written."""
    if do_backup:
        dst = backup_path(savefile)
        backup(savefile, dst)
        click.echo(f"Backup written to {dst}")

    with SaveRecord.load(savefile) as save:
        click.echo(save.summary())
        edit_interactively(save)

    if save.saved:
        click.echo("Changes saved...")
    return bool(save.saved)


@click.command()
@click.argument("savefile", type=click.Path(dir_okay=False, path_type=Path))
@click.option("-b", "--backup", "do_backup", is_flag=True, help="Copy SAVEFILE to SAVEFILE.bak before editing")
@click.version_option(VERSION, prog_name=PROGRAM_NAME)
def main(savefile: Path, do_backup: bool) -> None:
    """Edit money and car performance in an NFSU2 save file."""
    if not savefile.is_file() or not os.access(savefile, os.R_OK):
        click.echo(f'FATAL: File "{savefile}" cannot be opened for reading')
        raise SystemExit(EXIT_UNREADABLE)

    try:
        edit_save(savefile, do_backup)
    except SaveIOError as e:
        click.echo(f"FATAL: {e}")
        raise SystemExit(EXIT_UNREADABLE)
    except FormatError as e:
        click.echo(f"FATAL: {e}")
        raise SystemExit(EXIT_INVALID)
    except CorruptDataError as e:
        click.echo(f"FATAL: {e}")
        raise SystemExit(EXIT_CORRUPT)


if __name__ == "__main__":
    main()
