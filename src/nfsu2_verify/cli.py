import json
import sys
from pathlib import Path
import click
from nfsu2_core.errors import SaveError
from nfsu2_edit.record import SaveRecord
from nfsu2_edit.report import slot_table, write_slot_table
from .logic import verify_save

@click.group()
def main():
    pass

@main.command("save")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
def save_cmd(path: Path):
    result = verify_save(path)
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    if result["status"] != "PASS":
        sys.exit(1)

@main.command("slots")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), help="Write the table as parquet")
def slots_cmd(path: Path, out: Path | None):
    try:
        df = slot_table(SaveRecord.load(path))
    except SaveError as e:
        click.echo(f"FATAL: {e}")
        raise SystemExit(1)
    click.echo(df.to_string(index=False))
    if out is not None:
        write_slot_table(df, out)
        click.echo(f"PASS: Slot table written to {out}")

if __name__ == "__main__":
    main()
