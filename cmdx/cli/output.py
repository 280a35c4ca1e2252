import json as json_lib

import typer


def out_json(data) -> str:
    return json_lib.dumps(data, indent=2)


def format_commands(rows: list[dict]) -> list[str]:
    if not rows:
        return []
    width = max(len(row["alias"]) for row in rows)
    lines = []
    for row in rows:
        flags = []
        if row["shadowed"]:
            flags.append("shadowed")
        if not row["exists"]:
            flags.append("missing")
        suffix = f"  ({', '.join(flags)})" if flags else ""
        lines.append(f"{row['alias']:<{width}}  {row['scope']:<6}  {row['description']}{suffix}".rstrip())
    return lines


def echo_commands(rows: list[dict], json_output: bool = False) -> None:
    if json_output:
        typer.echo(out_json(rows))
        return
    if not rows:
        typer.echo("No commands registered. Add one with: cmdx add <alias>")
        return
    for line in format_commands(rows):
        typer.echo(line)
