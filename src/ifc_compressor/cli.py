"""CLI entry point for the IFC compressor.

Usage:
    ifc-compressor compress model.ifc             # Print the summary table
    ifc-compressor suggest model.ifc              # Show material replacement proposals
    ifc-compressor rewrite model.ifc -r map.json  # Write approved names into the IFC
    ifc-compressor run                            # Run the configured pipeline
    ifc-compressor run-step parse_ifc             # Run single step
    ifc-compressor info                           # Show pipeline info
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ifc_compressor.core.logging import setup_logging

app = typer.Typer(name="ifc-compressor", help="IFC material compression and extraction")
console = Console()

DEFAULT_CONFIG = Path("configs/pipeline.yaml")
DEFAULT_DATABASE = Path("OBD.csv")


def _require_file(path: Path, what: str) -> None:
    if not path.is_file():
        console.print(f"[red]{what} not found: {path}[/red]")
        raise typer.Exit(1)


@app.command()
def compress(
    ifc_file: Path = typer.Argument(..., help="IFC STEP file or compact JSON model"),
    replacements: Path = typer.Option(None, "--replacements", "-r", help="Reviewed replacement map (JSON)"),
    database: Path = typer.Option(DEFAULT_DATABASE, "--database", "-d", help="Reference material CSV"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the table here instead of stdout"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Compress an IFC model into the material summary table."""
    setup_logging(log_level, stream=sys.stderr)
    from ifc_compressor.api import compress_ifc
    from ifc_compressor.utils.io import load_replacement_map
    from ifc_compressor.utils.materials_db import load_database

    _require_file(ifc_file, "IFC file")
    replacement_map = None
    if replacements is not None:
        _require_file(replacements, "Replacement map")
        replacement_map = load_replacement_map(replacements)

    content = ifc_file.read_text(encoding="utf-8", errors="replace")
    table = compress_ifc(content, replacement_map, load_database(database))

    if output is None:
        typer.echo(table)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(table, encoding="utf-8")
        console.print(f"[green]Saved table:[/green] {output}")


@app.command()
def suggest(
    ifc_file: Path = typer.Argument(..., help="IFC STEP file or compact JSON model"),
    database: Path = typer.Option(DEFAULT_DATABASE, "--database", "-d", help="Reference material CSV"),
    as_json: bool = typer.Option(False, "--json", help="Print proposals as JSON"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Show database replacement proposals for the model's materials."""
    setup_logging(log_level, stream=sys.stderr)
    from ifc_compressor.api import propose_material_replacements
    from ifc_compressor.utils.materials_db import load_database

    _require_file(ifc_file, "IFC file")
    content = ifc_file.read_text(encoding="utf-8", errors="replace")
    proposals = propose_material_replacements(content, load_database(database))

    if as_json:
        typer.echo(json.dumps([p.model_dump() for p in proposals], indent=2, ensure_ascii=False))
        return

    table = Table(title=f"Material proposals: {ifc_file.name}")
    table.add_column("Original", style="cyan")
    table.add_column("Proposal", style="green")
    table.add_column("GWP/m3", style="yellow", justify="right")
    table.add_column("Price/m3", style="yellow", justify="right")
    table.add_column("Alternatives", style="dim")

    for p in proposals:
        entry = p.original_entry
        table.add_row(
            p.original,
            p.replacement or "-",
            f"{entry.gwp_value:g}" if entry else "-",
            f"{entry.price_per_m3:g}" if entry else "-",
            ", ".join(s for s in p.suggestions if s != p.replacement) or "-",
        )
    console.print(table)


@app.command()
def rewrite(
    ifc_file: Path = typer.Argument(..., help="IFC STEP file"),
    replacements: Path = typer.Option(..., "--replacements", "-r", help="Reviewed replacement map (JSON)"),
    output: Path = typer.Option(None, "--output", "-o", help="Output IFC path"),
) -> None:
    """Write approved material names back into the IFC file."""
    setup_logging()
    from ifc_compressor.steps.s04_rewrite_materials._name_rewriter import apply_replacements
    from ifc_compressor.utils.io import load_replacement_map

    _require_file(ifc_file, "IFC file")
    _require_file(replacements, "Replacement map")

    with open(ifc_file, encoding="utf-8", errors="surrogateescape", newline="") as f:
        content = f.read()
    new_content, count = apply_replacements(content, load_replacement_map(replacements))

    output = output or ifc_file.with_name(f"{ifc_file.stem}_rewritten{ifc_file.suffix}")
    with open(output, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write(new_content)
    console.print(f"[green]Rewrote {count} material names:[/green] {output}")


@app.command()
def run(
    config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path"),
    ifc_path: Path = typer.Option(None, "--ifc", help="Override the pipeline's ifc_path input"),
) -> None:
    """Run the full pipeline."""
    setup_logging()
    from ifc_compressor.core.pipeline_runner import run_pipeline

    overrides = {"ifc_path": ifc_path} if ifc_path is not None else None
    results = run_pipeline(config, overrides)
    for name, output in results.items():
        console.print(f"[green]{name}:[/green] {output.model_dump_json()}")


@app.command()
def run_step(
    step_name: str = typer.Argument(..., help="Step name (e.g. parse_ifc)"),
    config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path"),
    input_json: str = typer.Option(None, "--input", "-i", help="Input as JSON string"),
) -> None:
    """Run a single pipeline step."""
    setup_logging()
    from ifc_compressor.core.pipeline_runner import load_pipeline_config, import_step_class, load_step_config

    pipeline_cfg = load_pipeline_config(config)
    entry = next((s for s in pipeline_cfg.steps if s.name == step_name), None)
    if entry is None:
        console.print(f"[red]Step '{step_name}' not found in pipeline config[/red]")
        raise typer.Exit(1)

    step_cls = import_step_class(entry.module)
    step_config = load_step_config(Path(entry.config_file), step_cls.config_type)
    step_instance = step_cls(config=step_config, data_root=pipeline_cfg.data_root)

    input_data = dict(pipeline_cfg.inputs)
    if input_json:
        input_data.update(json.loads(input_json))

    required = step_cls.input_type.model_json_schema().get("required", [])
    missing = [field for field in required if field not in input_data]
    if missing:
        console.print(f"[yellow]Step '{step_name}' requires input fields: {missing}[/yellow]")
        console.print("[yellow]Use --input/-i with JSON string, e.g.:[/yellow]")
        console.print(f'  ifc-compressor run-step {step_name} -i \'{{"{missing[0]}": "value"}}\'')
        raise typer.Exit(1)

    console.print(f"[green]Running step: {step_name}[/green]")
    step_input = step_cls.input_type(**input_data)
    try:
        output = step_instance.execute(step_input)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Done. Output:[/green] {output.model_dump_json(indent=2)}")


@app.command()
def info(config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path")) -> None:
    """Show pipeline steps and their status."""
    from ifc_compressor.core.pipeline_runner import load_pipeline_config

    pipeline_cfg = load_pipeline_config(config)
    table = Table(title=f"Pipeline: {pipeline_cfg.project_name}")
    table.add_column("#", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Module", style="green")
    table.add_column("Enabled", style="yellow")
    table.add_column("Depends On", style="dim")

    for i, step in enumerate(pipeline_cfg.steps, 1):
        table.add_row(
            str(i),
            step.name,
            step.module,
            "Y" if step.enabled else "N",
            ", ".join(step.depends_on) if step.depends_on else "-",
        )
    console.print(table)


if __name__ == "__main__":
    app()
