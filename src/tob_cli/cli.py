"""Command-line interface for Transform On Build (tob)."""

import sys
import click
from pathlib import Path

from tob_cli.version import get_version
from tob_cli.config import (
    get_config, update_config, parse_config_value,
    get_default_project_file, get_default_verbose
)
from tob_cli.core.errors import TransformError
from tob_cli.core.orchestrator import TransformOrchestrator, backup_path_for, create_run_context
from tob_cli.core.properties import PropertyResolver
from tob_cli.core.rewriter import DirectiveRewriter, detect_encoding
from tob_cli.core.tool_locator import TOOL_PATH_PROPERTY, candidate_tool_paths
from tob_cli.models.project import YamlProjectModel, is_template_item
from tob_cli.output.log_sink import ConsoleLogSink
from tob_cli.output.transform_formatters import TransformRunFormatter
from tob_cli.utils.console import (
    _rich_success, _rich_error, _rich_info, _rich_warning, _rich_echo,
    _rich_panel, _create_templates_table, _get_console
)


def print_version(ctx, param, value):
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"Transform On Build (tob) version {get_version()}")
    ctx.exit()


def _parse_properties(pairs):
    """Parse repeated ``Name=Value`` options into a dict.

    Raises:
        click.BadParameter: If a pair has no ``=`` or an empty name
    """
    properties = {}
    for pair in pairs:
        if '=' not in pair:
            raise click.BadParameter(f"'{pair}' is not in Name=Value format", param_hint="--property")
        name, value = pair.split('=', 1)
        if not name.strip():
            raise click.BadParameter(f"'{pair}' has an empty property name", param_hint="--property")
        properties[name.strip()] = value
    return properties


def _resolve_project_path(project):
    return Path(project or get_default_project_file())


def _load_run_context(project, property_pairs, tool_path=None):
    """Load the project file and snapshot the run context."""
    model = YamlProjectModel.from_file(_resolve_project_path(project))
    overrides = _parse_properties(property_pairs)
    if tool_path:
        overrides[TOOL_PATH_PROPERTY] = tool_path
    return model, create_run_context(model, overrides)


def _display_path(path):
    """Show paths below the working directory relative to it."""
    try:
        return str(Path(path).relative_to(Path.cwd()))
    except ValueError:
        return str(path)


def _print_lines(lines):
    for line in lines:
        click.echo(line)


project_option = click.option(
    '--project', '-P', type=click.Path(dir_okay=False),
    help="Project file listing properties and items (default: tob.yml)"
)
property_option = click.option(
    '--property', '-p', 'properties', multiple=True,
    help="Property override in format Name=Value (repeatable)"
)


@click.group(help="Transform On Build: run text templates through TextTransform at build time")
@click.option('--version', is_flag=True, callback=print_version,
              expose_value=False, is_eager=True, help="Show version and exit.")
@click.pass_context
def cli(ctx):
    """Main entry point for the tob CLI."""
    ctx.ensure_object(dict)


@cli.command(help="Transform every template marked for generation, then restore it")
@project_option
@property_option
@click.option('--tool-path', help="Explicit path to TextTransform.exe (sets TextTransformPath)")
@click.option('--verbose', '-v', is_flag=True, help="Show the transform tool's standard output")
@click.option('--no-color', is_flag=True, help="Disable colored output")
@click.pass_context
def run(ctx, project, properties, tool_path, verbose, no_color):
    """Run the backup, rewrite, transform and restore cycle over all templates."""
    try:
        _, context = _load_run_context(project, properties, tool_path)
    except (TransformError, click.BadParameter) as e:
        _rich_error(str(e), symbol="error")
        sys.exit(1)

    verbose = verbose or get_default_verbose()

    formatter = TransformRunFormatter(use_color=not no_color)
    _print_lines(formatter.format_run_header(context.tool_path, len(context.items)))

    orchestrator = TransformOrchestrator(context, ConsoleLogSink(verbose=verbose, use_color=not no_color))
    try:
        result = orchestrator.execute()
    except Exception as e:
        _rich_error(f"Unexpected error during transform: {e}", symbol="error")
        sys.exit(1)

    if not result.success:
        if result.failed_item is not None:
            _print_lines(formatter.format_template_error(str(result.error)))
        _print_lines(formatter.format_run_summary(result.processed, result.total, False))
        sys.exit(1)

    _print_lines(formatter.format_run_summary(result.processed, result.total, True))


@cli.command(name="list", help="List project items and whether they will be transformed")
@project_option
@click.option('--all', 'show_all', is_flag=True, help="Include items that are not templates")
def list_templates(project, show_all):
    """Show the items selected for transformation."""
    try:
        model = YamlProjectModel.from_file(_resolve_project_path(project))
    except TransformError as e:
        _rich_error(str(e), symbol="error")
        sys.exit(1)

    rows = []
    for record in model.items():
        selected = is_template_item(record)
        if not selected and not show_all:
            continue
        backup_note = ", stale backup present" if Path(backup_path_for(record.full_path)).exists() else ""
        status = "transform" if selected else "skip"
        rows.append((_display_path(record.full_path), f"{status} ({record.item_type}, {record.generator or 'no generator'}){backup_note}"))

    if not rows:
        _rich_info("No templates marked for generation", symbol="info")
        return

    console = _get_console()
    table = _create_templates_table(rows)
    if console and table is not None:
        console.print(table)
    else:
        for path, detail in rows:
            click.echo(f"  - {path}: {detail}")


@cli.command(help="Show where TextTransform.exe is looked for and which path wins")
@project_option
@property_option
@click.option('--tool-path', help="Explicit path to TextTransform.exe (sets TextTransformPath)")
def locate(project, properties, tool_path):
    """Display the tool probing order and the resolved tool path."""
    try:
        _, context = _load_run_context(project, properties, tool_path)
    except (TransformError, click.BadParameter) as e:
        _rich_error(str(e), symbol="error")
        sys.exit(1)

    _rich_info("Probing order:", symbol="gear")
    for candidate in candidate_tool_paths(context.properties):
        marker = "✓" if Path(candidate).is_file() else "✗"
        _rich_echo(f"  {marker} {candidate}", color="dim")

    if Path(context.tool_path).is_file():
        _rich_success(f"Resolved tool: {context.tool_path}", symbol="check")
    else:
        _rich_warning(f"Resolved tool does not exist: {context.tool_path}", symbol="warning")
        sys.exit(1)


@cli.command(help="Preview directive rewrites without modifying any template")
@project_option
@property_option
def preview(project, properties):
    """Show how each template's directives would be rewritten."""
    try:
        _, context = _load_run_context(project, properties)
    except (TransformError, click.BadParameter) as e:
        _rich_error(str(e), symbol="error")
        sys.exit(1)

    rewriter = DirectiveRewriter(PropertyResolver(context.properties))
    formatter = TransformRunFormatter()
    failed = False

    for item in context.items:
        try:
            encoding = detect_encoding(item.path)
            with open(item.path, 'rb') as f:
                template = encoding.decode(f.read())
            _, changes = rewriter.rewrite_text(template)
        except (OSError, UnicodeError, TransformError) as e:
            _rich_error(f"{_display_path(item.path)}: {e}", symbol="error")
            failed = True
            continue

        _rich_info(f"{_display_path(item.path)} ({encoding.codec}{', BOM' if encoding.bom else ''})", symbol="preview")
        if changes:
            _print_lines(formatter.format_directive_changes(changes))
        else:
            _rich_echo("  no directive changes", color="dim")

    if failed:
        sys.exit(1)


@cli.command(help="Configure tob CLI defaults")
@click.option('--show', is_flag=True, help="Show current configuration")
@click.option('--set', 'assignments', multiple=True, help="Set a value in format key=value")
def config(show, assignments):
    """Show or update the user configuration."""
    try:
        if assignments:
            updates = {}
            for assignment in assignments:
                if '=' not in assignment:
                    raise ValueError(f"'{assignment}' is not in key=value format")
                key, raw_value = assignment.split('=', 1)
                updates[key.strip()] = parse_config_value(key.strip(), raw_value)
            update_config(updates)
            _rich_success(f"Updated {', '.join(updates)}", symbol="check")

        if show:
            current = get_config()
            content = "\n".join(f"{key}: {value}" for key, value in current.items())
            content += f"\ntob version: {get_version()}"
            _rich_panel(content, title="⚙️  tob configuration")
        elif not assignments:
            _rich_info("Use --show to display configuration or --set key=value to change it")

    except Exception as e:
        _rich_error(f"Error updating configuration: {e}")
        sys.exit(1)


def main():
    """Main entry point for the CLI."""
    try:
        cli(obj={})
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
