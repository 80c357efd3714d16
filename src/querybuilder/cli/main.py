"""
Main CLI entry point.
"""

import click
import logging

__version__ = "0.1.0"

OPERATION_KEYS = {
    "add": ("parent", "kind"),
    "modify": ("node", "field", "value"),
    "remove": ("node",),
}

OPERATION_METHODS = {
    "add": "add_child",
    "modify": "modify_field",
    "remove": "remove_child",
}

EDIT_HELP = """Commands:
  add <parent-id> group|rule     append a new node to a group
  set <node-id> <field> <value>  change combinator, field, operator or value
  rm <node-id>                   remove a node from its group
  show                           print the tree again
  quit                           leave the editor"""


@click.group()
@click.version_option(version=__version__)
@click.option("--group-mark", default="g", help="Id prefix for groups")
@click.option("--rule-mark", default="r", help="Id prefix for rules")
@click.option("--id-start", default=0, type=int, help="First id counter value")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, group_mark, rule_mark, id_start, verbose):
    """Querybuilder: build and edit filter query trees from the terminal."""
    from querybuilder.builder import BuilderConfig

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        ctx.obj = BuilderConfig(
            group_mark=group_mark,
            rule_mark=rule_mark,
            initial_id_value=id_start,
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--group-mark/--rule-mark/--id-start")


@main.command()
@click.argument("initial", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--demo", is_flag=True, help="Start from the demo tree")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of an outline")
@click.pass_obj
def show(config, initial, demo, as_json):
    """Normalize an initial tree and print it."""
    from querybuilder.builder import create_query_builder

    snapshots = []
    create_query_builder(_initial_tree(initial, demo), snapshots.append, config)
    _echo_snapshot(snapshots[-1], as_json)


@main.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False))
@click.option("--initial", "-i", type=click.Path(exists=True, dir_okay=False), help="Initial tree JSON file")
@click.option("--demo", is_flag=True, help="Start from the demo tree")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of an outline")
@click.option("--trace", is_flag=True, help="Print the tree after every operation")
@click.pass_obj
def apply(config, script, initial, demo, as_json, trace):
    """Replay a JSON list of operations and print the resulting tree."""
    from querybuilder.builder import create_query_builder

    logger = logging.getLogger(__name__)

    operations = _load_json(script, "script")
    if not isinstance(operations, list):
        raise click.BadParameter("expected a JSON list of operations", param_hint="SCRIPT")

    snapshots = []
    handle = create_query_builder(_initial_tree(initial, demo), snapshots.append, config)

    for number, operation in enumerate(operations, start=1):
        op, args = _parse_operation(operation, number)
        getattr(handle, OPERATION_METHODS[op])(*args)
        logger.debug(f"Applied operation {number}: {op} {args}")
        if trace:
            click.echo(f"# after {number}: {op}")
            _echo_snapshot(snapshots[-1], as_json)

    if not trace:
        _echo_snapshot(snapshots[-1], as_json)
    logger.debug(f"Applied {len(operations)} operations")


@main.command()
@click.option("--initial", "-i", type=click.Path(exists=True, dir_okay=False), help="Initial tree JSON file")
@click.option("--demo", is_flag=True, help="Start from the demo tree")
@click.pass_obj
def edit(config, initial, demo):
    """Edit a query tree interactively."""
    import shlex

    from querybuilder.builder import create_query_builder
    from querybuilder.cli.render import render_tree
    from querybuilder.options import EditorOptions

    options = EditorOptions()
    snapshots = []

    def on_change(snapshot):
        snapshots.append(snapshot)
        click.echo(render_tree(snapshot, options))

    handle = create_query_builder(_initial_tree(initial, demo), on_change, config)
    click.echo(EDIT_HELP)

    while True:
        try:
            line = click.prompt("query", prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            break

        try:
            words = shlex.split(line)
        except ValueError as e:
            click.echo(f"error: {e}", err=True)
            continue
        if not words:
            continue

        command, args = words[0], words[1:]
        if command in ("quit", "exit", "q"):
            break
        elif command == "show":
            click.echo(render_tree(snapshots[-1], options))
        elif command == "add" and len(args) == 2:
            handle.add_child(*args)
        elif command == "set" and len(args) == 3:
            node_id, field, value = args
            if not options.is_suggested(field, value):
                click.echo(f"note: {value!r} is not a listed {field}", err=True)
            handle.modify_field(node_id, field, value)
        elif command == "rm" and len(args) == 1:
            handle.remove_child(args[0])
        else:
            click.echo(EDIT_HELP, err=True)


def _load_json(path, what):
    import json

    try:
        with open(path) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path} is not valid JSON: {e}", param_hint=what)


def _initial_tree(initial, demo):
    """Initial tree from a file, the demo tree, or None for an empty one."""
    if initial and demo:
        raise click.UsageError("--initial and --demo are mutually exclusive")
    if demo:
        from querybuilder.options import DEMO_TREE
        return DEMO_TREE
    if initial:
        return _load_json(initial, "initial")
    return None


def _parse_operation(operation, number):
    """Validate one script entry and return ``(op, args)``."""
    if not isinstance(operation, dict) or operation.get("op") not in OPERATION_KEYS:
        raise click.ClickException(
            f"operation {number}: expected an object with op in {', '.join(OPERATION_KEYS)}"
        )
    op = operation["op"]
    missing = [key for key in OPERATION_KEYS[op] if key not in operation]
    if missing:
        raise click.ClickException(f"operation {number} ({op}): missing {', '.join(missing)}")
    return op, tuple(operation[key] for key in OPERATION_KEYS[op])


def _echo_snapshot(snapshot, as_json):
    if as_json:
        import json
        click.echo(json.dumps(snapshot, indent=2))
    else:
        from querybuilder.cli.render import render_tree
        click.echo(render_tree(snapshot))


if __name__ == "__main__":
    main()
