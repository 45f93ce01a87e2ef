"""aiblock inspect <file> [--compact]"""

from aiblock_cli.output import load_config, print_result, read_source


def register(subparsers):
    p = subparsers.add_parser(
        "inspect", help="Show ai containers, fields and segments as JSON"
    )
    p.add_argument("file", help="Markdown file")
    p.add_argument("--compact", action="store_true", help="Single-line JSON")
    p.set_defaults(handler=handle)


def handle(args, project_path: str):
    from aiblock.markdown import find_blocks
    from aiblock.primitives.container import describe_block

    text = read_source(args.file)
    config = load_config(project_path)

    blocks = [describe_block(block, config) for block in find_blocks(text, config)]
    print_result({"file": args.file, "blocks": blocks}, compact=args.compact)
