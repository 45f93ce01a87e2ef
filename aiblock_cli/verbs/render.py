"""aiblock render <file> [-o OUT] [--standalone]"""

import html
import sys
from pathlib import Path

from aiblock_cli.output import die, load_config, read_source

PAGE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{body}</body>
</html>
"""


def register(subparsers):
    p = subparsers.add_parser("render", help="Render a markdown file to HTML")
    p.add_argument("file", help="Markdown file")
    p.add_argument("--output", "-o", help="Write HTML here instead of stdout")
    p.add_argument("--standalone", action="store_true",
                   help="Wrap the fragment in a minimal HTML page")
    p.set_defaults(handler=handle)


def handle(args, project_path: str):
    from aiblock.markdown import create_markdown

    text = read_source(args.file)
    config = load_config(project_path)

    md = create_markdown(config)
    output = md.render(text, {"path": str(Path(args.file).resolve())})
    if args.standalone:
        output = PAGE.format(title=html.escape(Path(args.file).name), body=output)

    if not args.output:
        sys.stdout.write(output)
        return

    try:
        Path(args.output).write_text(output, encoding="utf-8")
    except OSError as e:
        die(f"cannot write {args.output}: {e.strerror or e}")
