"""CLI verbs. Each module exposes register(subparsers) and handle(args, project_path)."""
