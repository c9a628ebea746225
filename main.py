#!/usr/bin/env python3
"""
pagecraft - Structured page editing for block stores

Main entry point for pagecraft. Compiles block markup, runs the agent tools
against the live store or an in-memory dry-run store, and lists the tools.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from pagecraft import __version__
from pagecraft.compiler import compile_blocks
from pagecraft.config import config
from pagecraft.ids import parse_page_reference
from pagecraft.store import BlockStore, HttpBlockStore, InMemoryBlockStore, StoreError
from pagecraft.tools import tool_registry

ID_PARAMS = ("page_id", "block_id", "container_id", "table_id", "row_id", "parent_page_id")
# Parameters naming a block; a `page#block` reference resolves to the block
BLOCK_PARAMS = ("block_id", "container_id", "table_id", "row_id")


def setup_logging():
    """Configure logging for the application."""
    level = getattr(logging, config.get("logging.level", "INFO").upper())
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = config.log_filename

    # stdout carries JSON results
    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def normalize_id_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Accept page URLs and `page#block` references wherever an id is expected.

    Args:
        params: Tool parameters

    Returns:
        Parameters with id values converted to dashed ids
    """
    normalized = dict(params)
    for name in ID_PARAMS:
        value = normalized.get(name)
        if not isinstance(value, str):
            continue
        reference = parse_page_reference(value)
        if not reference.is_valid:
            continue
        if name in BLOCK_PARAMS and reference.block_id:
            normalized[name] = reference.block_id
        else:
            normalized[name] = reference.page_id or reference.block_id
    return normalized


def load_dry_run_store(fixture: Optional[str]) -> InMemoryBlockStore:
    """
    Build an in-memory store, optionally seeded from a JSON fixture of the
    form {"pages": {page_id: [blocks]}, "schemas": {source_id: properties}}.
    """
    if not fixture:
        return InMemoryBlockStore()
    with open(fixture, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return InMemoryBlockStore(pages=data.get("pages"), schemas=data.get("schemas"))


def open_store(args) -> BlockStore:
    if args.dry_run:
        return load_dry_run_store(args.fixture)

    token = os.environ.get(config.token_env)
    if not token:
        raise SystemExit(f"Set {config.token_env} to a store integration token, or use --dry-run")
    return HttpBlockStore(token)


def print_json(data: Any):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def run_compile(args) -> int:
    if args.file:
        document = Path(args.file).read_text(encoding='utf-8')
    else:
        document = sys.stdin.read()

    blocks = compile_blocks(document)
    logging.info(f"Compiled {len(blocks)} blocks")
    print_json([block.to_api() for block in blocks])
    return 0


def run_tool(args) -> int:
    try:
        params = json.loads(args.params) if args.params else {}
    except json.JSONDecodeError as e:
        logging.error(f"Invalid --params JSON: {e}")
        print_json({"success": False, "error": f"Invalid --params JSON: {e}"})
        return 2

    if not isinstance(params, dict):
        print_json({"success": False, "error": "--params must be a JSON object"})
        return 2

    store = open_store(args)
    try:
        result = tool_registry.invoke(args.tool, store, normalize_id_params(params))
    except StoreError as e:
        logging.error(f"Tool {args.tool} failed: {e.message}")
        result = {"success": False, "error": e.message, "store_error": e.to_dict()}
    finally:
        if isinstance(store, HttpBlockStore):
            store.client.close()

    if args.dry_run and isinstance(store, InMemoryBlockStore):
        result = dict(result, dry_run_calls=[list(call) for call in store.calls])

    print_json(result)
    return 0 if result.get("success") else 1


def run_list_tools(args) -> int:
    for name in tool_registry.list_tools():
        tool = tool_registry.get_tool(name)
        print(f"{name:20} {tool.description}")
        print(f"{'':20} params: {', '.join(tool.parameters)}")
    return 0


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="pagecraft - Structured page editing for block stores",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py compile notes.txt                        # Print compiled blocks as JSON
  python main.py tools                                    # List available tools
  python main.py run add-activity-log --params '{"page_id": "...", "entry": "Sent draft"}'
  python main.py run append-content --dry-run --params '{"container_id": "p1", "content": "h1: Hi"}'
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"pagecraft {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser("compile", help="Compile block markup to JSON")
    compile_parser.add_argument(
        "file",
        nargs="?",
        help="Markup file (reads stdin when omitted)"
    )
    compile_parser.set_defaults(func=run_compile)

    run_parser = subparsers.add_parser("run", help="Run a tool")
    run_parser.add_argument(
        "tool",
        help="Tool name, see the 'tools' command"
    )
    run_parser.add_argument(
        "--params",
        type=str,
        default="{}",
        help="Tool parameters as a JSON object"
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run against an in-memory store instead of the live store"
    )
    run_parser.add_argument(
        "--fixture",
        type=str,
        help="JSON file seeding the dry-run store with pages and schemas"
    )
    run_parser.set_defaults(func=run_tool)

    tools_parser = subparsers.add_parser("tools", help="List available tools")
    tools_parser.set_defaults(func=run_list_tools)

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging()

    try:
        sys.exit(args.func(args))
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
