"""CLI entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

import anyio

from risa_chain.crypto import RSA_ALGORITHMS, RSA_KEY_SIZES
from risa_chain.input_adaptors import FileInput, InputAdaptor, TextInput
from risa_chain.models.chain_execution_result import ChainExecutionResult
from risa_chain.models.chain_step import ChainStep, parse_steps_json
from risa_chain.models.history_item import HistoryFilter
from risa_chain.models.http_template import HttpTemplate
from risa_chain.orchestrator import Orchestrator
from risa_chain.reporting import render_result
from risa_chain.settings import default_data_dir
from risa_chain.transforms import available_modules
from risa_chain.url_analyzer import analyze_url


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="risa-chain")
    parser.add_argument("--data-dir", type=str, default=None, help="Directory holding keys, history and templates")
    parser.add_argument("--templates-dir", type=str, action="append", default=[], help="Extra template directory")
    parser.add_argument("-v", "--verbose", action="store_true")
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("run", help="Run a chain on an input")
    _add_chain_source(run)
    input_group = run.add_mutually_exclusive_group(required=True)
    input_group.add_argument("--input", type=str, help="Path to an input file")
    input_group.add_argument("--input-text", type=str, help="Raw input text")
    run.add_argument("--format", choices=["yaml", "json", "text"], default="yaml")

    validate = commands.add_parser("validate", help="Check a chain without running it")
    _add_chain_source(validate)

    analyze = commands.add_parser("analyze", help="Suggest path and query templates for a URL")
    analyze.add_argument("url")

    commands.add_parser("modules", help="List available step types")

    keys = commands.add_parser("keys", help="Manage saved RSA keys")
    key_commands = keys.add_subparsers(dest="keys_command", required=True)
    generate = key_commands.add_parser("generate")
    generate.add_argument("--name", required=True)
    generate.add_argument("--size", type=int, choices=RSA_KEY_SIZES, default=None)
    generate.add_argument("--algorithm", choices=RSA_ALGORITHMS, default=None)
    key_commands.add_parser("list")
    remove_key = key_commands.add_parser("remove")
    remove_key.add_argument("key_id")

    templates = commands.add_parser("templates", help="Inspect chain templates")
    template_commands = templates.add_subparsers(dest="templates_command", required=True)
    template_commands.add_parser("list")
    show = template_commands.add_parser("show")
    show.add_argument("template")

    http_templates = commands.add_parser("http-templates", help="Manage saved HTTP URL templates")
    http_commands = http_templates.add_subparsers(dest="http_command", required=True)
    http_commands.add_parser("list")
    add_http = http_commands.add_parser("add")
    add_http.add_argument("--name", required=True)
    add_http.add_argument("--base-url", required=True)
    add_http.add_argument("--path-template", default="")
    add_http.add_argument("--query-template", default="", help="JSON array of query keys")
    add_http.add_argument("--description", default="")
    remove_http = http_commands.add_parser("remove")
    remove_http.add_argument("template_id")
    use_http = http_commands.add_parser("use", help="Build a URL from a saved template")
    use_http.add_argument("template")
    use_http.add_argument("--path", action="append", default=[], metavar="NAME=VALUE")
    use_http.add_argument("--query", action="append", default=[], metavar="NAME=VALUE")

    history = commands.add_parser("history", help="Inspect chain run history")
    history_commands = history.add_subparsers(dest="history_command", required=True)
    history_list = history_commands.add_parser("list")
    outcome = history_list.add_mutually_exclusive_group()
    outcome.add_argument("--failed", action="store_true")
    outcome.add_argument("--succeeded", action="store_true")
    history_list.add_argument("--limit", type=int, default=20)
    history_commands.add_parser("clear")
    return parser


def _add_chain_source(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--template", type=str, help="Template id or name")
    source.add_argument("--steps", type=str, help="Path to a JSON file with a list of steps")


def _parse_pairs(pairs: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise SystemExit(f"Expected NAME=VALUE, got: {pair}")
        values[name] = value
    return values


def _load_steps(orch: Orchestrator, args: argparse.Namespace) -> list[ChainStep]:
    if args.steps:
        return parse_steps_json(Path(args.steps).read_text(encoding="utf-8"))
    return orch.templates.get(args.template).steps


async def run_chain(orch: Orchestrator, args: argparse.Namespace, input_adaptor: InputAdaptor) -> ChainExecutionResult:
    if args.template:
        return await orch.run_template(args.template, input_adaptor.load())
    return await orch.run(_load_steps(orch, args), input_adaptor.load())


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    package_root = Path(__file__).resolve().parent
    data_dir = Path(args.data_dir).expanduser() if args.data_dir else default_data_dir()
    template_roots = [Path(path) for path in args.templates_dir] + [package_root / "templates"]
    orch = Orchestrator(data_dir, template_roots)

    if args.command == "run":
        input_adaptor: InputAdaptor
        if args.input_text is not None:
            input_adaptor = TextInput(args.input_text)
        else:
            input_adaptor = FileInput(Path(args.input))
        result = anyio.run(run_chain, orch, args, input_adaptor)
        print(render_result(result, args.format), end="")
        if not result.success:
            raise SystemExit(1)
    elif args.command == "validate":
        validation = orch.validate(_load_steps(orch, args))
        _print_json(validation.model_dump())
        if not validation.valid:
            raise SystemExit(1)
    elif args.command == "analyze":
        analysis = analyze_url(args.url)
        if analysis is None:
            raise SystemExit(f"Not a valid absolute URL: {args.url}")
        _print_json(analysis.to_record())
    elif args.command == "modules":
        _print_json({step_type: info.to_record() for step_type, info in available_modules().items()})
    elif args.command == "keys":
        _run_keys_command(orch, args)
    elif args.command == "templates":
        if args.templates_command == "list":
            for template in orch.templates.list_templates():
                print(f"{template.id}\t{template.name}\t{len(template.steps)} steps")
        else:
            _print_json(orch.templates.get(args.template).to_record())
    elif args.command == "http-templates":
        _run_http_templates_command(orch, args)
    elif args.command == "history":
        if args.history_command == "clear":
            orch.history.clear()
            return
        history_filter = HistoryFilter(success=False if args.failed else True if args.succeeded else None)
        for item in orch.history_items(history_filter)[: args.limit]:
            status = "ok" if item.success else "failed"
            print(f"{item.timestamp.isoformat()}\t{status}\t{item.template_name or '-'}\t{item.output_text[:60]}")


def _run_keys_command(orch: Orchestrator, args: argparse.Namespace) -> None:
    if args.keys_command == "generate":
        key = anyio.run(orch.generate_key, args.name, args.size, args.algorithm)
        print(f"{key.id}\t{key.name}\t{key.key_size} bits\t{key.preferred_algorithm}")
    elif args.keys_command == "list":
        for key in orch.keys.list():
            print(f"{key.id}\t{key.name}\t{key.key_size} bits\t{key.preferred_algorithm}")
    elif not orch.keys.remove(args.key_id):
        raise SystemExit(f"Key not found: {args.key_id}")


def _run_http_templates_command(orch: Orchestrator, args: argparse.Namespace) -> None:
    if args.http_command == "list":
        for template in orch.http_templates.list():
            print(f"{template.id}\t{template.name}\t{template.base_url}{template.path_template}")
    elif args.http_command == "add":
        template = HttpTemplate(
            name=args.name,
            description=args.description,
            base_url=args.base_url,
            path_template=args.path_template,
            query_template=args.query_template,
        )
        orch.add_http_template(template)
        print(template.id)
    elif args.http_command == "remove":
        if not orch.http_templates.remove(args.template_id):
            raise SystemExit(f"HTTP template not found: {args.template_id}")
    else:
        try:
            url = orch.use_http_template(args.template, _parse_pairs(args.path), _parse_pairs(args.query))
        except (LookupError, ValueError) as exc:
            raise SystemExit(str(exc)) from exc
        print(url)
