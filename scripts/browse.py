#!/usr/bin/env python3
"""
Manual browsing helper

Usage:
  python scripts/browse.py get <url> [--arg name=value ...]
  python scripts/browse.py post <url> [--arg name=value ...] [--file name=src[,src]] [--multipart]
                                      [--separator ";"] [--no-escape]
  python scripts/browse.py form <url> [--query "form#login"] [--xpath]

Examples:
  python scripts/browse.py get https://example.com/search --arg q=python
  python scripts/browse.py post https://example.com/upload --multipart --file photo=./cat.png
  python scripts/browse.py form https://example.com/login --query "//form[@id='login']" --xpath

Settings come from BROWSER_* environment variables (.env is read) or --config <yaml>.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dotenv import load_dotenv

from application.browser import Browser
from application.ports.logger import LoggerPort
from domain.args import Args
from domain.cookies import cookies_to_header
from domain.exceptions import BrowsingError
from domain.settings import BrowserSettings
from infrastructure.config.settings_loader import SettingsError, SettingsLoader
from infrastructure.html.lxml_node import LxmlNode
from infrastructure.html.soup_node import SoupNode
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.logging.loguru_logger import LoguruLogger

ENV_FILE = Path(__file__).parent.parent / ".env"


def _parse_pair(raw: str, label: str) -> Tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise ValueError(f"{label} must look like name=value, got: {raw}")
    return name, value


def _parse_pairs(items: Optional[List[str]], label: str) -> List[Tuple[str, str]]:
    return [_parse_pair(raw, label) for raw in (items or [])]


def _load_settings(config: Optional[str]) -> BrowserSettings:
    loader = SettingsLoader()
    if config:
        return loader.from_yaml(config)
    return loader.from_env(env_file=ENV_FILE)


def build_browser(settings: BrowserSettings, json_log: bool = False) -> Browser:
    logger: LoggerPort = ConsoleLogger(min_level=settings.log_level) if json_log else LoguruLogger()
    return Browser(settings=settings, logger=logger)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scripted browsing helper")
    parser.add_argument("--config", type=str, help="YAML settings file")
    parser.add_argument("--json-log", action="store_true", help="Log events as JSON lines on stdout")
    parser.add_argument("--show-cookies", action="store_true", help="Print the cookie header afterwards")
    subparsers = parser.add_subparsers(dest="command")

    get_parser = subparsers.add_parser("get", help="Navigate to a page and print it")
    get_parser.add_argument("url", type=str)
    get_parser.add_argument("--arg", action="append", help="Query argument name=value")

    post_parser = subparsers.add_parser("post", help="Post arguments and print the answer")
    post_parser.add_argument("url", type=str)
    post_parser.add_argument("--arg", action="append", help="Body argument name=value")
    post_parser.add_argument("--file", action="append", help="File part name=source[,source]")
    post_parser.add_argument("--file-content-type", type=str, default="")
    post_parser.add_argument("--multipart", action="store_true")
    post_parser.add_argument("--separator", type=str, default="&")
    post_parser.add_argument("--no-escape", action="store_true")

    form_parser = subparsers.add_parser("form", help="Print the fields of a form on a page")
    form_parser.add_argument("url", type=str)
    form_parser.add_argument("--query", type=str, default="form", help="CSS selector (or XPath with --xpath)")
    form_parser.add_argument("--xpath", action="store_true")

    return parser


def _cmd_get(browser: Browser, args: argparse.Namespace) -> int:
    print(browser.navigate_raw(args.url, _parse_pairs(args.arg, "--arg") or None))
    return 0


def _cmd_post(browser: Browser, args: argparse.Namespace) -> int:
    body = Args(encoding=browser.encoding)
    for name, value in _parse_pairs(args.arg, "--arg"):
        body.add(name, value)

    files: Dict[str, str] = {}
    for name, sources in _parse_pairs(args.file, "--file"):
        files[name] = f"{files[name]},{sources}" if name in files else sources

    page = browser.post_args_raw(
        args.url,
        body,
        multipart=args.multipart or bool(files),
        separator=args.separator,
        escape=not args.no_escape,
        files=files or None,
        file_content_type=args.file_content_type,
    )
    print(page)
    return 0


def _cmd_form(browser: Browser, args: argparse.Namespace) -> int:
    page = browser.navigate_raw(args.url)
    root = LxmlNode.from_html(page) if args.xpath else SoupNode.from_html(page)

    form = browser.extract_fields(root, args.query)
    if form is None:
        print(f"No form matches: {args.query}")
        return 2

    print(f"Action: {form.action}")
    print(form.args)
    return 0


COMMANDS = {
    "get": _cmd_get,
    "post": _cmd_post,
    "form": _cmd_form,
}


def main() -> None:
    load_dotenv(ENV_FILE)

    parser = _build_parser()
    args = parser.parse_args(sys.argv[1:])

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        settings = _load_settings(args.config)
        setup_console_logging(level=settings.log_level)

        with build_browser(settings, json_log=args.json_log) as browser:
            exit_code = COMMANDS[args.command](browser, args)
            if args.show_cookies:
                print(f"Cookie: {cookies_to_header(browser.cookies_for(args.url))}")
    except (ValueError, SettingsError) as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)
    except BrowsingError as exc:
        print(f"ERROR: request failed: {exc}")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
