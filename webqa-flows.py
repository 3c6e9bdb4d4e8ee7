#!/usr/bin/env python3
import argparse
import asyncio
import json
import logging
import os
import sys

from dotenv import load_dotenv
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from webqa_flows.api import OrderController, TokenManager, build_async_client
from webqa_flows.browser.session import BrowserSession
from webqa_flows.config import ApiSettings, UiSettings, find_config_file, load_yaml
from webqa_flows.errors import ConfigurationError, FlowError
from webqa_flows.pages import PimPage
from webqa_flows.utils.get_log import GetLog

LOG_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


def resolve_log_level(cfg):
    level_name = (cfg.get("log") or {}).get("level") or "info"
    return LOG_LEVELS.get(str(level_name).lower(), logging.INFO)


async def check_playwright_browsers_async():
    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            await browser.close()
        return True
    except PlaywrightError as e:
        print(f"⚠️ Playwright browsers unavailable: {e}")
        return False


async def run_token(api_settings: ApiSettings, args):
    async with build_async_client(api_settings) as client:
        token = await TokenManager(client).acquire_token(api_settings.credentials)
    print(f"✅ Bearer token acquired ({len(token)} characters)")
    return 0


async def run_create_order(api_settings: ApiSettings, args):
    try:
        with open(args.payload, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to read payload file {args.payload}: {e}") from e

    async with build_async_client(api_settings) as client:
        controller = OrderController(client, TokenManager(client), api_settings)
        response = await controller.create_order(payload)
    print(f"Status: {response.status_code} {response.reason_phrase}")
    print(response.text)
    return 0 if response.is_success else 1


async def run_ui(ui_settings: UiSettings, args):
    if not ui_settings.base_url:
        raise ConfigurationError("ui.base_url is not set in the config file")

    print("🔍 Checking Playwright browsers...")
    if not await check_playwright_browsers_async():
        print("Please manually run: `playwright install` to install browser binaries, then retry.", file=sys.stderr)
        return 1

    async with BrowserSession(browser_config=ui_settings.browser_config) as session:
        await session.navigate_to(ui_settings.base_url, cookies=ui_settings.cookies)
        pim_page = PimPage(session.ui_handle(), ui_settings)

        if args.command == "ensure-deleted":
            deleted = await pim_page.ensure_deleted(args.first_name, args.last_name, args.sub_menu)
            print("🗑️  Record deleted" if deleted else "✅ Record not present, nothing to delete")
        else:
            save_started = await pim_page.create_record(args.first_name, args.last_name, args.sub_menu)
            print("✅ Save submitted" if save_started else "⚠️  Save submitted, spinner not observed")
    return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="WebQA Flows entry point")
    parser.add_argument("--config", "-c", help="YAML configuration file path (optional, default auto-search config/config.yaml)")
    parser.add_argument("--env-file", help="dotenv file with CLIENT_ID, CLIENT_SECRET, API_AUTH_URL, BUY_ORDER_ENDPOINT")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("token", help="Exchange client credentials for a bearer token")

    order_parser = subparsers.add_parser("create-order", help="POST a buy order payload")
    order_parser.add_argument("--payload", required=True, help="JSON file with the order payload")

    for name, help_text in (
        ("ensure-deleted", "Delete an employee record if it exists"),
        ("create-record", "Create an employee record"),
    ):
        ui_parser = subparsers.add_parser(name, help=help_text)
        ui_parser.add_argument("--first-name", required=True)
        ui_parser.add_argument("--last-name", required=True)
        ui_parser.add_argument("--sub-menu", required=True, help="PIM sub menu link text, e.g. 'Employee List'")

    return parser.parse_args(argv)


async def run(args, cfg):
    if args.command == "token":
        return await run_token(ApiSettings.from_env(), args)
    if args.command == "create-order":
        return await run_create_order(ApiSettings.from_env(), args)
    return await run_ui(UiSettings.from_yaml_config(cfg), args)


def main(argv=None):
    args = parse_args(argv)
    if args.env_file:
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    try:
        config_path = find_config_file(args.config, [os.getcwd(), os.path.dirname(os.path.abspath(__file__))])
        cfg = load_yaml(config_path)
    except ConfigurationError as e:
        if args.command in ("ensure-deleted", "create-record"):
            print(f"[ERROR] {e}", file=sys.stderr)
            sys.exit(1)
        cfg = {}

    GetLog.get_log(level=resolve_log_level(cfg))

    try:
        exit_code = asyncio.run(run(args, cfg))
    except FlowError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
