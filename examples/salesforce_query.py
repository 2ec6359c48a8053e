#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
import os

from laakhay.salesforce import SalesforceClient, SalesforceCredentials


class PrintSink:
    def info(self, tag, message, metadata=None):
        print(f"[{tag}] {message} {metadata or ''}")

    def error(self, tag, error, metadata=None):
        print(f"[{tag}] ERROR {error} {metadata or ''}")


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a SOQL query against a Salesforce org")
    p.add_argument("query", nargs="?", default="SELECT Id, Name FROM Account")
    p.add_argument("--timeout", type=float, default=None, help="seconds before cancelling")
    p.add_argument("--allow-partial", action="store_true")
    p.add_argument("--verbose", action="store_true")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.INFO)

    credentials = SalesforceCredentials(
        url=os.environ.get("SALESFORCE_URL", "https://login.salesforce.com"),
        client_id=os.environ["SALESFORCE_CLIENT_ID"],
        client_secret=os.environ["SALESFORCE_CLIENT_SECRET"],
        username=os.environ["SALESFORCE_USERNAME"],
        password=os.environ["SALESFORCE_PASSWORD"],
        token=os.environ.get("SALESFORCE_TOKEN", ""),
    )

    async with SalesforceClient(sink=PrintSink()) as client:
        await client.authorize(credentials)
        records = await client.query_with_timeout(
            args.query, allow_partial=args.allow_partial, timeout=args.timeout
        )

    print("=" * 65)
    print(f"Query   : {args.query}")
    print(f"Records : {len(records)}")
    print("=" * 65)
    for record in records:
        fields = {k: v for k, v in record.items() if k != "attributes"}
        print(fields)


if __name__ == "__main__":
    asyncio.run(main())
