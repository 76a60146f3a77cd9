# wotd/server.py
from __future__ import annotations

import argparse
import os
from typing import List, Optional

import uvicorn

CERT_FILE = "certs/server.crt"
KEY_FILE = "certs/server.key"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wotd-server", description="Run the word of the day HTTP server")
    parser.add_argument("--address", default=os.getenv("WOTD_ADDRESS", "0.0.0.0"), help="interface to bind")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8080")), help="port to listen on")
    parser.add_argument("--tls", action="store_true", help=f"serve HTTPS using {CERT_FILE} and {KEY_FILE}")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    kwargs = {}
    if args.tls:
        kwargs.update(ssl_certfile=CERT_FILE, ssl_keyfile=KEY_FILE)

    print(f"Listening to requests from: {args.address}:{args.port}")
    uvicorn.run("wotd.main:app", host=args.address, port=args.port, access_log=False, **kwargs)


if __name__ == "__main__":
    main()
