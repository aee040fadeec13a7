import argparse
import json
import sys

from .client import TransfertoClient
from .config import get_settings
from .errors import TransfertoError, TransportError
from .logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="transferto", description="TransferTo airtime API client")
    parser.add_argument("--login", help="TransferTo login (defaults to TRANSFERTO_LOGIN)")
    parser.add_argument("--token", help="TransferTo token (defaults to TRANSFERTO_TOKEN)")
    parser.add_argument("--endpoint", help="API endpoint (defaults to TRANSFERTO_ENDPOINT)")
    parser.add_argument("--log-level", help="Log level (defaults to TRANSFERTO_LOG_LEVEL)")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("countries", help="List all countries")

    country = sub.add_parser("country", help="Operators of a country")
    country.add_argument("id")

    operator = sub.add_parser("operator", help="Products of an operator")
    operator.add_argument("id")

    info = sub.add_parser("msisdn-info", help="Look up a destination number")
    info.add_argument("msisdn")
    info.add_argument("--currency")

    topup = sub.add_parser("topup", help="Execute or simulate a top-up")
    topup.add_argument("--destination-msisdn", required=True)
    topup.add_argument("--operatorid", required=True)
    topup.add_argument("--skuid", required=True)
    topup.add_argument("--product", required=True)
    topup.add_argument("--msisdn")
    topup.add_argument("--sms")
    topup.add_argument("--currency")
    topup.add_argument("--simulate", action="store_true", help="Validate without executing")
    return parser


def run_command(client: TransfertoClient, args: argparse.Namespace):
    if args.command == "countries":
        return client.get_countries()
    if args.command == "country":
        return client.get_country(args.id)
    if args.command == "operator":
        return client.get_operator(args.id)
    if args.command == "msisdn-info":
        options = {"currency": args.currency} if args.currency else None
        return client.get_msisdn_info(args.msisdn, options)
    if args.command == "topup":
        return client.topup(
            simulate=args.simulate,
            destination_msisdn=args.destination_msisdn,
            msisdn=args.msisdn,
            operatorid=args.operatorid,
            skuid=args.skuid,
            product=args.product,
            sms=args.sms,
            currency=args.currency,
        )
    raise ValueError(f"Unknown command {args.command}")


def main(argv=None, session=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    setup_logging(args.log_level or settings.log_level, settings.service_name, stream=sys.stderr)

    login = args.login or settings.login
    token = args.token or settings.token
    if not login or not token:
        parser.error("credentials missing: pass --login/--token or set TRANSFERTO_LOGIN/TRANSFERTO_TOKEN")

    client = TransfertoClient(login, token, endpoint=args.endpoint, session=session, settings=settings)
    try:
        result = run_command(client, args)
    except TransfertoError as e:
        print(f"{e.code}: {e.message}", file=sys.stderr)
        return 1
    except TransportError as e:
        print(f"transport error: {e}", file=sys.stderr)
        return 2

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0

