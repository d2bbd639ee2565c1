import argparse
import logging
import sys

from secretagent.config import Settings
from secretagent.webhook import Manager

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="secret-agent",
        description="Mutating admission webhook injecting AWS Secrets Manager values into pod env.",
    )
    parser.add_argument("--log-level", help="overrides SECRET_AGENT_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="run the TLS webhook server (default)")
    serve.add_argument("--host")
    serve.add_argument("--port", type=int)
    serve.add_argument("--cert-dir", help="directory holding tls.crt and tls.key")

    manifest = sub.add_parser("manifest", help="print the MutatingWebhookConfiguration")
    manifest.add_argument("--service-name")
    manifest.add_argument("--service-namespace")
    manifest.add_argument("--ca-bundle", help="path to the CA certificate the API server should trust")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if k != "command"}
    settings = Settings.from_env(**overrides)

    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT, stream=sys.stdout)
    manager = Manager(settings)

    if args.command == "manifest":
        sys.stdout.write(manager.manifest())
        return 0

    manager.start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
