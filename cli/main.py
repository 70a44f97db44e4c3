import argparse
import logging
import sys

from pydantic import ValidationError

from core.config import settings
from core.models import ScanConfig
from core.sink import ResultSink, ensure_parent_dir
from pipeline.orchestrator import Orchestrator
from probers.l4_tcp import ProbeTimings

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="portgrab", description="Concurrent TCP port scanner with banner capture (lab use only)")
    p.add_argument("target", help="host name or IP address")
    p.add_argument("start_port", type=int, metavar="startPort")
    p.add_argument("end_port", type=int, metavar="endPort")
    p.add_argument(
        "workers",
        type=int,
        nargs="?",
        default=None,
        metavar="workerCount",
        help=f"concurrent workers (default: {settings.default_workers})",
    )
    p.add_argument("--log-file", default=settings.log_path, help="result log path (default: %(default)s)")
    p.add_argument("--timeout", type=float, default=None, help="connect timeout in seconds")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    params = dict(target=args.target, start_port=args.start_port, end_port=args.end_port)
    if args.workers is not None:
        params["workers"] = args.workers
    try:
        config = ScanConfig(**params)
    except ValidationError as exc:
        parser.error("; ".join(err["msg"] for err in exc.errors()))

    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be > 0")

    log.debug("scan config: %s", config)
    ensure_parent_dir(args.log_file)
    sink = ResultSink(args.log_file, echo=settings.echo_stdout)
    orch = Orchestrator(sink=sink, timings=ProbeTimings.from_settings(connect_timeout_s=args.timeout))
    orch.scan(config)

    print(f"Scan complete. Results in {args.log_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
