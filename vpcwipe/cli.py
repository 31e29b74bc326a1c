"""vpcwipe CLI entry point."""
import argparse
import logging
import time
from vpcwipe.core.config import load_config
from vpcwipe.core.errors import VpcWipeError
from vpcwipe.core.logging import setup_logging, get_run_id
from vpcwipe.cleaner import DefaultVpcWiper


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='vpcwipe - delete the default VPC in every AWS region')
    parser.add_argument('--config', '-c', help='Path to YAML config file')
    parser.add_argument('--region', action='append',
                        help='Region to clean (repeatable, overrides config)')
    parser.add_argument('--reference-region',
                        help='Region whose endpoint is used to list regions')
    parser.add_argument('--max-workers', type=int,
                        help='Maximum regions processed at once (default: all)')
    parser.add_argument('--profile', help='AWS named profile to use')
    parser.add_argument('--yes', '-y', action='store_true',
                        help='Skip the countdown before deleting')
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='count', default=0,
                           help='More output: -v=DEBUG')
    verbosity.add_argument('-q', '--quiet', action='store_true',
                           help='Only log warnings and errors')
    parser.add_argument('--json-logs', action='store_true',
                        help='Output logs in JSON format')
    return parser.parse_args(argv)


def countdown(seconds):
    """Give the operator a chance to Ctrl+C. Returns False if cancelled."""
    try:
        for i in range(seconds, 0, -1):
            print(f"Deleting default VPCs in {i}s... (Ctrl+C to cancel)", end='\r')
            time.sleep(1)
        print(" " * 50, end='\r')
    except KeyboardInterrupt:
        logging.info("Cancelled by user")
        return False
    return True


def main(argv=None):
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        setup_logging()
        logging.error(f"Invalid configuration: {e}")
        return 1

    # CLI args override config
    if args.region:
        config.regions = args.region
    if args.reference_region:
        config.reference_region = args.reference_region
    if args.max_workers is not None:
        if args.max_workers < 1:
            setup_logging()
            logging.error("--max-workers must be at least 1")
            return 1
        config.max_workers = args.max_workers
    if args.profile:
        config.profile = args.profile
    if args.yes:
        config.countdown = 0
    if args.verbose:
        config.verbosity += args.verbose
    if args.quiet:
        config.verbosity = 0
    if args.json_logs:
        config.json_logs = True

    setup_logging(config.verbosity, config.json_logs)
    logging.debug(f"vpcwipe run_id={get_run_id()} max_workers={config.max_workers or 'unbounded'}")

    try:
        wiper = DefaultVpcWiper(config)
        wiper.get_caller_identity()
    except VpcWipeError as e:
        logging.error(str(e))
        return 1

    if config.countdown:
        logging.warning("Default VPCs, their internet gateways and subnets WILL be deleted")
        if not countdown(config.countdown):
            return 130

    try:
        wiper.purge()
    except VpcWipeError as e:
        logging.error(f"Aborting: {e}")
        return 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
