# main.py
"""Load a phase case, print its state and optionally write or restore a checkpoint."""

import argparse
import logging
import sys

import jsonschema
import yaml

from phasestate.case_utils import case_configs, resolve_config_path
from phasestate.checkpoint import load_checkpoint, save_checkpoint
from phasestate.config_parser import load_config
from phasestate.exceptions import PhaseStateError
from phasestate.util import phase_from_config


def _parse_vars(pairs):
    """'key=value' strings -> dict, values parsed as YAML scalars."""
    jinja_vars = {}
    for pair in pairs or []:
        if '=' not in pair:
            raise ValueError(f"Template variable '{pair}' must look like key=value")
        key, value = pair.split('=', 1)
        jinja_vars[key] = yaml.safe_load(value)
    return jinja_vars


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("case", nargs="?", help="Case name under --cases-dir, or path to a config.yml")
    parser.add_argument("--cases-dir", default="cases", help="Directory holding case folders")
    parser.add_argument("--list", action="store_true", help="List available cases and exit")
    parser.add_argument("--var", action="append", metavar="KEY=VALUE",
                        help="Render the config with Jinja2 using this variable (repeatable)")
    parser.add_argument("--save", metavar="FILE", nargs="?", const="",
                        help="Write a checkpoint (default: the case's checkpoint.file)")
    parser.add_argument("--restore", metavar="FILE", help="Restore the state from a checkpoint before reporting")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.list:
        for name in case_configs(args.cases_dir):
            print(name)
        return 0

    if not args.case:
        parser.error("a case name or config path is required")

    try:
        config_path = resolve_config_path(args.case, args.cases_dir)
        jinja_vars = _parse_vars(args.var)
        config = load_config(config_path, use_jinja2=bool(jinja_vars), jinja_vars=jinja_vars)
        phase = phase_from_config(config)

        if args.restore:
            load_checkpoint(phase, args.restore)

        print(phase.report())

        if args.save is not None:
            target = args.save or config.get('checkpoint', {}).get('absolute_path')
            if not target:
                parser.error("--save needs a FILE when the case has no checkpoint.file")
            save_checkpoint(phase, target)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (PhaseStateError, ValueError, jsonschema.ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
