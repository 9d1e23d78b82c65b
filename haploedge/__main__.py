"""
haploedge decides which reads of a viral quasispecies sample come from the
same haplotype and writes the resulting overlap graph.
"""
import ast
import sys
import pkgutil
import importlib
import importlib.util
import logging

import haploedge.cli as cli_package
from . import __version__
from .args import HelpfulArgumentParser
from .cli import CommandLineError


logger = logging.getLogger(__name__)


class NiceFormatter(logging.Formatter):
    """
    Do not prefix "INFO:" to info-level log messages (but do it for all other
    levels).
    """

    def format(self, record):
        if record.levelno != logging.INFO:
            record.msg = f"{record.levelname}: {record.msg}"
        return super().format(record)


def setup_logging(debug):
    """
    Set up logging. If debug is True, then DEBUG level messages are printed.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(NiceFormatter())
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    subcommand_name = get_subcommand_name(argv)
    module = importlib.import_module("." + subcommand_name, cli_package.__name__)

    parser = HelpfulArgumentParser(description=__doc__, prog="haploedge")
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument("--debug", action="store_true", default=False, help="Print debug messages")
    subparsers = parser.add_subparsers()
    subparser = subparsers.add_parser(
        subcommand_name,
        help=module.__doc__.strip().split("\n", maxsplit=1)[0],
        description=module.__doc__,
    )
    module.add_arguments(subparser)
    args = parser.parse_args(argv)
    setup_logging(args.debug)

    if hasattr(module, "validate"):
        module.validate(args, subparser)
    del args.debug
    try:
        module.main(args)
    except CommandLineError as e:
        logger.error("haploedge error: %s", str(e))
        logger.debug("Command line error. Traceback:", exc_info=True)
        sys.exit(1)


def get_subcommand_name(arguments) -> str:
    """
    Find out which subcommand was requested without importing all subcommand
    modules. Their help texts are taken from the module docstrings, which are
    read with the ast module.
    """
    parser = HelpfulArgumentParser(description=__doc__, prog="haploedge")
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument("--debug", action="store_true", default=False, help="Print debug messages")
    subparsers = parser.add_subparsers()

    for module_name, docstring in cli_modules(cli_package):
        help = docstring.strip().split("\n", maxsplit=1)[0].replace("%", "%%")
        subparser = subparsers.add_parser(
            module_name, help=help, description=docstring, add_help=False
        )
        subparser.set_defaults(module_name=module_name)
    args, _ = parser.parse_known_args(arguments)
    module_name = getattr(args, "module_name", None)
    if module_name is None:
        parser.error("Please provide the name of a subcommand to run")
    return module_name


def cli_modules(package):
    """
    Yield (module_name, docstring) tuples for all modules in the given package.
    """
    for module in pkgutil.iter_modules(package.__path__):
        spec = importlib.util.find_spec(package.__name__ + "." + module.name)
        with open(spec.origin) as f:
            mod_ast = ast.parse(f.read())
        yield module.name, ast.get_docstring(mod_ast, clean=False)


if __name__ == "__main__":
    main()
