"""
pyeckey CLI: "pyeckey"
"""
import sys
import json
import logging
import argparse
import os
import textwrap

from logging import getLogger
from logging.config import dictConfig
from appdirs import user_log_dir
import yaml
from yaml.scanner import ScannerError

from . import __version__ as VERSION
from . import BUILD_DATE, COMMIT_ID
from .curves import CURVES, DEFAULT_CURVE
from .eckey import ECKey, FORMAT_ALIASES, ECKeyJSONEncoder
from .eckey_errors import EckeyError
from .status_codes import STATUS_SUCCESS, STATUS_FAILURE

FORMAT_JWK = 'jwk'

KEY_FORMATS = sorted(FORMAT_ALIASES) + [FORMAT_JWK]

CURVE_NAMES = [curve.vendor_name for curve in CURVES] + [curve.standard_name for curve in CURVES]

CONSOLE_HANDLERS = ('console_only_info', 'console_not_info')
DEBUG_CONSOLE_HANDLER = 'console_detailed'

def _logging_config_path(default_path, env_key):
    """The logging YAML named by env_key, else the one installed with pyeckey"""
    return os.getenv(env_key) or os.path.join(os.path.dirname(__file__), default_path)

def _file_handlers(config):
    return [handler for handler in config['handlers'].values() if 'filename' in handler]

def _adapt_logging_config(config, user_requested_level):
    """
    Adjust a parsed logging YAML to the user requested level

    File handlers are moved into the per-user log directory.  At DEBUG level
    the console output switches to the detailed handler.
    """
    file_handlers = _file_handlers(config)
    if file_handlers:
        logdir = user_log_dir(__name__, "pyeckey")
        os.makedirs(logdir, exist_ok=True)
        for handler in file_handlers:
            handler['filename'] = os.path.join(logdir, handler['filename'])

    root = config['root']
    if user_requested_level <= logging.DEBUG:
        root['handlers'] = [name for name in root['handlers'] if name not in CONSOLE_HANDLERS]
        root['handlers'].append(DEBUG_CONSOLE_HANDLER)
    else:
        for name in CONSOLE_HANDLERS:
            config['handlers'][name]['level'] = user_requested_level

    # Root level must let through everything any handler wants to see
    levels = [user_requested_level, getattr(logging, root['level'])]
    levels += [getattr(logging, handler['level']) for handler in file_handlers]
    root['level'] = min(levels)
    return config

def setup_logging(user_requested_level=logging.WARNING, default_path='logging.yaml',
                  env_key='PYECKEY_LOGGING_CONFIG'):
    """
    Setup logging for the pyeckey CLI

    :param user_requested_level: console logging level
    :param default_path: logging YAML shipped with the package
    :param env_key: environment variable naming an alternative logging YAML
    """
    path = _logging_config_path(default_path, env_key)
    if not os.path.exists(path):
        print("Unable to open logging config file '{}'".format(path))
    else:
        try:
            with open(path, 'rt') as file:
                config = yaml.safe_load(file)
            dictConfig(_adapt_logging_config(config, user_requested_level))
            return
        except ScannerError:
            print("Error parsing logging config file '{}'".format(path))
        except KeyError as keyerror:
            print("Key {} not found in logging config file".format(keyerror))

    print("Reverting to basic logging.")
    logging.basicConfig(level=user_requested_level)

def _read_key(filename, key_format):
    """
    Load a key from file

    :param filename: key file
    :param key_format: input format name, 'jwk' for JSON Web Key files
    :return: ECKey
    """
    logger = getLogger(__name__)
    logger.debug("Loading key from '%s'", filename)
    if key_format == FORMAT_JWK:
        with open(filename, 'r') as keyfile:
            return ECKey(json.load(keyfile))
    with open(filename, 'rb') as keyfile:
        return ECKey(keyfile.read(), key_format)

def _write_key(key, key_format, filename=None):
    """
    Write a key to file, or print it if no file is given

    DER formats are written as binary files and printed as base64 text.

    :param key: ECKey to write
    :param key_format: output format name, 'jwk' for JSON Web Key
    :param filename: output file (optional)
    """
    logger = getLogger(__name__)
    if key_format == FORMAT_JWK:
        text = json.dumps(key, cls=ECKeyJSONEncoder, indent=2) + "\n"
        data = text.encode('ascii')
    else:
        text = key.to_string(key_format)
        data = key.to_bytes(key_format)
    if filename is None:
        print(text, end="" if text.endswith("\n") else "\n")
        return
    with open(filename, 'wb') as keyfile:
        logger.info("Writing %s key to '%s'", key_format, filename)
        keyfile.write(data)

def _action_convert(args):
    key = _read_key(args.input, args.input_format)
    if args.public:
        key = key.as_public()
    _write_key(key, args.output_format, args.output)
    return STATUS_SUCCESS

def _action_generate(args):
    logger = getLogger(__name__)
    logger.info("Generating %s key", args.curve)
    key = ECKey.create(args.curve)
    _write_key(key, args.output_format, args.output)
    return STATUS_SUCCESS

def _action_info(args):
    key = _read_key(args.input, args.input_format)
    print("Curve:        {} ({})".format(key.curve, key.json_curve))
    print("Key type:     {}".format("private" if key.is_private else "public"))
    print("Public point: {}".format("present" if key.public_code_point else "absent"))
    return STATUS_SUCCESS

def main():
    """
    Entrypoint for installable CLI

    Configures the top-level CLI and parses the arguments
    """

    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawTextHelpFormatter,
        description=textwrap.dedent('''\
    pyeckey: a command line interface for converting EC keys

    basic usage:
        - pyeckey <command> [-switches]
            '''),
        epilog=textwrap.dedent('''usage examples:
        Convert an OpenSSL EC private key to PKCS8 PEM
        - pyeckey convert key.pem -o key-pkcs8.pem

        Extract the public key of a private key as a JSON Web Key
        - pyeckey convert key.pem --public --output-format jwk

        Convert a JSON Web Key to SPKI DER
        - pyeckey convert key.json --input-format jwk --output-format spki -o key.der

        Generate a new P-384 key
        - pyeckey generate --curve P-384 -o key.pem

        Show the curve and kind of a key
        - pyeckey info key.pem
        '''))

    # Global switches.  These are all "do X and exit"
    parser.add_argument("-V", "--version", action="store_true",
                        help="Print pyeckey version number and exit")
    parser.add_argument("-R", "--release-info", action="store_true",
                        help="Print pyeckey release details and exit")

    parser.add_argument("-v", "--verbose",
                        default="info",
                        choices=['debug', 'info', 'warning', 'error', 'critical'],
                        help="Logging verbosity/severity level")

    subparsers = parser.add_subparsers(title='commands',
                                       dest='command',
                                       description="use one and only one of these commands",
                                       help="for additional help use pyeckey <command> --help")
    # Make the command required but not for -V or -R arguments
    subparsers.required = not any([arg in ["-V", "--version", "-R", "--release-info"] for arg in sys.argv])

    convert_command = subparsers.add_parser(name='convert',
                                            help='convert a key file to another format')
    convert_command.add_argument("input", type=str, help="Key file to convert")
    convert_command.add_argument("-if", "--input-format", type=str.lower, choices=KEY_FORMATS, default="pem",
                                 dest="input_format",
                                 help="Format of the input key file (default: pem)")
    convert_command.add_argument("-of", "--output-format", type=str.lower, choices=KEY_FORMATS, default="pem",
                                 dest="output_format",
                                 help="Format to convert to (default: pem)")
    convert_command.add_argument("--public", action="store_true",
                                 help="Only output the public part of the key")
    convert_command.add_argument("-o", "--output", type=str,
                                 help="File to write the converted key to (default: print it)")

    generate_command = subparsers.add_parser(name='generate',
                                             aliases=['gen'],
                                             help='generate a new random private key')
    generate_command.add_argument("-c", "--curve", type=str, choices=CURVE_NAMES,
                                  default=DEFAULT_CURVE.vendor_name,
                                  help="Curve of the new key (default: {})".format(DEFAULT_CURVE.vendor_name))
    generate_command.add_argument("-of", "--output-format", type=str.lower, choices=KEY_FORMATS, default="pem",
                                  dest="output_format",
                                  help="Format of the new key (default: pem)")
    generate_command.add_argument("-o", "--output", type=str,
                                  help="File to write the new key to (default: print it)")

    info_command = subparsers.add_parser(name='info',
                                         help='show the curve and kind of a key')
    info_command.add_argument("input", type=str, help="Key file")
    info_command.add_argument("-if", "--input-format", type=str.lower, choices=KEY_FORMATS, default="pem",
                              dest="input_format",
                              help="Format of the key file (default: pem)")

    # Parse
    args = parser.parse_args()

    # Setup logging
    setup_logging(user_requested_level=getattr(logging, args.verbose.upper()))
    logger = logging.getLogger(__name__)

    # Dispatch
    if args.version or args.release_info:
        print("pyeckey version {}".format(VERSION))
        if args.release_info:
            print("Build date:  {}".format(BUILD_DATE))
            print("Commit ID:   {}".format(COMMIT_ID))
            print("Installed in {}".format(os.path.abspath(os.path.dirname(__file__))))
        return STATUS_SUCCESS

    try:
        if args.command == "convert":
            return _action_convert(args)
        if args.command in ("generate", "gen"):
            return _action_generate(args)
        if args.command == "info":
            return _action_info(args)
    except (EckeyError, OSError, ValueError) as exc:
        logger.error("Operation failed with %s: %s", type(exc).__name__, exc)
        logger.debug(exc, exc_info=True)    # get traceback if debug loglevel

    return STATUS_FAILURE

if __name__ == "__main__":
    sys.exit(main())
