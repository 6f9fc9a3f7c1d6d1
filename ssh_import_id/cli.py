# Copyright 2015 Google Inc. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command line entry point for ssh-import-id."""

import argparse
import logging
import signal
import sys

from . import authorized_keys
from . import config
from . import exceptions
from . import importer
from . import keyserver

_FATAL_EXIT_CODE = 1
_TERMINATION_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


def _parse_args(argv=None):
  """Returns arguments parsed by argparse."""
  parser = argparse.ArgumentParser(
      prog='ssh-import-id',
      description='Authorize a user by fetching their public SSH keys from '
      'a keyserver (Launchpad by default). Identifiers may be prefixed with '
      'lp: or gh: to select Launchpad or GitHub.')
  parser.add_argument(
      '-o', '--output', default=None, metavar='FILE',
      help="write output to FILE; default ~/.ssh/authorized_keys, use '-' "
      'for standard output')
  parser.add_argument(
      '-e', '--environment', action='store_true',
      help='keep the calling environment (e.g. proxy settings) for the '
      'keyserver request')
  parser.add_argument(
      '--logging-level', default='INFO', type=str.upper,
      choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
  parser.add_argument('user_ids', nargs='+', metavar='USER_ID')
  return parser.parse_args(argv)


def _configure_logging(logging_level):
  logger = logging.getLogger()
  logger.setLevel(getattr(logging, logging_level))
  handler = logging.StreamHandler(sys.stderr)
  handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
  logger.addHandler(handler)
  return handler


def _raise_system_exit(signum, unused_frame):
  raise SystemExit(128 + signum)


def main(argv=None):
  """Imports keys for every user on the command line.

  Returns:
    0 if every import succeeded, otherwise the number of failed imports.
    Fatal setup or write errors return 1.
  """
  args = _parse_args(argv)
  handler = _configure_logging(args.logging_level)
  logger = logging.getLogger(__name__)
  # Unwind on termination so the staged response is released.
  previous_handlers = dict(
      (signum, signal.signal(signum, _raise_system_exit))
      for signum in _TERMINATION_SIGNALS)

  client = None
  try:
    url_template = config.get_url_template()
    destination = authorized_keys.resolve_destination(args.output)
    client = keyserver.KeyserverClient(
        sanitize_environment=not args.environment)
    key_importer = importer.KeyImporter(
        url_template, authorized_keys.AuthorizedKeysWriter(destination),
        client)
    results = key_importer.import_users(args.user_ids)
  except (exceptions.StartupException, exceptions.WriteException) as e:
    logger.error('%s', e)
    return _FATAL_EXIT_CODE
  finally:
    if client:
      client.close()
    for signum, previous_handler in previous_handlers.items():
      signal.signal(signum, previous_handler)
    logging.getLogger().removeHandler(handler)
  return importer.exit_code(results)
