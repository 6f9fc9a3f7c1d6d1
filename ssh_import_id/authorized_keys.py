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

"""Appends validated keys to an authorized keys file or to stdout.

Separate processes may append to the same file concurrently. Writes are in
append mode and each key block is written with a single call, which is
relied on to keep blocks from interleaving.
"""

import logging
import os
import pwd
import sys

from . import exceptions

STDOUT = '-'
_SSH_DIR_NAME = '.ssh'
_AUTHORIZED_KEYS_NAME = 'authorized_keys'
_SSH_DIR_MODE = 0o700
_AUTHORIZED_KEYS_MODE = 0o600
_CREATION_UMASK = 0o077

_logger = logging.getLogger(__name__)


def get_home_directory():
  """Returns $HOME, falling back to the calling user's passwd entry."""
  home = os.environ.get('HOME')
  if home:
    return home
  try:
    return pwd.getpwuid(os.getuid()).pw_dir
  except KeyError:
    raise exceptions.StartupException(
        'Cannot get passwd entry for uid [{}].', os.getuid())


def _ensure_directory(path):
  if os.path.isdir(path):
    return
  _logger.info('Creating directory: [%s].', path)
  os.mkdir(path, _SSH_DIR_MODE)


def _ensure_file(path):
  if os.path.exists(path):
    return
  _logger.info('Creating file: [%s].', path)
  fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND,
               _AUTHORIZED_KEYS_MODE)
  os.close(fd)


def resolve_destination(output=None):
  """Returns the destination for validated keys, creating it if needed.

  Args:
    output: STDOUT, a file path, or None for the calling user's
      ~/.ssh/authorized_keys.

  Returns:
    STDOUT or the path of an existing file.

  Raises:
    exceptions.StartupException: The destination could not be created.
  """
  if output == STDOUT:
    return STDOUT
  old_umask = os.umask(_CREATION_UMASK)
  try:
    if output is None:
      ssh_dir = os.path.join(get_home_directory(), _SSH_DIR_NAME)
      _ensure_directory(ssh_dir)
      output = os.path.join(ssh_dir, _AUTHORIZED_KEYS_NAME)
    _ensure_file(output)
  except OSError as e:
    raise exceptions.StartupException(
        'Cannot create destination [{}]: {}', output, e)
  finally:
    os.umask(old_umask)
  _logger.debug('Writing keys to [%s].', output)
  return output


class AuthorizedKeysWriter(object):
  """Appends validated key text to a destination. Never truncates."""

  def __init__(self, destination, stdout=None):
    self._logger = logging.getLogger(__name__)
    self.destination = destination
    self._stdout = stdout

  def append(self, text):
    """Appends text to the destination.

    Raises:
      exceptions.WriteException: The text could not be written. The state of
        the destination is unknown afterwards.
    """
    self._logger.debug('Appending [%d] characters to [%s].', len(text),
                       self.destination)
    try:
      if self.destination == STDOUT:
        stream = self._stdout or sys.stdout
        stream.write(text)
        stream.flush()
      else:
        with open(self.destination, 'a') as authorized_keys:
          authorized_keys.write(text)
    except OSError as e:
      raise exceptions.WriteException(
          e, 'Could not write to [{}].', self.destination)
