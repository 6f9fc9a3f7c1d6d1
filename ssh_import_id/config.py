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

"""Resolves the keyserver URL template used for unprefixed identifiers."""

import logging
import os
import shlex

from . import encoding
from . import exceptions
from . import keyserver

CONFIG_FILE_PATH = '/etc/ssh/ssh_import_id'
URL_VARIABLE = 'URL'
DEFAULT_URL_TEMPLATE = keyserver.LAUNCHPAD_URL_TEMPLATE

_logger = logging.getLogger(__name__)


def _read_config_file(config_path):
  """Returns the URL assigned in a shell style config file, or None.

  The file is parsed, never sourced. Only plain VAR=value assignments are
  understood; the last assignment to URL wins.
  """
  url = None
  try:
    with open(config_path) as config_file:
      for line in config_file:
        for token in shlex.split(line, comments=True):
          name, separator, value = token.partition('=')
          if separator and name == URL_VARIABLE:
            url = value
  except (OSError, ValueError) as e:
    raise exceptions.StartupException(
        'Could not read configuration file [{}]: {}', config_path, e)
  return url


def get_url_template(environ=None, config_path=CONFIG_FILE_PATH):
  """Returns the keyserver URL template.

  The URL environment variable takes precedence over the configuration
  file, which takes precedence over the Launchpad default.

  Raises:
    exceptions.StartupException: The template is empty, does not contain
      exactly one '%s' placeholder or the configuration file cannot be read.
  """
  if environ is None:
    environ = os.environ
  if URL_VARIABLE in environ:
    url, source = environ[URL_VARIABLE], 'environment'
  elif os.path.exists(config_path):
    url, source = _read_config_file(config_path), config_path
  else:
    url = None
  if url is None:
    url, source = DEFAULT_URL_TEMPLATE, 'default'
  _logger.debug('Using URL template [%s] from [%s].', url, source)
  if not url:
    raise exceptions.StartupException('Empty URL template from [{}].', source)
  if url.count(encoding.URL_PLACEHOLDER) != 1:
    raise exceptions.StartupException(
        'URL template [{}] must contain exactly one [{}] placeholder.', url,
        encoding.URL_PLACEHOLDER)
  return url
