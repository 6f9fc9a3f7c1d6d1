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

"""Imports the keys of a batch of users, one user at a time."""

import logging

from . import entities
from . import exceptions
from . import keyserver
from . import validator


def exit_code(results):
  """Returns the number of failed imports in results."""
  return sum(1 for result in results if not result.succeeded)


class KeyImporter(object):
  """Fetches, validates and appends keys for each user in a batch."""

  def __init__(self, url_template, writer, client=None):
    """Inits the KeyImporter.

    Args:
      url_template: The keyserver URL for unprefixed identifiers, containing
        one '%s' placeholder.
      writer: The authorized_keys.AuthorizedKeysWriter receiving valid keys.
      client: The keyserver.KeyserverClient used for fetching.
    """
    self._logger = logging.getLogger(__name__)
    self._url_template = url_template
    self._writer = writer
    self._client = client or keyserver.KeyserverClient()

  def import_user(self, user_id):
    """Imports the keys of a single user.

    Fetch and validation failures are reported and returned as an
    unsuccessful result.

    Returns:
      An entities.ImportResult.

    Raises:
      exceptions.WriteException: Validated keys could not be written.
    """
    url, response_type = keyserver.resolve_url(user_id, self._url_template)
    try:
      raw_text = self._client.fetch(user_id, url, response_type)
      validation = validator.validate_keys(raw_text)
      if not validation.accepted:
        raise exceptions.ValidationException(
            user_id, url, 'Invalid keys for [{}] at [{}]', user_id, url)
    except exceptions.FetchException as e:
      self._logger.warning('Unable to retrieve keys for [%s] at [%s]: %s',
                           user_id, url, e)
      return entities.ImportResult(user_id, url, False, ())
    except exceptions.ValidationException as e:
      self._logger.warning('%s', e)
      return entities.ImportResult(user_id, url, False, ())

    self._writer.append(validation.text)
    for record in validation.records:
      self._logger.debug('Authorized key: [%s %s].', record.key_type,
                         record.comment)
    self._logger.info('Successfully authorized [%s]', user_id)
    return entities.ImportResult(user_id, url, True, validation.records)

  def import_users(self, user_ids):
    """Imports each user in order. Returns a list of ImportResults."""
    return [self.import_user(user_id) for user_id in user_ids]
