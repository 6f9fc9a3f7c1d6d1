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

"""Client for retrieving public SSH keys from a keyserver."""

import logging
import tempfile

from . import encoding
from . import entities
from . import exceptions
from . import response_schemas
import jsonschema
import requests
import simplejson

LAUNCHPAD_URL_TEMPLATE = 'https://launchpad.net/~%s/+sshkeys'
GITHUB_URL_TEMPLATE = 'https://api.github.com/users/%s/keys'
RAW = 'raw'
JSON = 'json'
_FETCH_TIMEOUT_SEC = 10
_CHUNK_SIZE = 8192
_USER_AGENT = 'ssh-import-id'

# Identifiers may name their keyserver with a prefix, e.g. 'gh:octocat'.
_PROTOCOLS = {
    'lp': (LAUNCHPAD_URL_TEMPLATE, RAW),
    'gh': (GITHUB_URL_TEMPLATE, JSON),
}


def resolve_url(user_id, url_template):
  """Returns the request URL and response type for user_id.

  Args:
    user_id: The identifier given on the command line. A known protocol
      prefix selects its keyserver; any other identifier is looked up on
      url_template.
    url_template: The configured keyserver URL containing one '%s'.

  Returns:
    A (url, response_type) tuple, where response_type is RAW or JSON.
  """
  protocol, separator, name = user_id.partition(':')
  if separator and protocol in _PROTOCOLS:
    template, response_type = _PROTOCOLS[protocol]
    return encoding.build_url(template, name), response_type
  return encoding.build_url(url_template, user_id), RAW


class KeyserverClient(object):
  """Class for fetching raw key listings from keyservers."""

  def __init__(self, sanitize_environment=True, timeout=_FETCH_TIMEOUT_SEC):
    """Inits the KeyserverClient.

    Args:
      sanitize_environment: If True, requests ignore configuration inherited
        from the environment (proxy variables, .netrc credentials, CA bundle
        overrides).
      timeout: Seconds to wait on connecting and on each read.
    """
    self._logger = logging.getLogger(__name__)
    self._timeout = timeout
    self._session = requests.Session()
    self._session.trust_env = not sanitize_environment
    self._session.headers['User-Agent'] = _USER_AGENT

  def close(self):
    self._session.close()

  def fetch(self, user_id, url, response_type=RAW):
    """GET the keys for user_id and return them as raw key text.

    Args:
      user_id: The identifier the keys are fetched for. Used for reporting.
      url: The fully resolved request URL.
      response_type: RAW for line based listings, JSON for a list of
        objects carrying a 'key' string.

    Returns:
      The response body with one key per line, not yet validated.

    Raises:
      exceptions.NotFoundException: The keyserver does not know the user.
      exceptions.FetchException: The request failed, timed out, returned a
        non-2xx status or an unparsable JSON document.
    """
    self._logger.info('Fetching keys: [%s].', url)
    try:
      body = self._get(url)
      self._logger.debug('Received response: [%s].', body)
      if response_type == JSON:
        json = simplejson.loads(body)
        jsonschema.validate(json, response_schemas.GITHUB_KEYS_SCHEMA)
        return '\n'.join(entities.json_to_key_lines(json, user_id)) + '\n'
      return body
    except requests.HTTPError as e:
      if e.response.status_code == requests.codes.not_found:
        raise exceptions.NotFoundException(
            None, user_id, url, 'URL not found: [{}]', url)
      raise exceptions.FetchException(
          e, user_id, url, 'Http error while fetching keys: [{}]', url)
    except requests.RequestException as e:
      raise exceptions.FetchException(
          e, user_id, url, 'Error while fetching keys: [{}]', url)
    except simplejson.JSONDecodeError as e:
      raise exceptions.FetchException(
          e, user_id, url, 'Parsing JSON failed: [{}]', url)
    except jsonschema.ValidationError as e:
      raise exceptions.FetchException(
          e, user_id, url, 'Validating JSON failed: [{}]', e.instance)

  def _get(self, url):
    """Sends a single GET and stages the body in a temporary file."""
    with self._session.get(url, timeout=self._timeout, stream=True,
                           verify=True) as response:  # Validate SSL certs.
      response.raise_for_status()
      if not 200 <= response.status_code < 300:
        raise requests.HTTPError(
            'Unexpected status: [{}]'.format(response.status_code),
            response=response)
      with tempfile.TemporaryFile() as staging:
        for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
          staging.write(chunk)
        staging.seek(0)
        return staging.read().decode('utf-8', errors='replace')
