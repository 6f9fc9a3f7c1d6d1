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

"""Exceptions raised by the ssh_import_id module."""


class ImportIdException(Exception):
  """Base class for exceptions raised while importing SSH keys."""

  def __init__(self, format_string, *args, **kwargs):
    super(ImportIdException, self).__init__()
    self.message = format_string.format(*args, **kwargs)

  def __str__(self):
    return self.message


class StartupException(ImportIdException):
  """The import cannot begin: bad configuration or unusable destination."""


class FetchException(ImportIdException):
  """An error occured while retrieving keys from the keyserver."""

  def __init__(self, inner_exception, user_id, url, format_string, *args,
               **kwargs):
    super(FetchException, self).__init__(format_string, *args, **kwargs)
    if inner_exception is not None:
      self.message += '\n{}: {}'.format(type(inner_exception).__name__,
                                        inner_exception)
    self.inner_exception = inner_exception
    self.user_id = user_id
    self.url = url


class NotFoundException(FetchException):
  """The keyserver has no keys for the requested user."""


class ValidationException(ImportIdException):
  """The keyserver response is not a well-formed list of public keys."""

  def __init__(self, user_id, url, format_string, *args, **kwargs):
    super(ValidationException, self).__init__(format_string, *args, **kwargs)
    self.user_id = user_id
    self.url = url


class WriteException(ImportIdException):
  """Validated keys could not be written to the destination."""

  def __init__(self, inner_exception, format_string, *args, **kwargs):
    super(WriteException, self).__init__(format_string, *args, **kwargs)
    self.message += '\n{}: {}'.format(type(inner_exception).__name__,
                                      inner_exception)
    self.inner_exception = inner_exception
