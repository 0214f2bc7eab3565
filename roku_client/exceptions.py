#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

from typing import Optional, Any

class RokuError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class RokuDiscoveryTimeoutError(RokuError):
  """No Roku device answered a discovery request before the timeout elapsed."""
  timeout: float

  def __init__(self, timeout: float, msg: Optional[str]=None):
    if msg is None:
      msg = f"No Roku device responded to discovery within {timeout} seconds"
    super().__init__(msg)
    self.timeout = timeout

class RokuTransportError(RokuError):
  """An ECP HTTP request returned a non-success status."""
  method: str
  endpoint: str
  status: int
  reason: str

  def __init__(self, method: str, endpoint: str, status: int, reason: Optional[str]=None):
    self.method = method
    self.endpoint = endpoint
    self.status = status
    self.reason = '' if reason is None else reason
    super().__init__(f"Failed to {method} {endpoint}: {status} {self.reason}".rstrip())

class RokuMalformedResponseError(RokuError):
  """A device response did not have the expected structure."""
  count: Optional[int]

  def __init__(self, msg: str, count: Optional[int]=None):
    super().__init__(msg)
    self.count = count

class RokuCommandChainError(RokuError):
  """A step of a Commander chain failed. The original exception is chained as __cause__."""
  index: int
  entry: Any

  def __init__(self, index: int, entry: Any, cause: BaseException):
    super().__init__(f"Command chain failed at step {index} ({entry}): {cause}")
    self.index = index
    self.entry = entry
