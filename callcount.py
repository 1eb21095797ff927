#!/usr/bin/env python
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Call counting mocks with declarative call patterns.

A Mock wraps a stub function and counts how often it is invoked.  Each mock
carries a CallPattern describing how many calls the test expects.  Verify
compares the two and returns a result instead of raising, so the caller
decides how to report a mismatch.

Suggested usage:

  # Build a mock that must be called at least once.
  fetch = callcount.Mock(lambda url: '<html/>', callcount.AtLeast(1))

  # Hand it to the code under test in place of the real function.
  page_loader = PageLoader(fetch=fetch)
  page_loader.Load('http://example.com')

  # Check the expectation.
  ok, message = fetch.Verify()
  self.assertTrue(ok, message)
"""

import collections
import inspect
import threading


class Error(AssertionError):
  """Base exception for this module."""

  pass


class UnconfiguredStubError(Error):
  """Raised when a mock without a stub is called."""

  def __init__(self, mock):
    """Init exception.

    Args:
      # mock: the mock that was called before a stub was assigned.
      mock: Mock
    """
    Error.__init__(self)
    self._mock = mock

  def __str__(self):
    return ('%r was called before a stub was assigned; set mock.stub or call '
            'Configure() first' % (self._mock,))


_NONE = 'None'
_ANY_NUMBER = 'AnyNumber'
_AT_LEAST = 'AtLeast'
_AT_MOST = 'AtMost'
_EXACTLY = 'Exactly'


class CallPattern(collections.namedtuple('CallPattern', ['kind', 'count'])):
  """An expectation over how many times a mock is called.

  Build these with NoCalls, AnyNumber, AtLeast, AtMost or Exactly rather than
  directly.
  """

  __slots__ = ()

  def Matches(self, observed_count):
    return Matches(self, observed_count)

  def __str__(self):
    if self.count is None:
      return self.kind
    return '%s(%d)' % (self.kind, self.count)


def _Bounded(kind, n):
  if isinstance(n, bool) or not isinstance(n, int):
    raise ValueError('%s expects an int, got %r' % (kind, n))
  if n < 0:
    raise ValueError('%s expects a non-negative count, got %d' % (kind, n))
  return CallPattern(kind, n)


def NoCalls():
  """Expect the mock never to be called."""
  return CallPattern(_NONE, None)


def AnyNumber():
  """Place no constraint on the number of calls."""
  return CallPattern(_ANY_NUMBER, None)


def AtLeast(n):
  return _Bounded(_AT_LEAST, n)


def AtMost(n):
  return _Bounded(_AT_MOST, n)


def Exactly(n):
  return _Bounded(_EXACTLY, n)


def Matches(pattern, observed_count):
  """Check an observed call count against a pattern.

  Args:
    # pattern: the expectation.
    # observed_count: how many calls were recorded.
    pattern: CallPattern
    observed_count: int

  Returns:
    True if the count satisfies the pattern.

  Raises:
    ValueError: the pattern has a kind this function does not know.
  """
  kind = pattern.kind
  if kind == _NONE:
    return observed_count == 0
  if kind == _ANY_NUMBER:
    return True
  if kind == _AT_LEAST:
    return observed_count >= pattern.count
  if kind == _AT_MOST:
    return observed_count <= pattern.count
  if kind == _EXACTLY:
    return observed_count == pattern.count
  raise ValueError('Unknown call pattern kind: %r' % (kind,))


VerifyResult = collections.namedtuple('VerifyResult', ['ok', 'message'])


def CallerLocation(depth=1):
  """Return 'file:line' for a frame above the caller.

  Args:
    # depth: 1 names the caller of CallerLocation, 2 its caller, and so on.
    depth: int

  Raises:
    ValueError: the stack is shallower than depth.
  """
  frame = inspect.currentframe()
  try:
    for _ in range(depth):
      frame = frame.f_back
      if frame is None:
        raise ValueError('depth %d reaches past the outermost frame' % depth)
    return '%s:%d' % (frame.f_code.co_filename, frame.f_lineno)
  finally:
    del frame


def _Checked(pattern):
  if not isinstance(pattern, CallPattern):
    raise ValueError('Expected a CallPattern, got %r' % (pattern,))
  return pattern


def _NoOp(*args, **kwargs):
  return None


class Mock(object):
  """A stand-in for a function that counts how often it is called.

  The mock is callable, so it can replace a function, a bound method or a
  callback wherever the code under test expects one.
  """

  def __init__(self, stub, pattern=None):
    """Initialize a mock.

    Args:
      # stub: called with the arguments of every call; its result is
      #     returned unchanged.
      # pattern: expected number of calls, AnyNumber() if omitted.
      stub: callable
      pattern: CallPattern
    """
    self.original = None
    self.stub = stub
    if pattern is None:
      pattern = AnyNumber()
    self._expected_calls = _Checked(pattern)
    self.number_of_calls = 0
    self._lock = threading.Lock()

  @property
  def expected_calls(self):
    """The CallPattern fixed at construction, or None for a MockOf mock."""
    return self._expected_calls

  def Configure(self, stub, pattern=None):
    """Assign a stub and optionally an expectation; returns self.

    A pattern can only be given to a mock declared with MockOf that has none
    yet.  Once set, the expectation never changes.

    Raises:
      Error: the mock already has an expected pattern.
      ValueError: pattern is not a CallPattern.
    """
    if pattern is not None:
      if self._expected_calls is not None:
        raise Error('%r already expects %s' % (self, self._expected_calls))
      self._expected_calls = _Checked(pattern)
    self.stub = stub
    return self

  def Call(self, *args, **kwargs):
    """Record a call and delegate to the stub.

    The call is counted before the stub runs, so a stub that raises (or a
    missing stub) still counts.

    Raises:
      UnconfiguredStubError: no stub has been assigned.
    """
    with self._lock:
      self.number_of_calls += 1
    if self.stub is None:
      raise UnconfiguredStubError(self)
    return self.stub(*args, **kwargs)

  __call__ = Call

  def Verify(self, location=None):
    """Compare the recorded calls against the expected pattern.

    Args:
      # location: optional call-site identity, e.g. 'foo_test.py:42', put in
      #     front of the failure message.
      location: str

    Returns:
      VerifyResult(ok, message).  message is '' when ok is True.
    """
    with self._lock:
      observed = self.number_of_calls
    pattern = self.expected_calls
    if pattern is None:
      pattern = AnyNumber()

    if Matches(pattern, observed):
      return VerifyResult(True, '')

    message = '%d %s does not match expected pattern %s' % (
        observed, 'call' if observed == 1 else 'calls', pattern)
    if location is not None:
      message = '%s: %s' % (location, message)
    return VerifyResult(False, message)

  def __repr__(self):
    stub_name = getattr(self.stub, '__name__', repr(self.stub))
    expected = self.expected_calls
    if expected is None:
      expected = 'unset'
    return '<Mock stub=%s calls=%d expected=%s>' % (
        stub_name, self.number_of_calls, expected)


def NoOpMock(pattern=None):
  """Mock for a method that takes and returns nothing."""
  return Mock(_NoOp, pattern)


def ReturningMock(value, pattern=None):
  """Mock that ignores its arguments and always returns value."""
  def Stub(*args, **kwargs):
    return value
  Stub.__name__ = 'Returning(%r)' % (value,)
  return Mock(Stub, pattern)


def MockOf(original):
  """Declare a mock for original without configuring it yet.

  The mock remembers original but has no stub and no expectation.  Calling it
  raises UnconfiguredStubError until a stub is assigned.

  Args:
    # original: the real function or method being mocked.
    original: callable
  """
  mock = Mock(None)
  mock.original = original
  mock._expected_calls = None
  return mock


def VerifyAll(*mocks, location=None):
  """Verify every mock, collecting all mismatches.

  Args:
    # mocks: the mocks to check.
    # location: optional call-site identity applied to every message.
    mocks: Mock
    location: str

  Returns:
    VerifyResult.  ok is True only if every mock matched; message lists one
    failure per line.
  """
  failures = []
  for index, mock in enumerate(mocks):
    result = mock.Verify(location)
    if not result.ok:
      failures.append('  %d.  %r: %s' % (index, mock, result.message))

  if not failures:
    return VerifyResult(True, '')
  return VerifyResult(False, 'Verify: call patterns not met:\n' +
                      '\n'.join(failures))
