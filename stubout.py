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

"""Install mocks on modules, classes and instances, and put things back.

  stubs = stubout.StubOutForTesting()
  listdir = stubs.StubOutWithMock(os, 'listdir', lambda path: [],
                                  callcount.Exactly(1))
  ...
  stubs.SmartUnsetAll()
"""

import callcount


class StubOutForTesting(object):
  """Replaces attributes for the duration of a test.

  Set/UnsetAll is the simple pair: it swaps the attribute where it is looked
  up and writes the old value back.  SmartSet/SmartUnsetAll also handles
  attributes a class inherits, and removes the override afterwards instead
  of copying the inherited value onto the subclass.
  """

  def __init__(self):
    self.cache = []
    self.stubs = []

  def __del__(self):
    self.SmartUnsetAll()
    self.UnsetAll()

  def Set(self, parent, child_name, new_child):
    """Replace child_name's old definition with new_child.

    When parent defines child_name itself, staticmethod and classmethod
    wrappers are kept so UnsetAll restores the attribute exactly.  An
    inherited attribute is written back onto parent as the value lookup
    returned (a classmethod comes back bound); use SmartSet to have the
    override removed instead.

    Raises:
      AttributeError: parent has no attribute child_name.
    """
    old_child = getattr(parent, child_name)
    old_attribute = getattr(parent, '__dict__', {}).get(child_name)
    if isinstance(old_attribute, (staticmethod, classmethod)):
      old_child = old_attribute
    self.cache.append((parent, old_child, child_name))
    setattr(parent, child_name, new_child)

  def UnsetAll(self):
    """Undo every Set, most recent first."""
    for parent, old_child, child_name in reversed(self.cache):
      setattr(parent, child_name, old_child)
    self.cache = []

  def SmartSet(self, obj, attr_name, new_attr):
    """Replace obj.attr_name with new_attr, remembering how to undo it.

    If the attribute is inherited (from a base class, or from the class of
    an instance) the override is deleted on SmartUnsetAll, so lookup falls
    through to the original definition again.

    Raises:
      AttributeError: attr_name cannot be found on obj.
    """
    getattr(obj, attr_name)
    own = getattr(obj, '__dict__', {})
    if attr_name in own:
      self.stubs.append((obj, attr_name, True, own[attr_name]))
    else:
      self.stubs.append((obj, attr_name, False, None))
    setattr(obj, attr_name, new_attr)

  def SmartUnsetAll(self):
    """Undo every SmartSet, most recent first."""
    for obj, attr_name, was_own, old_attr in reversed(self.stubs):
      if was_own:
        setattr(obj, attr_name, old_attr)
      else:
        delattr(obj, attr_name)
    self.stubs = []

  def StubOutWithMock(self, obj, attr_name, stub=None, pattern=None):
    """SmartSet a callcount.Mock in place of obj.attr_name.

    Without a stub the mock spies: it counts calls and hands them to the
    original attribute.  Spy on a module or an instance; on a class the
    original is the plain function and would be called without self.

    Args:
      # obj: module, class or instance that owns the attribute.
      # attr_name: the attribute to replace.
      # stub: replacement behaviour, or None to spy on the original.
      # pattern: expected number of calls.
      obj: object
      attr_name: str
      stub: callable
      pattern: callcount.CallPattern

    Returns:
      The installed callcount.Mock.
    """
    original = getattr(obj, attr_name)
    if stub is None:
      if not callable(original):
        raise TypeError('Cannot spy on %s.%s: %r is not callable' %
                        (obj, attr_name, original))
      stub = original
    mock = callcount.Mock(stub, pattern)
    mock.original = original
    self.SmartSet(obj, attr_name, mock)
    return mock
