# Copyright (c) 2011-2015 Rackspace US, Inc.
# All Rights Reserved.
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

"""Helpers for built-in `dict` class.

Merging: `combine` always builds a new dict while `append` writes into its
first argument. Key collisions are resolved by a :class:`MergeMode`:

    >>> combine({1: 'one', 3: 'three'}, {3: 'tres', 4: 'cuatro'})[3]
    'tres'
    >>> combine_ltr({1: 'one', 3: 'three'}, {3: 'tres', 4: 'cuatro'})[3]
    'three'

or by a `merge` callable, `merge(existing, incoming, key)`, which receives
the dict being built, the dict being merged in and the colliding key and
returns the value to keep.
"""

import enum

from tack import exceptions


class MergeMode(enum.Enum):

    """How key collisions are resolved when merging dicts."""

    ERROR = 'error'
    LTR = 'ltr'  # left to right: the first value seen wins
    RTL = 'rtl'  # right to left: the last value seen wins


def write_path(target, path, value, separator='/'):
    """Write a value deep into a dict building any intermediate keys.

    :param target: a dict to write data to
    :param path: a key or path to a key (path is delimited by `separator`)
    :param value: the value to write to the key
    :keyword separator: the separator used in the path (ex. Could be ":" for
        a configuration style key)
    """
    parts = path.split(separator)
    current = target
    for part in parts[:-1]:
        if part not in current:
            current[part] = current = {}
        else:
            current = current[part]
    current[parts[-1]] = value


def read_path(source, path, separator='/'):
    """Read a value from a dict supporting a deep path as a key.

    :param source: a dict to read data from
    :param path: a key or path to a key (path is delimited by `separator`)
    :keyword separator: the separator used in the path
    """
    parts = path.strip(separator).split(separator)
    current = source
    for part in parts[:-1]:
        if part not in current:
            return
        current = current[part]
        if not isinstance(current, dict):
            return
    return current.get(parts[-1])


def path_exists(source, path, separator='/'):
    """Check a dict for the existence of a value given a path to it.

    :param source: a dict to read data from
    :param path: a key or path to a key (path is delimited by `separator`)
    :keyword separator: the separator used in the path
    """
    if path == separator and isinstance(source, dict):
        return True
    parts = path.strip(separator).split(separator)
    if not parts:
        return False
    current = source
    for part in parts:
        if not isinstance(current, dict):
            return False
        if part not in current:
            return False
        current = current[part]
    return True


def _merge_into(target, mappings, mode=MergeMode.RTL, merge=None):
    """Merge each mapping into target, resolving collisions."""
    for incoming in mappings:
        if incoming is None:
            continue
        for key, value in incoming.items():
            if key not in target:
                target[key] = value
            elif merge is not None:
                target[key] = merge(target, incoming, key)
            elif mode is MergeMode.LTR:
                continue
            elif mode is MergeMode.ERROR:
                raise exceptions.DuplicateKeyError(key)
            else:
                target[key] = value
    return target


def combine(*mappings, mode=MergeMode.RTL, merge=None):
    """Combine zero or more mappings into a new dict.

    None of the mappings are modified. `None` entries are skipped.

    :keyword mode: a :class:`MergeMode`, defaults to right to left (the last
        mapping with a given key wins)
    :keyword merge: optional `merge(existing, incoming, key)` callable that
        resolves collisions instead of `mode`
    :raises DuplicateKeyError: on a collision when mode is ERROR
    """
    return _merge_into({}, mappings, mode=mode, merge=merge)


def combine_ltr(*mappings):
    """Combine mappings; the first value seen for a key wins."""
    return combine(*mappings, mode=MergeMode.LTR)


def combine_rtl(*mappings):
    """Combine mappings; the last value seen for a key wins."""
    return combine(*mappings, mode=MergeMode.RTL)


def append(target, *mappings, mode=MergeMode.RTL, merge=None):
    """Merge zero or more mappings into `target`.

    Note: This updates target and returns it. Nothing is written to target
    unless every mapping merges cleanly.
    """
    if target is None:
        raise exceptions.ValidationError("append requires a target dict")
    merged = _merge_into(dict(target), mappings, mode=mode, merge=merge)
    target.update(merged)
    return target


def append_ltr(target, *mappings):
    """Merge mappings into `target`, keeping values it already has."""
    return append(target, *mappings, mode=MergeMode.LTR)


def append_rtl(target, *mappings):
    """Merge mappings into `target`, overwriting values it already has."""
    return append(target, *mappings, mode=MergeMode.RTL)


def append_if(target, condition, key, value, mode=MergeMode.RTL):
    """Merge `{key: value}` into `target` when `condition` is true.

    `condition` may be a bool or a callable taking `(key, value)`.
    """
    if callable(condition):
        condition = condition(key, value)
    if not condition:
        return target
    return append(target, {key: value}, mode=mode)


def append_if_not_none(target, key, value, mode=MergeMode.RTL):
    """Merge `{key: value}` into `target` unless value is `None`."""
    return append_if(target, value is not None, key, value, mode=mode)


def add_if_unique(target, key, value):
    """Add `key` to `target`, raising DuplicateKeyError if it exists."""
    return append(target, {key: value}, mode=MergeMode.ERROR)


def extract(mapping, key):
    """Remove `key` from `mapping`.

    :returns: a tuple of (found, value); value is `None` when not found
    """
    if mapping is not None and key in mapping:
        return True, mapping.pop(key)
    return False, None


def string_dump(mapping, equals=" = ", separator=", "):
    """Render a dict on a single line of text."""
    if mapping is None:
        return "[null]"
    if not mapping:
        return "[empty]"
    return separator.join('%s%s%s' % (key, equals, value)
                          for key, value in mapping.items())
