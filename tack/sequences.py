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

"""Helpers for sequences (`list`, `tuple` and other iterables).

Conventions used throughout this module:

- A `None` source collection is treated exactly like an empty one.
- Functions named `<op>` never touch their input; they return a new `list`
  (or the original object, untouched, when there is nothing to do).
- Functions named `<op>_in_place` take a `list` owned by the caller, mutate
  it and return it.
- Where equality matters, an optional `key` callable maps each element to the
  value that is compared (and hashed). Use :func:`casefold` for
  case-insensitive text comparisons.

    >>> pad(['a', 'b'], 4, boundary=Boundary.END, pad_with='-')
    ['a', 'b', '-', '-']
    >>> prune([None, 'a', None, 'b', None], PruneOptions.LEADING)
    ['a', None, 'b', None]
"""

import collections.abc
import enum

from tack import exceptions


class Boundary(enum.Enum):

    """Where padding or cropping happens."""

    START = 'start'
    END = 'end'


class PruneOptions(enum.Flag):

    """Which runs of `None` elements :func:`prune` removes."""

    LEADING = 1
    INNER = 2
    TRAILING = 4
    ALL = 7


def casefold(value):
    """Equality key for case-insensitive comparison of text elements."""
    if isinstance(value, str):
        return value.casefold()
    return value


def _as_list(collection):
    """Return a new list from any iterable (`None` gives an empty list)."""
    if collection is None:
        return []
    return list(collection)


def _require_list(items):
    if not isinstance(items, collections.abc.MutableSequence):
        raise exceptions.ValidationError(
            "An in-place operation requires a mutable sequence, got %s"
            % type(items).__name__)
    return items


def _equals(left, right, key=None):
    if key is None:
        return left == right
    return key(left) == key(right)


def _as_predicate(condition):
    """Normalize a condition (None, bool or callable) to a predicate."""
    if condition is None or callable(condition):
        return condition
    if condition:
        return lambda item: True
    return lambda item: False


def _select(items, condition):
    predicate = _as_predicate(condition)
    if predicate is None:
        return list(items)
    return [item for item in items if predicate(item)]


def _flatten(collections):
    flat = []
    for collection in collections:
        if collection is not None:
            flat.extend(collection)
    return flat


def distinct(collection, key=None):
    """Return the distinct values of `collection`, first occurrence wins.

    Unhashable values are supported (with a linear scan).

    :param collection: an iterable (or `None`)
    :keyword key: optional callable producing the value used for equality
    """
    seen = set()
    seen_unhashable = []
    result = []
    for item in collection or ():
        marker = key(item) if key is not None else item
        try:
            if marker in seen:
                continue
            seen.add(marker)
        except TypeError:
            if marker in seen_unhashable:
                continue
            seen_unhashable.append(marker)
        result.append(item)
    return result


#
# Pad / Crop / Fit
#

def pad_in_place(items, target_size, boundary=Boundary.START, pad_with=None,
                 cannot_exceed=False):
    """Pad a list with `pad_with` at `boundary` until it is `target_size` long.

    :param items: the list to pad (modified)
    :param target_size: the desired length
    :keyword boundary: a :class:`Boundary`
    :keyword pad_with: the value to insert
    :keyword cannot_exceed: if true, a list already longer than
        `target_size` is an error rather than being left alone
    :raises ValidationError: if `target_size` is negative
    :raises SizeConflictError: if `cannot_exceed` and the list is too long
    """
    _require_list(items)
    if target_size < 0:
        raise exceptions.ValidationError(
            "target_size cannot be a negative number")
    if cannot_exceed and len(items) > target_size:
        raise exceptions.SizeConflictError(
            "source collection already exceeds target size (%d > %d)"
            % (len(items), target_size))
    shortfall = target_size - len(items)
    if shortfall > 0:
        padding = [pad_with] * shortfall
        if boundary is Boundary.END:
            items.extend(padding)
        else:
            items[0:0] = padding
    return items


def pad(collection, target_size, boundary=Boundary.START, pad_with=None,
        cannot_exceed=False):
    """Return a padded copy of `collection`. See :func:`pad_in_place`."""
    return pad_in_place(_as_list(collection), target_size, boundary=boundary,
                        pad_with=pad_with, cannot_exceed=cannot_exceed)


def crop_in_place(items, target_size, boundary=Boundary.START):
    """Remove elements at `boundary` until the list is `target_size` long.

    :raises ValidationError: if `target_size` is negative
    """
    _require_list(items)
    if target_size < 0:
        raise exceptions.ValidationError(
            "target_size cannot be a negative number")
    excess = len(items) - target_size
    if excess > 0:
        if boundary is Boundary.END:
            del items[target_size:]
        else:
            del items[:excess]
    return items


def crop(collection, target_size, boundary=Boundary.START):
    """Return a cropped copy of `collection`. See :func:`crop_in_place`."""
    return crop_in_place(_as_list(collection), target_size, boundary=boundary)


def fit_in_place(items, target_size, crop_boundary=Boundary.START,
                 pad_boundary=Boundary.START, pad_with=None):
    """Crop the list if it is too long, otherwise pad it. Never both."""
    _require_list(items)
    if len(items) > target_size:
        return crop_in_place(items, target_size, boundary=crop_boundary)
    return pad_in_place(items, target_size, boundary=pad_boundary,
                        pad_with=pad_with)


def fit(collection, target_size, crop_boundary=Boundary.START,
        pad_boundary=Boundary.START, pad_with=None):
    """Return a copy of `collection` cropped or padded to `target_size`."""
    return fit_in_place(_as_list(collection), target_size,
                        crop_boundary=crop_boundary,
                        pad_boundary=pad_boundary, pad_with=pad_with)


#
# Append / Prepend / Insert
#
# `condition` may be a bool or a predicate called with each candidate item;
# items it rejects are skipped. When nothing is left to add the source is
# returned as is (an absent source becomes an empty list).
#

def _insert_at(items, index, additions):
    if index < 0 or index > len(items):
        raise exceptions.ValidationError(
            "index %d is out of range for a collection of length %d"
            % (index, len(items)))
    items[index:index] = additions
    return items


def append(collection, *items, condition=None):
    """Return `collection` followed by `items`.

    :keyword condition: a bool or a predicate applied to each item
    """
    additions = _select(items, condition)
    if not additions:
        return collection if collection is not None else []
    return _as_list(collection) + additions


def append_in_place(items, *new_items, condition=None):
    """Extend the list `items` with `new_items` and return it."""
    _require_list(items)
    items.extend(_select(new_items, condition))
    return items


def append_collections(collection, *collections, condition=None):
    """Return `collection` followed by the contents of each collection.

    `None` entries in `collections` are skipped.
    """
    return append(collection, *_flatten(collections), condition=condition)


def append_collections_in_place(items, *collections, condition=None):
    """Extend the list `items` with the contents of each collection."""
    return append_in_place(items, *_flatten(collections), condition=condition)


def insert(collection, index, *items, condition=None):
    """Return a copy of `collection` with `items` inserted at `index`.

    :raises ValidationError: if `index` is outside ``0..len(collection)``
    """
    additions = _select(items, condition)
    if not additions:
        return collection if collection is not None else []
    return _insert_at(_as_list(collection), index, additions)


def insert_in_place(items, index, *new_items, condition=None):
    """Insert `new_items` into the list `items` at `index` and return it."""
    _require_list(items)
    additions = _select(new_items, condition)
    if not additions:
        return items
    return _insert_at(items, index, additions)


def insert_collections_in_place(items, index, *collections, condition=None):
    """Insert each collection into `items`, one after the other.

    The first collection goes in at `index`; the cursor then advances by the
    length of whatever was inserted.
    """
    _require_list(items)
    if index < 0 or index > len(items):
        raise exceptions.ValidationError(
            "index %d is out of range for a collection of length %d"
            % (index, len(items)))
    cursor = index
    for collection in collections:
        if collection is None:
            continue
        additions = _select(collection, condition)
        items[cursor:cursor] = additions
        cursor += len(additions)
    return items


def insert_collections(collection, index, *collections, condition=None):
    """Return a copy of `collection` with each collection inserted in turn."""
    if not _select(_flatten(collections), condition):
        return collection if collection is not None else []
    return insert_collections_in_place(_as_list(collection), index,
                                       *collections, condition=condition)


def prepend(collection, *items, condition=None):
    """Return `items` followed by `collection`."""
    return insert(collection, 0, *items, condition=condition)


def prepend_in_place(items, *new_items, condition=None):
    """Insert `new_items` at the start of the list `items`."""
    return insert_in_place(items, 0, *new_items, condition=condition)


def prepend_collections(collection, *collections, condition=None):
    """Return the contents of each collection followed by `collection`."""
    return insert_collections(collection, 0, *collections, condition=condition)


def prepend_collections_in_place(items, *collections, condition=None):
    """Insert each collection at the start of `items`, in order."""
    return insert_collections_in_place(items, 0, *collections,
                                       condition=condition)


#
# Trim / Zap / Prune
#

def _trim(value):
    if isinstance(value, str):
        return value.strip()
    return value


def zap(value):
    """Trim a string and turn a blank result into `None`.

    Non-text values are returned unchanged.
    """
    value = _trim(value)
    if isinstance(value, str) and not value:
        return None
    return value


def trim_all(collection):
    """Return a copy of `collection` with every text element stripped."""
    return [_trim(item) for item in collection or ()]


def trim_all_in_place(items):
    """Strip every text element of the list `items`."""
    _require_list(items)
    for index, item in enumerate(items):
        items[index] = _trim(item)
    return items


def prune(collection, prune_options=PruneOptions.ALL):
    """Return a copy of `collection` with runs of `None` removed.

    :param collection: an iterable (or `None`)
    :keyword prune_options: :class:`PruneOptions` flags:
        LEADING removes the `None` elements before the first present element,
        TRAILING removes those after the last present element and INNER
        removes those between the first and last present elements.
    """
    if prune_options is None:
        prune_options = PruneOptions.ALL
    items = _as_list(collection)
    present = [index for index, item in enumerate(items) if item is not None]
    if not present:
        if prune_options & (PruneOptions.LEADING | PruneOptions.TRAILING):
            return []
        return items
    first, last = present[0], present[-1]
    leading = items[:first]
    inner = items[first:last + 1]
    trailing = items[last + 1:]
    if prune_options & PruneOptions.LEADING:
        leading = []
    if prune_options & PruneOptions.INNER:
        inner = [item for item in inner if item is not None]
    if prune_options & PruneOptions.TRAILING:
        trailing = []
    return leading + inner + trailing


def zap_all(collection, prune_options=None):
    """Trim every element, turn blanks into `None` and optionally prune.

    >>> zap_all([' ', 'x ', None])
    [None, 'x', None]
    """
    zapped = [zap(item) for item in collection or ()]
    if prune_options:
        return prune(zapped, prune_options=prune_options)
    return zapped


#
# Replace / equality / containment
#

def replace_all(collection, match, replacement, key=None):
    """Replace every element equal to `match` with `replacement`.

    A mutable sequence is modified in place and returned. Any other iterable
    is first copied into a new list.

    :keyword key: optional callable producing the value used for equality
    """
    if collection is None:
        return []
    if not isinstance(collection, collections.abc.MutableSequence):
        collection = list(collection)
    for index, item in enumerate(collection):
        if _equals(item, match, key=key):
            collection[index] = replacement
    return collection


def contains(collection, item, key=None):
    """Check whether `collection` has an element equal to `item`."""
    if collection is None:
        return False
    return any(_equals(element, item, key=key) for element in collection)


def _markers(collection, key=None):
    if key is None:
        return list(collection)
    return [key(item) for item in collection]


def contains_any(collection, items=None, key=None, distinct_only=False):
    """Check whether `collection` has at least one of `items`.

    With no `items` this reports whether `collection` has any elements at
    all. An absent collection never contains anything.

    :keyword distinct_only: reduce `collection` to distinct values before
        searching
    """
    if collection is None:
        return False
    source = distinct(collection, key=key) if distinct_only else collection
    if not items:
        return any(True for _ in source)
    markers = _markers(source, key=key)
    for item in items:
        if (key(item) if key is not None else item) in markers:
            return True
    return False


def contains_all(collection, items, key=None, distinct_only=False):
    """Check whether `collection` has every one of `items`.

    Returns False when either `collection` or `items` is absent or empty.
    """
    if collection is None or not items:
        return False
    collection = _as_list(collection)
    if not collection:
        return False
    source = distinct(collection, key=key) if distinct_only else collection
    markers = _markers(source, key=key)
    for item in distinct(items, key=key):
        if (key(item) if key is not None else item) not in markers:
            return False
    return True


def is_identical(control, compare, key=None, ignore_order=False,
                 distinct_only=False, strict=False):
    """Compare two collections for equality.

    Absent and empty collections are identical to each other.

    :keyword key: optional callable producing the value used for equality
    :keyword ignore_order: compare as multisets; each element of `control`
        consumes one matching element of `compare`
    :keyword distinct_only: reduce both collections to distinct values first
    :keyword strict: with `distinct_only`, raise CollectionLengthError if the
        reduced collections differ in length instead of returning False
    """
    control = _as_list(control)
    compare = _as_list(compare)
    if not control:
        return not compare
    if not compare:
        return False
    if distinct_only:
        control = distinct(control, key=key)
        compare = distinct(compare, key=key)
    if len(control) != len(compare):
        if distinct_only and strict:
            raise exceptions.CollectionLengthError(len(control), len(compare))
        return False
    if not ignore_order:
        return all(_equals(left, right, key=key)
                   for left, right in zip(control, compare))
    remaining = list(compare)
    for left in control:
        for index, right in enumerate(remaining):
            if _equals(left, right, key=key):
                del remaining[index]
                break
        else:
            return False
    return True


def combine(*collections):
    """Combine zero or more collections into a single list.

    `None` collections are skipped.
    """
    return _flatten(collections)


def combine_distinct(*collections, key=None):
    """Combine zero or more collections into a list of distinct values.

    :keyword key: optional callable producing the value used for equality
    """
    return distinct(_flatten(collections), key=key)


def string_dump(collection, separator=", ", n=0, renderer=None):
    """Render a collection on a single line of text.

    :keyword separator: text placed between the rendered items
    :keyword n: render only the first `n` items followed by "<count> more..."
        (all items are rendered when `n` is zero or negative)
    :keyword renderer: optional callable used to render each item
    """
    if collection is None:
        return "[null]"
    items = list(collection)
    if not items:
        return "[empty]"
    render = renderer or (lambda item: '' if item is None else str(item))
    if 0 < n < len(items):
        shown = separator.join(render(item) for item in items[:n])
        return "%s%s%d more..." % (shown, separator, len(items) - n)
    return separator.join(render(item) for item in items)
