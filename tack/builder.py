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

"""Build a list (or tuple) by combining collections and individual items.

    from tack.builder import CollectionBuilder

    names = (CollectionBuilder(distinct=True, key=sequences.casefold)
             .append(from_config, from_env)
             .add('admin')
             .sort()
             .render_to_list())

A builder accumulates items until it is rendered. Rendering sorts first and
then reduces to distinct values (in that order) and closes the builder to
further changes; rendering again returns the same result.
"""

import enum
import functools

from tack import exceptions
from tack import log
from tack import sequences

LOG = log.getLogger(__name__)


class ListSorter(object):

    """Sorts a collection by key function, comparison function or naturally.

    :keyword key: a callable returning the sort key for an element
    :keyword cmp: an old-style comparison function returning <0, 0 or >0
    :keyword reverse: sort descending
    """

    def __init__(self, key=None, cmp=None, reverse=False):
        if key is not None and cmp is not None:
            raise exceptions.ValidationError(
                "ListSorter accepts either 'key' or 'cmp', not both")
        self.key = key
        self.cmp = cmp
        self.reverse = reverse

    def __repr__(self):
        return ('ListSorter(key=%r, cmp=%r, reverse=%r)'
                % (self.key, self.cmp, self.reverse))

    def sort(self, collection):
        """Return a new sorted list (`None` stays `None`)."""
        if collection is None:
            return None
        if self.key is not None:
            LOG.debug("sorting by key function %r", self.key)
            key = self.key
        elif self.cmp is not None:
            LOG.debug("sorting by comparison function %r", self.cmp)
            key = functools.cmp_to_key(self.cmp)
        else:
            LOG.debug("sorting by natural order")
            key = None
        return sorted(collection, key=key, reverse=self.reverse)


class BuilderState(enum.Enum):

    """Lifecycle of a :class:`CollectionBuilder`."""

    ACCUMULATING = 'accumulating'
    RENDERED = 'rendered'


class CollectionBuilder(object):

    """Accumulates items and renders them to a final list or tuple.

    :param collection: optional initial items
    :keyword sorter: optional :class:`ListSorter` applied on render
    :keyword distinct: reduce the result to distinct values on render
    :keyword key: optional equality key used with `distinct` (and by the
        containment queries)
    """

    def __init__(self, collection=None, sorter=None, distinct=False,
                 key=None):
        self._items = sequences.combine(collection)
        self.sorter = sorter
        self.distinct = distinct
        self.key = key
        self.state = BuilderState.ACCUMULATING

    def __len__(self):
        return len(self._items)

    def __repr__(self):
        return ('<CollectionBuilder %s items=%d distinct=%s>'
                % (self.state.value, len(self._items), self.distinct))

    def _check_accumulating(self):
        if self.state is not BuilderState.ACCUMULATING:
            raise exceptions.BuilderStateError(
                "CollectionBuilder has already been rendered")

    def add(self, *items, condition=None):
        """Append one or more items."""
        self._check_accumulating()
        sequences.append_in_place(self._items, *items, condition=condition)
        return self

    def append(self, *collections, condition=None):
        """Append the contents of one or more collections (`None` skipped)."""
        self._check_accumulating()
        sequences.append_collections_in_place(self._items, *collections,
                                              condition=condition)
        return self

    def insert(self, index, *items, condition=None):
        """Insert one or more items at `index`."""
        self._check_accumulating()
        sequences.insert_in_place(self._items, index, *items,
                                  condition=condition)
        return self

    def insert_collections(self, index, *collections, condition=None):
        """Insert the collections consecutively, starting at `index`."""
        self._check_accumulating()
        sequences.insert_collections_in_place(self._items, index,
                                              *collections,
                                              condition=condition)
        return self

    def prepend(self, *items, condition=None):
        """Insert one or more items at the start."""
        return self.insert(0, *items, condition=condition)

    def prepend_collections(self, *collections, condition=None):
        """Insert the collections, in order, at the start."""
        return self.insert_collections(0, *collections, condition=condition)

    def sort(self, key=None, cmp=None, reverse=False, sorter=None):
        """Sort the result on render (see :class:`ListSorter`)."""
        self._check_accumulating()
        self.sorter = sorter or ListSorter(key=key, cmp=cmp, reverse=reverse)
        return self

    def _query_source(self):
        if self.distinct:
            return sequences.distinct(self._items, key=self.key)
        return self._items

    def contains_any(self, items=None):
        """Check the accumulated items for any of `items`."""
        return sequences.contains_any(self._query_source(), items,
                                      key=self.key)

    def contains_all(self, items):
        """Check the accumulated items for every one of `items`."""
        return sequences.contains_all(self._query_source(), items,
                                      key=self.key)

    def _render(self, sorter=None, distinct=False, key=None):
        sorter = sorter or self.sorter
        result = list(self._items)
        if sorter is not None:
            result = sorter.sort(result)
        if distinct or self.distinct:
            result = sequences.distinct(result, key=key or self.key)
        self.state = BuilderState.RENDERED
        return result

    def render_to_list(self, sorter=None, distinct=False, key=None):
        """Return the final collection as a list.

        The arguments override (or add to) the builder's own settings for
        this render only.
        """
        return self._render(sorter=sorter, distinct=distinct, key=key)

    def render_to_tuple(self, sorter=None, distinct=False, key=None):
        """Return the final collection as a tuple."""
        return tuple(self._render(sorter=sorter, distinct=distinct, key=key))
