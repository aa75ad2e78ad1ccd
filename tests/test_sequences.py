# pylint: disable=C0103,C0111,R0903,R0904,W0212,W0232

# Copyright 2013-2015 Rackspace US, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for :mod:`tack.sequences`."""

import unittest

from tack import exceptions
from tack import sequences
from tack.sequences import Boundary
from tack.sequences import PruneOptions


class TestPad(unittest.TestCase):

    def test_pad_start_by_default(self):
        self.assertEqual(sequences.pad(['a', 'b'], 4), [None, None, 'a', 'b'])

    def test_pad_end(self):
        result = sequences.pad(['a', 'b'], 4, boundary=Boundary.END,
                               pad_with='-')
        self.assertEqual(result, ['a', 'b', '-', '-'])

    def test_pad_does_not_touch_input(self):
        source = ('a',)
        result = sequences.pad(source, 2)
        self.assertEqual(source, ('a',))
        self.assertEqual(result, [None, 'a'])

    def test_pad_none_collection(self):
        self.assertEqual(sequences.pad(None, 2, pad_with=0), [0, 0])

    def test_pad_longer_is_unchanged(self):
        self.assertEqual(sequences.pad([1, 2, 3], 2), [1, 2, 3])

    def test_pad_cannot_exceed(self):
        with self.assertRaises(exceptions.SizeConflictError):
            sequences.pad([1, 2, 3], 2, cannot_exceed=True)

    def test_pad_negative_size(self):
        with self.assertRaises(exceptions.ValidationError):
            sequences.pad([1], -1)

    def test_pad_in_place(self):
        items = [1]
        result = sequences.pad_in_place(items, 3, boundary=Boundary.END)
        self.assertIs(result, items)
        self.assertEqual(items, [1, None, None])

    def test_in_place_requires_list(self):
        with self.assertRaises(exceptions.ValidationError):
            sequences.pad_in_place((1,), 3)


class TestCrop(unittest.TestCase):

    def test_crop_start_by_default(self):
        self.assertEqual(sequences.crop([1, 2, 3, 4], 2), [3, 4])

    def test_crop_end(self):
        self.assertEqual(sequences.crop([1, 2, 3, 4], 2,
                                        boundary=Boundary.END), [1, 2])

    def test_crop_short_is_unchanged(self):
        self.assertEqual(sequences.crop([1], 3), [1])

    def test_crop_to_zero(self):
        self.assertEqual(sequences.crop([1, 2], 0), [])

    def test_crop_negative_size(self):
        with self.assertRaises(exceptions.ValidationError):
            sequences.crop([1], -2)

    def test_crop_in_place(self):
        items = [1, 2, 3]
        sequences.crop_in_place(items, 1, boundary=Boundary.END)
        self.assertEqual(items, [1])


class TestFit(unittest.TestCase):

    def test_fit_crops(self):
        self.assertEqual(sequences.fit([1, 2, 3], 2,
                                       crop_boundary=Boundary.END), [1, 2])

    def test_fit_pads(self):
        self.assertEqual(sequences.fit([1], 3, pad_boundary=Boundary.END,
                                       pad_with=0), [1, 0, 0])

    def test_fit_exact(self):
        self.assertEqual(sequences.fit([1, 2], 2), [1, 2])

    def test_fit_length_always_matches(self):
        for size in range(5):
            self.assertEqual(len(sequences.fit([1, 2], size)), size)


class TestAppendInsert(unittest.TestCase):

    def test_append(self):
        source = [1, 2]
        result = sequences.append(source, 3, 4)
        self.assertEqual(result, [1, 2, 3, 4])
        self.assertEqual(source, [1, 2])

    def test_append_nothing_returns_source(self):
        source = (1, 2)
        self.assertIs(sequences.append(source), source)
        self.assertEqual(sequences.append(None), [])

    def test_append_condition_false(self):
        source = [1]
        self.assertIs(sequences.append(source, 2, condition=False), source)

    def test_append_condition_true(self):
        self.assertEqual(sequences.append([1], 2, condition=True), [1, 2])

    def test_append_condition_predicate(self):
        result = sequences.append([0], 1, 2, 3, 4,
                                  condition=lambda item: item % 2 == 0)
        self.assertEqual(result, [0, 2, 4])

    def test_append_in_place(self):
        items = [1]
        sequences.append_in_place(items, 2, 3)
        self.assertEqual(items, [1, 2, 3])

    def test_append_collections_skips_none(self):
        result = sequences.append_collections([1], [2, 3], None, (4,))
        self.assertEqual(result, [1, 2, 3, 4])

    def test_append_collections_in_place(self):
        items = []
        sequences.append_collections_in_place(items, 'ab', None, ['c'])
        self.assertEqual(items, ['a', 'b', 'c'])

    def test_insert(self):
        self.assertEqual(sequences.insert([1, 4], 1, 2, 3), [1, 2, 3, 4])

    def test_insert_at_end(self):
        self.assertEqual(sequences.insert([1], 1, 2), [1, 2])

    def test_insert_out_of_range(self):
        with self.assertRaises(exceptions.ValidationError):
            sequences.insert([1], 3, 2)

    def test_insert_in_place(self):
        items = ['a', 'c']
        sequences.insert_in_place(items, 1, 'b')
        self.assertEqual(items, ['a', 'b', 'c'])

    def test_insert_collections_advances(self):
        result = sequences.insert_collections([1, 5], 1, [2, 3], None, [4])
        self.assertEqual(result, [1, 2, 3, 4, 5])

    def test_insert_collections_in_place_condition(self):
        items = [0, 9]
        sequences.insert_collections_in_place(
            items, 1, [1, 2], [3, 4], condition=lambda item: item != 3)
        self.assertEqual(items, [0, 1, 2, 4, 9])

    def test_prepend(self):
        self.assertEqual(sequences.prepend([3], 1, 2), [1, 2, 3])

    def test_prepend_in_place(self):
        items = [2]
        sequences.prepend_in_place(items, 1)
        self.assertEqual(items, [1, 2])

    def test_prepend_collections(self):
        result = sequences.prepend_collections([5], [1, 2], [3, 4])
        self.assertEqual(result, [1, 2, 3, 4, 5])

    def test_prepend_collections_in_place(self):
        items = ['z']
        sequences.prepend_collections_in_place(items, ['x'], None, ['y'])
        self.assertEqual(items, ['x', 'y', 'z'])


class TestTrimZapPrune(unittest.TestCase):

    def test_zap(self):
        self.assertEqual(sequences.zap('  a '), 'a')
        self.assertIsNone(sequences.zap('   '))
        self.assertIsNone(sequences.zap(''))
        self.assertEqual(sequences.zap(5), 5)

    def test_trim_all(self):
        self.assertEqual(sequences.trim_all([' a', 'b ', None, 1]),
                         ['a', 'b', None, 1])

    def test_trim_all_in_place(self):
        items = [' a ']
        sequences.trim_all_in_place(items)
        self.assertEqual(items, ['a'])

    def test_prune_leading(self):
        result = sequences.prune([None, 'a', None, 'b', None],
                                 PruneOptions.LEADING)
        self.assertEqual(result, ['a', None, 'b', None])

    def test_prune_trailing(self):
        result = sequences.prune([None, 'a', None, 'b', None],
                                 PruneOptions.TRAILING)
        self.assertEqual(result, [None, 'a', None, 'b'])

    def test_prune_inner(self):
        result = sequences.prune([None, 'a', None, 'b', None],
                                 PruneOptions.INNER)
        self.assertEqual(result, [None, 'a', 'b', None])

    def test_prune_all(self):
        result = sequences.prune([None, 'a', None, 'b', None])
        self.assertEqual(result, ['a', 'b'])

    def test_prune_combined_flags(self):
        result = sequences.prune([None, 'a', None, 'b', None],
                                 PruneOptions.LEADING | PruneOptions.TRAILING)
        self.assertEqual(result, ['a', None, 'b'])

    def test_prune_all_none(self):
        self.assertEqual(sequences.prune([None, None]), [])
        self.assertEqual(sequences.prune([None, None], PruneOptions.INNER),
                         [None, None])

    def test_prune_none(self):
        self.assertEqual(sequences.prune(None), [])

    def test_zap_all(self):
        self.assertEqual(sequences.zap_all([' ', 'x ', None]),
                         [None, 'x', None])

    def test_zap_all_pruned(self):
        result = sequences.zap_all([' ', 'x ', '', 'y', None],
                                   prune_options=PruneOptions.ALL)
        self.assertEqual(result, ['x', 'y'])


class TestEquality(unittest.TestCase):

    def test_replace_all_in_place(self):
        items = ['a', 'B', 'b']
        result = sequences.replace_all(items, 'b', 'c',
                                       key=sequences.casefold)
        self.assertIs(result, items)
        self.assertEqual(items, ['a', 'c', 'c'])

    def test_replace_all_tuple(self):
        self.assertEqual(sequences.replace_all((1, 2, 1), 1, 0), [0, 2, 0])

    def test_contains(self):
        self.assertTrue(sequences.contains(['a', 'B'], 'b',
                                           key=sequences.casefold))
        self.assertFalse(sequences.contains(['a', 'B'], 'b'))
        self.assertFalse(sequences.contains(None, 'b'))

    def test_contains_any(self):
        self.assertTrue(sequences.contains_any([1, 2, 3], [5, 3]))
        self.assertFalse(sequences.contains_any([1, 2, 3], [5, 6]))

    def test_contains_any_no_items(self):
        self.assertTrue(sequences.contains_any([1]))
        self.assertFalse(sequences.contains_any([]))
        self.assertFalse(sequences.contains_any(None))

    def test_contains_all(self):
        self.assertTrue(sequences.contains_all([1, 2, 3], [3, 1]))
        self.assertFalse(sequences.contains_all([1, 2, 3], [3, 4]))

    def test_contains_all_empty(self):
        self.assertFalse(sequences.contains_all([], [1]))
        self.assertFalse(sequences.contains_all([1], []))
        self.assertFalse(sequences.contains_all(None, None))

    def test_contains_all_iterator(self):
        self.assertTrue(sequences.contains_all(iter([1, 2, 3]), [1]))
        self.assertTrue(sequences.contains_all((n for n in (1, 2, 3)),
                                               [3, 1], distinct_only=True))
        self.assertFalse(sequences.contains_all(iter([]), [1]))

    def test_is_identical_ordered(self):
        self.assertTrue(sequences.is_identical([1, 2, 3], (1, 2, 3)))
        self.assertFalse(sequences.is_identical([1, 2, 3], [3, 2, 1]))

    def test_is_identical_ignore_order(self):
        self.assertTrue(sequences.is_identical([1, 2, 3], [3, 2, 1],
                                               ignore_order=True))
        self.assertFalse(sequences.is_identical([1, 1, 2], [1, 2, 2],
                                                ignore_order=True))

    def test_is_identical_absent_and_empty(self):
        self.assertTrue(sequences.is_identical(None, []))
        self.assertTrue(sequences.is_identical(None, None))
        self.assertFalse(sequences.is_identical(None, [1]))
        self.assertFalse(sequences.is_identical([1], None))

    def test_is_identical_length_mismatch(self):
        self.assertFalse(sequences.is_identical([1, 2], [1, 2, 3]))

    def test_is_identical_distinct(self):
        self.assertTrue(sequences.is_identical(['a', 'A', 'b'], ['a', 'b'],
                                               key=sequences.casefold,
                                               distinct_only=True))

    def test_is_identical_distinct_strict(self):
        with self.assertRaises(exceptions.CollectionLengthError) as err:
            sequences.is_identical([1, 1, 2], [1, 2, 3], distinct_only=True,
                                   strict=True)
        self.assertEqual(err.exception.control_length, 2)
        self.assertEqual(err.exception.compare_length, 3)


class TestCombine(unittest.TestCase):

    def test_combine(self):
        self.assertEqual(sequences.combine([1, 2], None, (2, 3)),
                         [1, 2, 2, 3])

    def test_combine_nothing(self):
        self.assertEqual(sequences.combine(), [])

    def test_combine_distinct(self):
        self.assertEqual(sequences.combine_distinct([1, 2], None, (2, 3)),
                         [1, 2, 3])

    def test_combine_distinct_key(self):
        result = sequences.combine_distinct(['a', 'B'], ['A', 'b', 'c'],
                                            key=sequences.casefold)
        self.assertEqual(result, ['a', 'B', 'c'])

    def test_distinct_unhashable(self):
        self.assertEqual(sequences.distinct([[1], [1], [2]]), [[1], [2]])


class TestStringDump(unittest.TestCase):

    def test_null_and_empty(self):
        self.assertEqual(sequences.string_dump(None), '[null]')
        self.assertEqual(sequences.string_dump([]), '[empty]')

    def test_dump(self):
        self.assertEqual(sequences.string_dump([1, None, 'a']), '1, , a')

    def test_dump_first_n(self):
        self.assertEqual(sequences.string_dump([1, 2, 3, 4], n=2),
                         '1, 2, 2 more...')

    def test_dump_renderer(self):
        self.assertEqual(sequences.string_dump([1, 2], separator='|',
                                               renderer=repr), '1|2')


if __name__ == '__main__':
    unittest.main()
