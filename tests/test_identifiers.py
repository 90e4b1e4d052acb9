import unittest
import xml.etree.ElementTree as ET

from prstool import identifiers
from prstool.catalog import Playlist
from prstool.errors import UnmappedReferenceError
from tests.fixtures import create_catalog, create_item

class TestReserve(unittest.TestCase):
    def test_first_partition(self) -> None:
        self.assertEqual(identifiers.reserve(None), (1, 0))

    def test_following_partition(self) -> None:
        '''Tests that later partitions reserve the next source identifier and number after it.'''
        self.assertEqual(identifiers.reserve(41), (42, 43))
        self.assertEqual(identifiers.reserve(0), (1, 2))

class TestResetIds(unittest.TestCase):
    def test_first_partition(self) -> None:
        '''Tests that items come first from base 0, then playlists, then other identified records.'''
        document = create_catalog([create_item('10', 'a.epub'), create_item('11', 'b.epub')],
                                  [Playlist(title='mine', id='12', uuid='U', members=['11'])])
        document.records.append(ET.Element('library', {'id': '20'}))
        document.records.append(ET.Element('comment'))

        # Call target function
        actual = identifiers.reset_ids(document, None)

        # Assert expectations
        self.assertEqual((actual.source_id, actual.base, actual.last_id), (1, 0, 3))
        self.assertEqual([item.id for item in document.items], ['0', '1'])
        self.assertEqual(document.playlists[0].id, '2')
        self.assertEqual(document.records[0].get('id'), '3')
        self.assertIsNone(document.records[1].get('id'))
        self.assertEqual(actual.id_map, {'10': 0, '11': 1, '12': 2, '20': 3})

    def test_following_partition(self) -> None:
        document = create_catalog([create_item('5', 'a.epub')])

        actual = identifiers.reset_ids(document, 4)

        self.assertEqual((actual.source_id, actual.base, actual.last_id), (5, 6, 6))
        self.assertEqual(document.items[0].id, '6')

    def test_empty_catalog(self) -> None:
        '''Tests that an empty catalog reports its source identifier as the last one.'''
        actual = identifiers.reset_ids(create_catalog(), 7)

        self.assertEqual((actual.source_id, actual.base, actual.last_id), (8, 9, 8))
        self.assertEqual(actual.id_map, {})

    def test_empty_first_catalog(self) -> None:
        actual = identifiers.reset_ids(create_catalog(), None)

        self.assertEqual(actual.last_id, 1)

    def test_new_items_unmapped(self) -> None:
        '''Tests that items without a previous identifier are numbered but not mapped.'''
        document = create_catalog([create_item('', 'new.epub'), create_item('3', 'old.epub')])

        actual = identifiers.reset_ids(document, None)

        self.assertEqual([item.id for item in document.items], ['0', '1'])
        self.assertEqual(actual.id_map, {'3': 1})

    def test_duplicate_identifier(self) -> None:
        '''Tests that a repeated previous identifier maps to the later record and is reported.'''
        document = create_catalog([create_item('3', 'a.epub'), create_item('3', 'b.epub')])

        with self.assertLogs(level='WARNING'):
            actual = identifiers.reset_ids(document, None)

        self.assertEqual(actual.id_map, {'3': 1})

class TestRemapPlaylists(unittest.TestCase):
    def test_remap(self) -> None:
        '''Tests that every member is rewritten in place, keeping order and duplicates.'''
        document = create_catalog(playlists=[Playlist(title='mine', id='2', uuid='U', members=['11', '10', '11'])])

        identifiers.remap_playlists(document, {'10': 0, '11': 1})

        self.assertEqual(document.playlists[0].members, ['1', '0', '1'])

    def test_unmapped(self) -> None:
        '''Tests that a member without a new identifier raises.'''
        document = create_catalog(playlists=[Playlist(title='mine', id='2', uuid='U', members=['99'])])

        with self.assertRaises(UnmappedReferenceError) as context:
            identifiers.remap_playlists(document, {'10': 0})

        self.assertIn('Not found new ID: 99', str(context.exception))
        self.assertEqual(context.exception.details['id'], '99')

class TestVerifyReferences(unittest.TestCase):
    def test_valid(self) -> None:
        document = create_catalog([create_item('0', 'a.epub')],
                                  [Playlist(title='mine', id='1', uuid='U', members=['0'])])

        identifiers.verify_references(document)

    def test_dangling(self) -> None:
        '''Tests that a member that is not a live item raises.'''
        document = create_catalog([create_item('0', 'a.epub')],
                                  [Playlist(title='mine', id='1', uuid='U', members=['0', '5'])])

        with self.assertRaises(UnmappedReferenceError):
            identifiers.verify_references(document)

class TestAssignMissingIds(unittest.TestCase):
    def test_assign(self) -> None:
        '''Tests that only items without an identifier are numbered, after the highest one in use.'''
        document = create_catalog([create_item('4', 'a.epub'), create_item('', 'b.epub'), create_item('', 'c.epub')],
                                  [Playlist(title='mine', id='9', uuid='U', members=['4'])])

        # Call target function
        actual = identifiers.assign_missing_ids(document, None)

        # Assert expectations
        self.assertEqual(actual, 11)
        self.assertEqual([item.id for item in document.items], ['4', '10', '11'])
        self.assertEqual(document.playlists[0].members, ['4'])

    def test_assign_above_source_id(self) -> None:
        '''Tests that new identifiers never reach back into the previous partition's range.'''
        document = create_catalog([create_item('', 'a.epub')])

        actual = identifiers.assign_missing_ids(document, 20)

        self.assertEqual(actual, 22)
        self.assertEqual(document.items[0].id, '22')

    def test_nothing_to_assign(self) -> None:
        document = create_catalog([create_item('3', 'a.epub')])

        self.assertEqual(identifiers.assign_missing_ids(document, None), 3)
        self.assertEqual(identifiers.assign_missing_ids(create_catalog(), 7), 8)
