import unittest

from prstool import playlists
from prstool.catalog import Playlist
from tests.fixtures import create_catalog, create_item

class TestRemoveAutoPlaylists(unittest.TestCase):
    def test_remove(self) -> None:
        '''Tests that only playlists without a uuid are dropped.'''
        document = create_catalog(playlists=[Playlist(title='', id='1'),
                                             Playlist(title='mine', id='2', uuid='U'),
                                             Playlist(title='sub', id='3')])

        actual = playlists.remove_auto_playlists(document)

        self.assertEqual(actual, 2)
        self.assertEqual([p.title for p in document.playlists], ['mine'])

class TestGroupByDirectory(unittest.TestCase):
    def test_group(self) -> None:
        '''Tests that items are grouped by directory relative to the destination, in catalog order.'''
        document = create_catalog([create_item('0', 'books/sub/c.epub'),
                                   create_item('1', 'books/a.epub'),
                                   create_item('2', 'books/b.epub'),
                                   create_item('3', 'other/d.epub'),
                                   create_item('', 'books/new.epub')])

        actual = playlists.group_by_directory(document, 'books')

        self.assertEqual(actual, {'sub': ['0'], '': ['1', '2']})

    def test_empty_destination(self) -> None:
        '''Tests that an empty destination groups by full directory path.'''
        document = create_catalog([create_item('0', 'x.epub'), create_item('1', 'books/y.epub')])

        actual = playlists.group_by_directory(document, '')

        self.assertEqual(actual, {'': ['0'], 'books': ['1']})

class TestMakePlaylists(unittest.TestCase):
    def test_make_playlists(self) -> None:
        '''Tests that playlists are emitted by name after the user playlists and numbered after the last id.'''
        document = create_catalog([create_item('0', 'books/b/x.epub'),
                                   create_item('1', 'books/a.epub'),
                                   create_item('2', 'books/B/y.epub')],
                                  [Playlist(title='mine', id='3', source_id='1', uuid='U', members=['1']),
                                   Playlist(title='stale', id='9', source_id='1', members=['0'])])

        # Call target function
        actual = playlists.make_playlists(document, 'books', 1, 3)

        # Assert expectations
        self.assertEqual(actual, 6)
        self.assertEqual([(p.title, p.id, p.source_id, p.members) for p in document.playlists],
                         [('mine', '3', '1', ['1']),
                          ('', '4', '1', ['1']),
                          ('B', '5', '1', ['2']),
                          ('b', '6', '1', ['0'])])
        self.assertTrue(all(p.is_auto for p in document.playlists[1:]))

    def test_no_items(self) -> None:
        '''Tests that without items no playlist is made and the last id is unchanged.'''
        document = create_catalog(playlists=[Playlist(title='stale', id='9')])

        actual = playlists.make_playlists(document, 'books', 8, 8)

        self.assertEqual(actual, 8)
        self.assertEqual(document.playlists, [])
