import os
import unittest
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock, patch

from prstool import sync
from prstool.catalog import Partition, PartitionRole
from tests.fixtures import MOCK_INPUT_DIR, MOCK_OUTPUT_DIR, write_file

class TestNeedsCopy(unittest.TestCase):
    @patch('os.path.getsize')
    @patch('os.path.isfile')
    def test_needs_copy(self, mock_isfile: MagicMock, mock_getsize: MagicMock) -> None:
        '''Tests that missing or resized destination files need a copy.'''
        # missing destination
        mock_isfile.return_value = False
        self.assertTrue(sync.needs_copy('/src/a.epub', '/dest/a.epub'))
        mock_getsize.assert_not_called()

        # same size
        mock_isfile.return_value = True
        mock_getsize.side_effect = [10, 10]
        self.assertFalse(sync.needs_copy('/src/a.epub', '/dest/a.epub'))

        # different size
        mock_getsize.side_effect = [10, 11]
        self.assertTrue(sync.needs_copy('/src/a.epub', '/dest/a.epub'))

class TestCreateMappings(unittest.TestCase):
    @patch('prstool.sync.scan')
    @patch('os.path.isdir')
    def test_mappings(self, mock_isdir: MagicMock, mock_scan: MagicMock) -> None:
        '''Tests that each file of the partition directory maps below the partition destination.'''
        mock_isdir.return_value = True
        mock_scan.return_value = ['Fiction/[Ann] Alpha.epub', 'b.pdf']
        partition = Partition.create(PartitionRole.MEMORY_STICK, MOCK_OUTPUT_DIR, 'books')

        # Call target function
        actual = sync.create_mappings(MOCK_INPUT_DIR, partition)

        # Assert expectations
        mock_scan.assert_called_once_with(f"{MOCK_INPUT_DIR}/ms")
        self.assertEqual(actual, [
            (f"{MOCK_INPUT_DIR}/ms/Fiction/[Ann] Alpha.epub", f"{MOCK_OUTPUT_DIR}/books/Fiction/[Ann] Alpha.epub"),
            (f"{MOCK_INPUT_DIR}/ms/b.pdf", f"{MOCK_OUTPUT_DIR}/books/b.pdf"),
        ])

    @patch('prstool.sync.scan')
    @patch('os.path.isdir')
    def test_missing_source_directory(self, mock_isdir: MagicMock, mock_scan: MagicMock) -> None:
        '''Tests that a partition without a source directory has nothing to copy.'''
        mock_isdir.return_value = False
        partition = Partition.create(PartitionRole.SD, MOCK_OUTPUT_DIR, 'books')

        with self.assertLogs(level='WARNING'):
            actual = sync.create_mappings(MOCK_INPUT_DIR, partition)

        self.assertEqual(actual, [])
        mock_scan.assert_not_called()

class TestSyncFiles(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.source = os.path.join(self.temp_dir.name, 'source')
        self.root = os.path.join(self.temp_dir.name, 'reader')
        self.partition = Partition.create(PartitionRole.BODY, self.root, 'books')

    def test_copies_new_and_resized(self) -> None:
        '''Tests that new and resized files are copied and same-size files are skipped.'''
        write_file(os.path.join(self.source, 'body', 'sub', 'new.epub'), b'new')
        write_file(os.path.join(self.source, 'body', 'resized.epub'), b'longer')
        write_file(os.path.join(self.source, 'body', 'same.epub'), b'abc')
        write_file(os.path.join(self.root, 'books', 'resized.epub'), b'old')
        write_file(os.path.join(self.root, 'books', 'same.epub'), b'xyz')

        # Call target function
        actual = sync.sync_files(self.source, self.partition)

        # Assert expectations
        self.assertEqual(actual.skipped, 1)
        self.assertEqual([os.path.relpath(dest, self.root) for _, dest in actual.copied],
                         ['books/resized.epub', 'books/sub/new.epub'])
        with open(os.path.join(self.root, 'books', 'sub', 'new.epub'), 'rb') as file:
            self.assertEqual(file.read(), b'new')
        with open(os.path.join(self.root, 'books', 'resized.epub'), 'rb') as file:
            self.assertEqual(file.read(), b'longer')
        with open(os.path.join(self.root, 'books', 'same.epub'), 'rb') as file:
            self.assertEqual(file.read(), b'xyz')

    def test_dry_run(self) -> None:
        '''Tests that a dry run reports the copy without writing.'''
        write_file(os.path.join(self.source, 'body', 'new.epub'), b'new')

        with self.assertLogs(level='INFO') as log_context:
            actual = sync.sync_files(self.source, self.partition, dry_run=True)

        self.assertEqual(len(actual.copied), 1)
        self.assertFalse(os.path.exists(os.path.join(self.root, 'books', 'new.epub')))
        self.assertTrue(any('[DRY-RUN] Would copy' in line for line in log_context.output))
