import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from pewhere import Where, Processor, Settings, Architecture, ClassifiedMatch, split_list
from pewhere.cancellation import CancellationToken
from pewhere.errors import InvalidArgument, Canceled

from .test_utils import make_pe_image, write_file


class SplitListTest(unittest.TestCase):
    def test_none(self):
        self.assertEqual([], split_list(None))

    def test_trims_and_drops_empty_entries(self):
        self.assertEqual(['git.exe', 'msbuild.exe'], split_list(' git.exe, ,msbuild.exe ,,'))

    def test_blank(self):
        self.assertEqual([], split_list(' , '))

    def test_expands_environment_variables(self):
        with mock.patch.dict(os.environ, {'PEWHERE_TOOLS': '/opt/tools'}):
            self.assertEqual(['/opt/tools', '/opt/tools/bin'], split_list('$PEWHERE_TOOLS,${PEWHERE_TOOLS}/bin'))

    def test_expands_user(self):
        self.assertEqual([os.path.expanduser('~/bin')], split_list('~/bin'))


class WhereTest(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(os.path.realpath(self._tmpdir.name)) / 'root'
        write_file(self.root / 'a' / 'tool.exe', make_pe_image(0x20B))
        write_file(self.root / 'b' / 'tool.exe', b'@echo off\r\necho not a binary\r\n')
        write_file(self.root / 'c' / 'tool.exe', make_pe_image(0x10B))

    def tearDown(self):
        self._tmpdir.cleanup()

    def test_end_to_end_x64_filter(self):
        with Processor(2) as processor:
            result = Where(processor).find(['tool.exe'], [str(self.root)], [], Architecture.X64)

        self.assertEqual([ClassifiedMatch(str(self.root / 'a'), 'tool.exe', Architecture.X64)], result)

    def test_without_filter_returns_every_match(self):
        result = Where().find(['tool.exe'], [str(self.root)])

        self.assertEqual({
            (str(self.root / 'a'), Architecture.X64),
            (str(self.root / 'b'), Architecture.NONE),
            (str(self.root / 'c'), Architecture.X32),
        }, {(m.directory, m.architecture) for m in result})

    def test_filter_for_non_pe_files(self):
        result = Where().find(['tool.exe'], [str(self.root)], architecture=Architecture.NONE)

        self.assertEqual([str(self.root / 'b')], [m.directory for m in result])

    def test_skip_directories(self):
        result = Where().find(['tool.exe'], [str(self.root)], [str(self.root / 'a')])

        self.assertNotIn(str(self.root / 'a'), [m.directory for m in result])
        self.assertEqual(2, len(result))

    def test_skip_directories_from_settings(self):
        settings_file = self.root.parent / 'settings.toml'
        settings_file.write_text(f'[search]\nskip_directories = ["{(self.root / "c").as_posix()}"]\n')

        result = Where(settings=Settings(settings_file)).find(['tool.exe'], [str(self.root)])

        self.assertEqual({str(self.root / 'a'), str(self.root / 'b')}, {m.directory for m in result})

    def test_invalid_arguments(self):
        with self.assertRaises(InvalidArgument):
            Where().find([], [str(self.root)])
        with self.assertRaises(InvalidArgument):
            Where().find(['tool.exe'], [])

    def test_canceled(self):
        cancel = CancellationToken()
        cancel.cancel()

        with self.assertRaises(Canceled):
            Where().find(['tool.exe'], [str(self.root)], cancel=cancel)


if __name__ == '__main__':
    unittest.main()
