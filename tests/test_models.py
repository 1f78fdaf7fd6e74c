import os
import unittest

from pewhere.models import Architecture, DirectoryFileMatch, ClassifiedMatch, filter_by_architecture


class DirectoryFileMatchTest(unittest.TestCase):
    def test_path_joins_directory_and_file_name(self):
        match = DirectoryFileMatch(os.path.join('tmp', 'root'), 'tool.exe')
        self.assertEqual(os.path.join('tmp', 'root', 'tool.exe'), match.path)

    def test_fields_are_read_only(self):
        match = DirectoryFileMatch('/a', 'b')
        with self.assertRaises(AttributeError):
            match.directory = '/c'

    def test_equality_and_hash(self):
        a = DirectoryFileMatch('/a', 'tool.exe')
        b = DirectoryFileMatch('/a', 'tool.exe')
        c = DirectoryFileMatch('/a', 'other.exe')

        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, c)
        self.assertEqual(1, len({a, b}))

    def test_equality_follows_platform_case_rules(self):
        a = DirectoryFileMatch('/A', 'Tool.exe')
        b = DirectoryFileMatch('/a', 'tool.exe')

        # normcase folds case only where the platform does
        self.assertEqual(os.path.normcase('/A') == os.path.normcase('/a'), a == b)


class ClassifiedMatchTest(unittest.TestCase):
    def test_from_match(self):
        match = DirectoryFileMatch('/a', 'tool.exe')
        classified = ClassifiedMatch.from_match(match, Architecture.X64)

        self.assertEqual('/a', classified.directory)
        self.assertEqual('tool.exe', classified.file_name)
        self.assertEqual(Architecture.X64, classified.architecture)

    def test_architecture_accepts_string_value(self):
        classified = ClassifiedMatch('/a', 'tool.exe', 'x32')
        self.assertIs(Architecture.X32, classified.architecture)

    def test_architecture_participates_in_equality(self):
        self.assertNotEqual(
            ClassifiedMatch('/a', 'tool.exe', Architecture.X32),
            ClassifiedMatch('/a', 'tool.exe', Architecture.X64))
        self.assertNotEqual(
            DirectoryFileMatch('/a', 'tool.exe'),
            ClassifiedMatch('/a', 'tool.exe', Architecture.X64))


class FilterByArchitectureTest(unittest.TestCase):
    def setUp(self):
        self.matches = [
            ClassifiedMatch('/a', 'one.exe', Architecture.X64),
            ClassifiedMatch('/b', 'two.exe', Architecture.X32),
            ClassifiedMatch('/c', 'three.exe', Architecture.NONE),
            ClassifiedMatch('/d', 'four.exe', Architecture.X64),
        ]

    def test_no_filter_keeps_everything_in_order(self):
        self.assertEqual(self.matches, filter_by_architecture(self.matches, None))

    def test_filter_x64(self):
        result = filter_by_architecture(self.matches, Architecture.X64)
        self.assertEqual(['one.exe', 'four.exe'], [m.file_name for m in result])

    def test_filter_none_keeps_non_pe_files(self):
        result = filter_by_architecture(self.matches, Architecture.NONE)
        self.assertEqual(['three.exe'], [m.file_name for m in result])


if __name__ == '__main__':
    unittest.main()
