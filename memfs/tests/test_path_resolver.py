"""
Path resolution tests.

Run with: python -m pytest memfs/tests -v
"""

import unittest

from memfs.exceptions import (
    FileNotFoundError,
    NotADirectoryError,
    SymlinkLoopError,
)
from memfs.filesystem.node import NodeTree
from memfs.filesystem.path_resolver import PathResolver, ParsedPath


class TestPathStrings(unittest.TestCase):
    """Test the string helpers."""

    def test_parse(self):
        parsed = PathResolver.parse('//home//user/./docs/')

        self.assertTrue(parsed.is_absolute)
        self.assertEqual(parsed.components, ['home', 'user', '.', 'docs'])
        self.assertEqual(parsed.name, 'docs')
        self.assertEqual(str(parsed.parent), '/home/user/.')

    def test_parsed_path_str(self):
        self.assertEqual(str(ParsedPath(True, [])), '/')
        self.assertEqual(str(ParsedPath(False, [])), '.')
        self.assertEqual(str(ParsedPath(False, ['a', 'b'])), 'a/b')

    def test_normalize(self):
        self.assertEqual(PathResolver.normalize('/home/../tmp/.'), '/tmp')
        self.assertEqual(PathResolver.normalize('/..'), '/')
        self.assertEqual(PathResolver.normalize('a/../..'), '..')
        self.assertEqual(PathResolver.normalize('./'), '.')

    def test_join(self):
        self.assertEqual(PathResolver.join('/home', 'user'), '/home/user')
        self.assertEqual(PathResolver.join('/home', '/etc', 'hosts'), '/etc/hosts')
        self.assertEqual(PathResolver.join(), '.')

    def test_dirname(self):
        self.assertEqual(PathResolver.dirname('/home/user/file'), '/home/user')
        self.assertEqual(PathResolver.dirname('/home/user/'), '/home')
        self.assertEqual(PathResolver.dirname('/home'), '/')
        self.assertEqual(PathResolver.dirname('/'), '/')
        self.assertEqual(PathResolver.dirname('file'), '.')
        self.assertEqual(PathResolver.dirname('a/./b'), 'a')

    def test_basename(self):
        self.assertEqual(PathResolver.basename('/home/user/file'), 'file')
        self.assertEqual(PathResolver.basename('/home/user/'), 'user')
        self.assertEqual(PathResolver.basename('/'), '/')
        self.assertEqual(PathResolver.basename('file'), 'file')

    def test_split(self):
        self.assertEqual(PathResolver.split('/home/user'), ('/home', 'user'))
        self.assertEqual(PathResolver.split('user'), ('.', 'user'))

    def test_is_absolute(self):
        self.assertTrue(PathResolver.is_absolute('/a'))
        self.assertFalse(PathResolver.is_absolute('a/b'))


class TestResolve(unittest.TestCase):
    """Test resolving paths to nodes."""

    def setUp(self):
        self.tree = NodeTree()
        root = self.tree.root
        self.a = self.tree.insert_child(root, 'a', self.tree.new_directory())
        self.b = self.tree.insert_child(self.a, 'b', self.tree.new_directory())
        self.f = self.tree.insert_child(self.a, 'f', self.tree.new_file())
        self.resolver = PathResolver(self.tree, max_symlink_depth=8)

    def test_absolute(self):
        self.assertIs(self.resolver.resolve('/a/b', cwd=self.b), self.b)
        self.assertIs(self.resolver.resolve('/', cwd=self.b), self.tree.root)

    def test_relative_uses_cwd(self):
        self.assertIs(self.resolver.resolve('b', cwd=self.a), self.b)
        self.assertIs(self.resolver.resolve('.', cwd=self.a), self.a)

    def test_repeated_separators(self):
        self.assertIs(self.resolver.resolve('//a///b/', cwd=self.tree.root), self.b)

    def test_dot_dot(self):
        self.assertIs(self.resolver.resolve('..', cwd=self.b), self.a)
        self.assertIs(self.resolver.resolve('../../..', cwd=self.b), self.tree.root)
        self.assertIs(self.resolver.resolve('/../a', cwd=self.b), self.a)

    def test_missing_component(self):
        with self.assertRaises(FileNotFoundError) as ctx:
            self.resolver.resolve('/a/missing/b', cwd=self.tree.root)

        self.assertEqual(ctx.exception.path, '/a/missing/b')
        self.assertEqual(ctx.exception.context['component'], 'missing')

    def test_empty_path(self):
        with self.assertRaises(FileNotFoundError):
            self.resolver.resolve('', cwd=self.a)

    def test_file_as_intermediate(self):
        with self.assertRaises(NotADirectoryError):
            self.resolver.resolve('/a/f/x', cwd=self.tree.root)

        with self.assertRaises(NotADirectoryError):
            self.resolver.resolve('/a/f/..', cwd=self.tree.root)

    def test_final_file_is_returned(self):
        self.assertIs(self.resolver.resolve('/a/f', cwd=self.tree.root), self.f)

    def test_absolute_symlink(self):
        self.tree.insert_child(self.tree.root, 'link', self.tree.new_symlink('/a/b'))

        self.assertIs(self.resolver.resolve('/link', cwd=self.tree.root), self.b)

    def test_relative_symlink_resolves_from_its_directory(self):
        self.tree.insert_child(self.b, 'up', self.tree.new_symlink('../f'))

        self.assertIs(self.resolver.resolve('/a/b/up', cwd=self.tree.root), self.f)

    def test_symlink_as_intermediate(self):
        self.tree.insert_child(self.tree.root, 'link', self.tree.new_symlink('a'))

        self.assertIs(self.resolver.resolve('/link/b', cwd=self.b), self.b)

    def test_final_symlink_not_followed(self):
        link = self.tree.insert_child(self.tree.root, 'link', self.tree.new_symlink('/a'))

        self.assertIs(
            self.resolver.resolve('/link', cwd=self.tree.root, follow_final=False),
            link
        )
        self.assertIs(
            self.resolver.resolve('/link/b', cwd=self.tree.root, follow_final=False),
            self.b
        )

    def test_dangling_symlink(self):
        self.tree.insert_child(self.tree.root, 'dangling', self.tree.new_symlink('/nowhere'))

        with self.assertRaises(FileNotFoundError):
            self.resolver.resolve('/dangling', cwd=self.tree.root)

    def test_symlink_loop(self):
        self.tree.insert_child(self.tree.root, 'x', self.tree.new_symlink('/y'))
        self.tree.insert_child(self.tree.root, 'y', self.tree.new_symlink('/x'))

        with self.assertRaises(SymlinkLoopError) as ctx:
            self.resolver.resolve('/x', cwd=self.tree.root)

        self.assertEqual(ctx.exception.depth, 8)

    def test_self_referencing_symlink(self):
        self.tree.insert_child(self.a, 'self', self.tree.new_symlink('self'))

        with self.assertRaises(SymlinkLoopError):
            self.resolver.resolve('/a/self/b', cwd=self.tree.root)

    def test_symlink_chain_within_limit(self):
        previous = '/a/b'
        for i in range(8):
            name = f'l{i}'
            self.tree.insert_child(self.tree.root, name, self.tree.new_symlink(previous))
            previous = '/' + name

        self.assertIs(self.resolver.resolve('/l7', cwd=self.tree.root), self.b)

        self.tree.insert_child(self.tree.root, 'l8', self.tree.new_symlink('/l7'))
        with self.assertRaises(SymlinkLoopError):
            self.resolver.resolve('/l8', cwd=self.tree.root)

    def test_resolve_parent(self):
        parent, name = self.resolver.resolve_parent('/a/b/new', cwd=self.tree.root)

        self.assertIs(parent, self.b)
        self.assertEqual(name, 'new')

    def test_resolve_parent_relative(self):
        parent, name = self.resolver.resolve_parent('new', cwd=self.a)

        self.assertIs(parent, self.a)
        self.assertEqual(name, 'new')

    def test_resolve_parent_of_root(self):
        parent, name = self.resolver.resolve_parent('/', cwd=self.a)

        self.assertIs(parent, self.tree.root)
        self.assertEqual(name, '')

    def test_resolve_parent_missing(self):
        with self.assertRaises(FileNotFoundError):
            self.resolver.resolve_parent('/nope/new', cwd=self.tree.root)

    def test_resolve_parent_under_file(self):
        with self.assertRaises(NotADirectoryError):
            self.resolver.resolve_parent('/a/f/new', cwd=self.tree.root)


if __name__ == '__main__':
    unittest.main()
