"""
Node tree tests.

Run with: python -m pytest memfs/tests -v
"""

import unittest

from memfs.exceptions import (
    DirectoryNotEmptyError,
    FileExistsError,
    FileNotFoundError,
    InvalidMoveError,
    NotADirectoryError,
)
from memfs.filesystem.node import FileType, NodeTree, ROOT_INO


class TestNode(unittest.TestCase):
    """Test node types and properties."""

    def test_root_is_parentless_directory(self):
        tree = NodeTree()

        self.assertEqual(tree.root.ino, ROOT_INO)
        self.assertTrue(tree.root.is_directory)
        self.assertTrue(tree.root.is_root)
        self.assertIsNone(tree.root.parent)

    def test_allocated_nodes_have_distinct_inos(self):
        tree = NodeTree()

        inos = {tree.new_directory().ino, tree.new_file().ino, tree.new_symlink('/x').ino}

        self.assertEqual(len(inos), 3)
        self.assertNotIn(ROOT_INO, inos)

    def test_node_types(self):
        tree = NodeTree()

        self.assertEqual(tree.new_file().file_type, FileType.REGULAR)
        self.assertTrue(tree.new_symlink('a').is_symlink)
        self.assertEqual(tree.new_symlink('abc').size, 3)

    def test_to_dict(self):
        tree = NodeTree()
        link = tree.insert_child(tree.root, 'link', tree.new_symlink('/target'))

        info = link.to_dict()

        self.assertEqual(info['name'], 'link')
        self.assertEqual(info['type'], 'SYMLINK')
        self.assertEqual(info['target'], '/target')


class TestNodeTree(unittest.TestCase):
    """Test insert/remove/lookup/move on the tree."""

    def setUp(self):
        self.tree = NodeTree()

    def test_insert_and_lookup(self):
        docs = self.tree.insert_child(self.tree.root, 'docs', self.tree.new_directory())

        self.assertIs(self.tree.lookup_child(self.tree.root, 'docs'), docs)
        self.assertEqual(docs.name, 'docs')
        self.assertEqual(docs.parent, ROOT_INO)
        self.assertEqual(len(self.tree), 2)

    def test_insert_duplicate_name_fails(self):
        self.tree.insert_child(self.tree.root, 'docs', self.tree.new_directory())

        with self.assertRaises(FileExistsError):
            self.tree.insert_child(self.tree.root, 'docs', self.tree.new_file())

        self.assertTrue(self.tree.lookup_child(self.tree.root, 'docs').is_directory)

    def test_names_are_case_sensitive(self):
        self.tree.insert_child(self.tree.root, 'Docs', self.tree.new_directory())
        self.tree.insert_child(self.tree.root, 'docs', self.tree.new_directory())

        self.assertEqual(self.tree.list_children(self.tree.root), ['Docs', 'docs'])

    def test_insert_under_file_fails(self):
        f = self.tree.insert_child(self.tree.root, 'f', self.tree.new_file())

        with self.assertRaises(NotADirectoryError):
            self.tree.insert_child(f, 'child', self.tree.new_file())

    def test_lookup_missing_fails(self):
        with self.assertRaises(FileNotFoundError):
            self.tree.lookup_child(self.tree.root, 'missing')

    def test_remove_child(self):
        self.tree.insert_child(self.tree.root, 'f', self.tree.new_file())

        removed = self.tree.remove_child(self.tree.root, 'f')

        self.assertEqual(removed.name, 'f')
        self.assertEqual(self.tree.list_children(self.tree.root), [])
        self.assertEqual(len(self.tree), 1)

    def test_remove_missing_fails(self):
        with self.assertRaises(FileNotFoundError):
            self.tree.remove_child(self.tree.root, 'missing')

    def test_remove_non_empty_directory_fails(self):
        d = self.tree.insert_child(self.tree.root, 'd', self.tree.new_directory())
        self.tree.insert_child(d, 'f', self.tree.new_file())

        with self.assertRaises(DirectoryNotEmptyError):
            self.tree.remove_child(self.tree.root, 'd')

        self.tree.remove_child(d, 'f')
        self.tree.remove_child(self.tree.root, 'd')
        self.assertEqual(self.tree.list_children(self.tree.root), [])

    def test_full_path(self):
        a = self.tree.insert_child(self.tree.root, 'a', self.tree.new_directory())
        b = self.tree.insert_child(a, 'b', self.tree.new_directory())
        c = self.tree.insert_child(b, 'c', self.tree.new_file())

        self.assertEqual(self.tree.full_path(self.tree.root), '/')
        self.assertEqual(self.tree.full_path(c), '/a/b/c')
        self.assertEqual(self.tree.child_path(self.tree.root, 'x'), '/x')

    def test_full_path_matches_parent_mapping(self):
        a = self.tree.insert_child(self.tree.root, 'a', self.tree.new_directory())
        b = self.tree.insert_child(a, 'b', self.tree.new_directory())

        for node in (a, b):
            parent = self.tree.parent_of(node)
            self.assertEqual(parent.children[node.name], node.ino)

    def test_list_children_sorted(self):
        for name in ('dir2', 'dir1', 'file2', 'file1'):
            self.tree.insert_child(self.tree.root, name, self.tree.new_directory())

        self.assertEqual(
            self.tree.list_children(self.tree.root),
            ['dir1', 'dir2', 'file1', 'file2']
        )

    def test_move_child(self):
        a = self.tree.insert_child(self.tree.root, 'a', self.tree.new_directory())
        b = self.tree.insert_child(self.tree.root, 'b', self.tree.new_directory())
        f = self.tree.insert_child(a, 'f', self.tree.new_file())

        self.tree.move_child(a, 'f', b, 'g')

        self.assertEqual(self.tree.full_path(f), '/b/g')
        self.assertNotIn('f', a.children)
        self.assertEqual(b.children['g'], f.ino)

    def test_move_onto_existing_name_fails(self):
        a = self.tree.insert_child(self.tree.root, 'a', self.tree.new_file())
        self.tree.insert_child(self.tree.root, 'b', self.tree.new_file())

        with self.assertRaises(FileExistsError):
            self.tree.move_child(self.tree.root, 'a', self.tree.root, 'b')

        self.assertEqual(self.tree.full_path(a), '/a')

    def test_move_directory_into_itself_fails(self):
        a = self.tree.insert_child(self.tree.root, 'a', self.tree.new_directory())
        b = self.tree.insert_child(a, 'b', self.tree.new_directory())

        with self.assertRaises(InvalidMoveError):
            self.tree.move_child(self.tree.root, 'a', b, 'a')

        with self.assertRaises(InvalidMoveError):
            self.tree.move_child(self.tree.root, 'a', a, 'again')

    def test_is_ancestor(self):
        a = self.tree.insert_child(self.tree.root, 'a', self.tree.new_directory())
        b = self.tree.insert_child(a, 'b', self.tree.new_directory())

        self.assertTrue(self.tree.is_ancestor(self.tree.root, b))
        self.assertTrue(self.tree.is_ancestor(a, b))
        self.assertTrue(self.tree.is_ancestor(b, b))
        self.assertFalse(self.tree.is_ancestor(b, a))

    def test_count(self):
        d = self.tree.insert_child(self.tree.root, 'd', self.tree.new_directory())
        self.tree.insert_child(d, 'f', self.tree.new_file())
        self.tree.insert_child(d, 'link', self.tree.new_symlink('/d/f'))

        self.assertEqual(self.tree.count(), 4)
        self.assertEqual(self.tree.count(FileType.DIRECTORY), 2)
        self.assertEqual(self.tree.count(FileType.REGULAR), 1)
        self.assertEqual(self.tree.count(FileType.SYMLINK), 1)

        self.tree.remove_child(d, 'link')
        self.assertEqual(self.tree.count(), 3)
        self.assertEqual(self.tree.count(FileType.SYMLINK), 0)


if __name__ == '__main__':
    unittest.main()
