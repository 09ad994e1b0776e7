"""Character set presets and validation."""

import unittest
from PIL import ImageFont

from ascii_edge.charsets import (
    EDGE_DEFAULT, TILE_DEFAULT, CharacterSet, get_charset, glyph_coverage,
    list_charsets, sort_by_density,
)


class TestCharacterSet(unittest.TestCase):

    def test_defaults(self):
        cs = CharacterSet()
        self.assertEqual(''.join(cs.tile), TILE_DEFAULT)
        self.assertEqual(''.join(cs.edge), EDGE_DEFAULT)
        self.assertEqual(cs.tile_count, 13)
        self.assertEqual(cs.edge_count, 5)

    def test_accepts_strings(self):
        cs = CharacterSet(" .#", " -|/\\")
        self.assertEqual(cs.tile, (' ', '.', '#'))
        self.assertEqual(cs.tile_array().tolist(), [' ', '.', '#'])
        self.assertEqual(cs.edge_array().dtype.str[1:], 'U1')

    def test_validation(self):
        with self.assertRaises(ValueError):
            CharacterSet(tile="")
        with self.assertRaises(ValueError):
            CharacterSet(edge=" _|/")
        with self.assertRaises(ValueError):
            CharacterSet(tile=[" ", "ab"])

    def test_indices(self):
        cs = CharacterSet()
        self.assertEqual(cs.tile_index('o'), 6)
        self.assertEqual(cs.edge_index('|'), 2)
        self.assertIsNone(cs.tile_index('Z'))
        self.assertIsNone(cs.edge_index('Z'))

    def test_name_not_compared(self):
        self.assertEqual(CharacterSet(name="a"), CharacterSet(name="b"))


class TestPresets(unittest.TestCase):

    def test_every_preset_is_valid(self):
        for name in list_charsets():
            cs = get_charset(name)
            self.assertEqual(cs.name, name)
            self.assertEqual(cs.tile[0], ' ', name)
            self.assertEqual(''.join(cs.edge), EDGE_DEFAULT)

    def test_lookup_case_insensitive(self):
        self.assertEqual(get_charset("BLOCKS").tile[-1], '█')

    def test_unknown(self):
        with self.assertRaises(ValueError):
            get_charset("nope")


class TestDensity(unittest.TestCase):

    def setUp(self):
        self.font = ImageFont.load_default(size=14)

    def test_blank_has_no_coverage(self):
        self.assertEqual(glyph_coverage(' ', self.font), 0.0)
        self.assertGreater(glyph_coverage('@', self.font), 0.0)

    def test_sort_by_density(self):
        order = sort_by_density("@ .", self.font)
        self.assertEqual(order[0], ' ')
        self.assertEqual(order[-1], '@')

    def test_sort_drops_duplicates(self):
        self.assertEqual(sorted(sort_by_density("..@@", self.font)), ['.', '@'])


if __name__ == "__main__":
    unittest.main()
