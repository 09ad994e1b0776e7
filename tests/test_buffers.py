"""Image <-> array conversion helpers."""

import unittest
import numpy as np
from PIL import Image

from ascii_edge.buffers import array_to_image, cell_grid_shape, from_flat, image_to_array, to_8bit
from ascii_edge.errors import ArrayShapeMismatchError


class TestBuffers(unittest.TestCase):

    def test_from_flat_row_major(self):
        arr = from_flat(bytes(range(6)), width=3, height=2)
        self.assertEqual(arr.tolist(), [[0, 1, 2], [3, 4, 5]])
        self.assertEqual(arr.dtype, np.uint8)

    def test_from_flat_copies(self):
        src = np.arange(4, dtype=np.uint8)
        arr = from_flat(src, 2, 2)
        arr[0, 0] = 99
        self.assertEqual(src[0], 0)

    def test_from_flat_length_mismatch(self):
        with self.assertRaises(ArrayShapeMismatchError):
            from_flat(bytes(5), width=3, height=2)
        with self.assertRaises(ArrayShapeMismatchError):
            from_flat([1, 2, 3, 4], width=3, height=2)

    def test_image_to_array_converts_to_gray(self):
        img = Image.new('RGB', (5, 3), (255, 255, 255))
        arr = image_to_array(img)
        self.assertEqual(arr.shape, (3, 5))
        self.assertTrue(np.all(arr == 255))

    def test_array_image_round_trip(self):
        arr = np.arange(12, dtype=np.uint8).reshape(3, 4)
        img = array_to_image(arr)
        self.assertEqual(img.mode, 'L')
        self.assertEqual(img.size, (4, 3))
        np.testing.assert_array_equal(image_to_array(img), arr)

    def test_array_to_image_rejects_3d(self):
        with self.assertRaises(ArrayShapeMismatchError):
            array_to_image(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_to_8bit_scales_wide_modes(self):
        cases = [
            (np.array([[0, 257, 65535]], dtype=np.uint16), [[0, 1, 255]]),
            (np.array([[0, 30000, 70000]], dtype=np.int32), [[0, 117, 255]]),
            (np.array([[0.0, 0.5, 2.0]], dtype=np.float32), [[0, 128, 255]]),
        ]
        for arr, expected in cases:
            img = to_8bit(Image.fromarray(arr))
            self.assertEqual(img.mode, 'L')
            self.assertEqual(np.array(img).tolist(), expected)

    def test_to_8bit_keeps_common_modes(self):
        gray = Image.new('L', (2, 2), 9)
        self.assertIs(to_8bit(gray), gray)
        self.assertEqual(to_8bit(Image.new('RGBA', (2, 2))).mode, 'RGB')

    def test_cell_grid_shape(self):
        self.assertEqual(cell_grid_shape((17, 9), 4), (2, 4))
        self.assertEqual(cell_grid_shape((3, 3), 4), (0, 0))


if __name__ == "__main__":
    unittest.main()
