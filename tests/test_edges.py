"""
Edge classifier tests.

The bucket boundaries are hand-tuned, so these tests pin them down
exactly, including the values that sit right on a boundary.
"""

import unittest
import numpy as np

from ascii_edge import edges
from ascii_edge.edges import (
    DIAGONAL_1, DIAGONAL_2, HORIZONTAL, NONE, VERTICAL,
    SobelEdgeDetector, classify, edge_masks, normalized_angle, sobel_gradients,
)
from ascii_edge.errors import ProcessingError


def step_image(size=16, vertical=True, low=0, high=255):
    img = np.full((size, size), low, dtype=np.uint8)
    if vertical:
        img[:, size // 2:] = high
    else:
        img[size // 2:, :] = high
    return img


class TestBucketPartition(unittest.TestCase):

    BOUNDARIES = [0.0, 0.25, 0.27, 0.28, 0.5, 0.55, 0.75, 0.77, 0.78, 0.95, 1.0]

    def test_every_value_in_exactly_one_bucket(self):
        rng = np.random.default_rng(1234)
        samples = np.concatenate([rng.uniform(0.0, 1.0, 10000), self.BOUNDARIES])
        masks = np.stack(edge_masks(samples))
        self.assertEqual(masks.shape, (5, samples.size))
        np.testing.assert_array_equal(masks.sum(axis=0), np.ones(samples.size))

    def test_boundary_values(self):
        expected = {
            0.0: DIAGONAL_1,
            0.1: DIAGONAL_1,
            0.25: HORIZONTAL,
            0.26: HORIZONTAL,
            0.27: DIAGONAL_1,
            0.28: DIAGONAL_2,
            0.4: DIAGONAL_2,
            0.5: NONE,
            0.55: DIAGONAL_1,
            0.6: DIAGONAL_1,
            0.75: HORIZONTAL,
            0.77: DIAGONAL_1,
            0.78: DIAGONAL_2,
            0.94: DIAGONAL_2,
            0.95: VERTICAL,
            1.0: VERTICAL,
        }
        values = np.array(list(expected.keys()))
        classes = classify(values)
        for value, cls in zip(values, classes):
            self.assertEqual(cls, expected[value], f"theta_norm={value}")

    def test_every_class_reachable(self):
        classes = classify(np.linspace(0.0, 1.0, 1001))
        self.assertEqual(set(classes.tolist()), {0, 1, 2, 3, 4})

    def test_classify_keeps_shape(self):
        classes = classify(np.full((3, 7), 0.5))
        self.assertEqual(classes.shape, (3, 7))
        self.assertEqual(classes.dtype, np.uint8)


class TestNormalizedAngle(unittest.TestCase):

    def test_zero_gradient_is_half(self):
        self.assertEqual(normalized_angle(np.array([0]), np.array([0]))[0], 0.5)

    def test_cardinal_directions(self):
        gx = np.array([1, -1, 0, 0])
        gy = np.array([0, 0, 1, -1])
        np.testing.assert_allclose(normalized_angle(gx, gy), [0.5, 1.0, 0.75, 0.25])


class TestSobelDetector(unittest.TestCase):

    def setUp(self):
        self.detector = SobelEdgeDetector()

    def test_uniform_image_has_no_edges(self):
        classes = self.detector.apply(np.full((16, 16), 128, dtype=np.uint8))
        self.assertTrue(np.all(classes == NONE))

    def test_vertical_step_dark_to_bright(self):
        """Left half 0, right half 255: the boundary columns are vertical."""
        img = step_image(16, vertical=True)
        gx, gy = sobel_gradients(img)
        self.assertTrue(np.all(gx[:, 7:9] < 0))
        self.assertTrue(np.all(gy == 0))

        classes = self.detector.apply(img)
        self.assertTrue(np.all(classes[:, 7:9] == VERTICAL))
        self.assertTrue(np.all(classes[:, :7] == NONE))
        self.assertTrue(np.all(classes[:, 9:] == NONE))

    def test_vertical_step_bright_to_dark_lands_on_none(self):
        """The opposite step has theta_norm exactly 0.5, the NONE bucket."""
        classes = self.detector.apply(step_image(16, vertical=True, low=255, high=0))
        self.assertTrue(np.all(classes == NONE))

    def test_horizontal_steps(self):
        for low, high in ((0, 255), (255, 0)):
            classes = self.detector.apply(step_image(16, vertical=False, low=low, high=high))
            self.assertTrue(np.all(classes[7:9, :] == HORIZONTAL))
            self.assertTrue(np.all(classes[:7, :] == NONE))

    def test_diagonal_line_produces_diagonal_classes(self):
        img = np.zeros((32, 32), dtype=np.uint8)
        for i in range(32):
            img[i, :i] = 255
        classes = self.detector.apply(img)
        found = set(np.unique(classes).tolist())
        self.assertTrue(found & {DIAGONAL_1, DIAGONAL_2})

    def test_output_range_and_shape(self):
        rng = np.random.default_rng(3)
        img = rng.integers(0, 256, (20, 30), dtype=np.uint8)
        classes = self.detector.apply(img)
        self.assertEqual(classes.shape, (20, 30))
        self.assertLessEqual(int(classes.max()), 4)

    def test_rejects_bad_input(self):
        with self.assertRaises(ProcessingError):
            self.detector.apply(np.zeros((4, 4), dtype=np.float64))
        with self.assertRaises(ProcessingError):
            self.detector.apply(np.zeros((4, 4, 3), dtype=np.uint8))

    def test_class_names_cover_all_classes(self):
        self.assertEqual(len(edges.CLASS_NAMES), 5)


if __name__ == "__main__":
    unittest.main()
