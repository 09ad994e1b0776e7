"""Command line interface: argument handling and exit codes."""

import argparse
import contextlib
import io
import os
import tempfile
import unittest
from PIL import Image

from ascii_edge import cli
from ascii_edge.filters import default_edge_chain


class TestArgumentTypes(unittest.TestCase):

    def test_parse_color(self):
        self.assertEqual(cli.parse_color("30"), 30)
        self.assertEqual(cli.parse_color("255,128,0"), (255, 128, 0))
        for bad in ("red", "1,2", "300", "1,2,-3"):
            with self.assertRaises(argparse.ArgumentTypeError):
                cli.parse_color(bad)

    def test_parse_threshold(self):
        self.assertEqual(cli.parse_threshold("0.25"), 0.25)
        for bad in ("x", "1.5", "-0.1"):
            with self.assertRaises(argparse.ArgumentTypeError):
                cli.parse_threshold(bad)


    def test_default_edge_filters_follow_chain(self):
        names = [f.name for f in default_edge_chain()]
        self.assertEqual(cli.DEFAULT_EDGE_FILTERS.split(','), names)
        args = cli.create_argument_parser().parse_args(["x.png"])
        chain = cli.build_config(args).edge_filters
        self.assertEqual([f.name for f in chain], names)


class TestMain(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.src = os.path.join(self.tmp.name, "in.png")
        Image.new('RGB', (16, 16), (128, 128, 128)).save(self.src)

    def run_main(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(io.StringIO()):
            code = cli.main(list(argv))
        return code, out.getvalue()

    def test_single_output(self):
        dst = os.path.join(self.tmp.name, "out.png")
        code, out = self.run_main(self.src, "-o", dst, "-c", "4", "--no-edge-filters", "--print", "--stats")
        self.assertEqual(code, 0)
        self.assertTrue(os.path.exists(dst))
        self.assertIn("oooo", out)
        self.assertIn("ssim", out)

    def test_default_output_name(self):
        code, _ = self.run_main(self.src, "-c", "4")
        self.assertEqual(code, 0)
        self.assertTrue(os.path.exists(os.path.join(self.tmp.name, "in_ascii.png")))

    def test_batch_with_failure(self):
        missing = os.path.join(self.tmp.name, "missing.png")
        out_dir = os.path.join(self.tmp.name, "out")
        code, out = self.run_main(self.src, missing, "--output-dir", out_dir, "-c", "4")
        self.assertEqual(code, 1)
        self.assertIn("1 converted, 1 failed", out)
        self.assertTrue(os.path.exists(os.path.join(out_dir, "in_ascii.png")))

    def test_output_with_many_inputs(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main(self.src, self.src, "-o", "x.png")
        self.assertEqual(ctx.exception.code, 2)

    def test_unknown_filter(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main(self.src, "--edge-filters", "sharpen,emboss")
        self.assertEqual(ctx.exception.code, 2)

    def test_bad_workers(self):
        other = os.path.join(self.tmp.name, "other.png")
        Image.new('L', (16, 16), 50).save(other)
        with self.assertRaises(SystemExit) as ctx:
            self.run_main(self.src, other, "--workers", "0", "--output-dir", self.tmp.name)
        self.assertEqual(ctx.exception.code, 2)

    def test_bad_cell_size(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main(self.src, "-c", "0")
        self.assertEqual(ctx.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
