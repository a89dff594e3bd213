import unittest

from zfs_inventory.exceptions import ZFSParseError
from zfs_inventory.models.dataset import Filesystem, Snapshot
from zfs_inventory.services.parser import parse_property_record, parse_property_stream


class PropertyStreamTests(unittest.TestCase):
    def test_lines_for_same_name_merge_into_one_record(self):
        out = b"ds1\tguid\tG1\nds1\tcreatetxg\t42\nds2\tguid\tG2\n"

        records = parse_property_stream(out, Snapshot)

        self.assertEqual(set(records), {"ds1", "ds2"})
        self.assertEqual(records["ds1"].guid, "G1")
        self.assertEqual(records["ds1"].createtxg, 42)
        self.assertEqual(records["ds2"].guid, "G2")
        self.assertEqual(records["ds2"].createtxg, 0)

    def test_line_order_across_datasets_does_not_matter(self):
        out = "tank/a\tguid\t1\ntank/b\tguid\t2\ntank/a\torigin\ttank/b@s\ntank/b\tcreatetxg\t7\n"

        records = parse_property_stream(out, Filesystem)

        self.assertEqual(records["tank/a"].origin, "tank/b@s")
        self.assertEqual(records["tank/a"].guid, "1")
        self.assertEqual(records["tank/b"].createtxg, 7)
        self.assertEqual(records["tank/b"].name, "tank/b")

    def test_unknown_properties_are_ignored(self):
        out = "tank/a\tguid\t1\ntank/a\tcompressratio\t1.00x\ntank/a\tused\t96K\n"

        records = parse_property_stream(out, Filesystem)

        self.assertEqual(records["tank/a"], Filesystem(name="tank/a", guid="1"))

    def test_origin_is_ignored_for_snapshots(self):
        records = parse_property_stream("tank/a@s\torigin\ttank/x@y\n", Snapshot)

        self.assertFalse(hasattr(records["tank/a@s"], "origin"))

    def test_bad_createtxg_is_a_parse_error(self):
        with self.assertRaises(ZFSParseError) as ctx:
            parse_property_stream("tank/a\tguid\t1\ntank/a\tcreatetxg\tlots\n", Filesystem)

        self.assertEqual(ctx.exception.raw_line, "tank/a\tcreatetxg\tlots")
        self.assertIn("createtxg", str(ctx.exception))

    def test_createtxg_accepts_signed_ascii_digits(self):
        records = parse_property_stream("tank/a\tcreatetxg\t+5\ntank/b\tcreatetxg\t-3\n", Filesystem)

        self.assertEqual(records["tank/a"].createtxg, 5)
        self.assertEqual(records["tank/b"].createtxg, -3)

    def test_createtxg_rejects_non_ascii_and_underscored_digits(self):
        for value in ("١٢", "1_000", "", "+", " 42"):
            with self.subTest(value=value):
                with self.assertRaises(ZFSParseError):
                    parse_property_stream(f"tank/a\tcreatetxg\t{value}\n", Filesystem)

    def test_missing_columns_is_a_parse_error(self):
        with self.assertRaises(ZFSParseError):
            parse_property_stream("tank/a\tguid\n", Filesystem)

    def test_blank_lines_and_empty_output(self):
        self.assertEqual(parse_property_stream(b"", Filesystem), {})
        self.assertEqual(len(parse_property_stream("\ntank\tguid\t9\n\n", Filesystem)), 1)

    def test_values_may_contain_spaces(self):
        records = parse_property_stream("tank/a\torigin\ttank/my snap@x y\n", Filesystem)

        self.assertEqual(records["tank/a"].origin, "tank/my snap@x y")


class PropertyRecordTests(unittest.TestCase):
    def test_single_record(self):
        out = b"name\ttank/fs\nguid\t1234\ncreatetxg\t99\norigin\t-\n"

        fs = parse_property_record(out, Filesystem)

        self.assertEqual(fs, Filesystem(name="tank/fs", guid="1234", createtxg=99, origin="-"))
        self.assertFalse(fs.is_clone)

    def test_single_record_bad_createtxg(self):
        with self.assertRaises(ZFSParseError):
            parse_property_record("name\ttank/fs@s\ncreatetxg\t12a\n", Snapshot)

    def test_single_record_missing_value_column(self):
        with self.assertRaises(ZFSParseError):
            parse_property_record("name\n", Snapshot)


class ModelTests(unittest.TestCase):
    def test_snapshot_filesystem_name_splits_at_first_at(self):
        snap = Snapshot(name="tank/fs@daily@odd")

        self.assertEqual(snap.filesystem_name, "tank/fs")
        self.assertEqual(snap.short_name, "daily@odd")

    def test_is_clone(self):
        self.assertFalse(Filesystem(name="tank/a").is_clone)
        self.assertFalse(Filesystem(name="tank/a", origin="-").is_clone)
        self.assertTrue(Filesystem(name="tank/a", origin="tank/b@s").is_clone)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
