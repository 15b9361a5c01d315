from pathlib import Path
from unittest import mock
import tempfile
import unittest

from swz_PowerEditor.core.errors import (
    PowerConfigError, PowerDecodeError, PowerFileNotFoundError, PowerIOError,
)
from swz_PowerEditor.core.model import HEADER_COLUMNS, Power, copy_power, header_line
from swz_PowerEditor.loaders.powertypes_codec import CodecOptions, load_powers, save_powers

CODEC_LOGGER = "swz_PowerEditor.loaders.powertypes_codec"


def _cell(value: str) -> str:
    if any(ch in value for ch in ',"\n'):
        return '"' + value.replace('"', '""') + '"'
    return value


def _row(**cells) -> str:
    """One data line; keyword names are header columns with '.' written as '__'."""
    values = {k.replace("__", "."): v for k, v in cells.items()}
    unknown = set(values) - set(HEADER_COLUMNS)
    assert not unknown, unknown
    return ",".join(_cell(values.get(c, "")) for c in HEADER_COLUMNS)


def _write(path: Path, rows, sentinel: bool = True) -> Path:
    lines = (["powerTypes"] if sentinel else []) + [header_line()] + list(rows)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


SAMPLE_ROWS = [
    _row(PowerName="UnarmedNLight", PowerID="1", OrderID="10", CastTime="0:2,3:4@1",
         BaseDamage="5,8", AccelMult="1.5", IsAirPower="FALSE", CastGfx__AnimScale="2",
         DevNotes='says "hi"', TargetMethod="Closest"),
    _row(PowerName="UnarmedNLight2", PowerID="2", AoERadiusX="40&20,60", AoERadiusY="30&20,40",
         IsAirPower="TRUE", ComboName="UnarmedNLight3"),
    _row(PowerName="UnarmedNLight3", PowerID="3", Priority="-1", GrabAnimSpeed="0.25"),
]


class LoadTests(unittest.TestCase):
    def test_fields_are_decoded_by_kind(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(Path(tmpdir) / "powerTypes.csv", SAMPLE_ROWS)
            powers = load_powers(path)

        self.assertEqual(["UnarmedNLight", "UnarmedNLight2", "UnarmedNLight3"],
                         [p.power_name for p in powers])
        first = powers[0]
        self.assertEqual(1, first.power_id)
        self.assertEqual(1.5, first.accel_mult)
        self.assertEqual(2.0, first.cast_gfx_anim_scale)
        self.assertIs(False, first.is_air_power)
        self.assertEqual("0:2,3:4@1", first.cast_time)
        self.assertEqual('says "hi"', first.dev_notes)
        self.assertEqual("Closest", first.target_method)
        self.assertIsNone(first.combo_name)
        self.assertIs(True, powers[1].is_air_power)
        self.assertEqual(-1, powers[2].priority)

    def test_sentinel_line_is_optional(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with_sentinel = load_powers(_write(Path(tmpdir) / "a.csv", SAMPLE_ROWS, sentinel=True))
            without = load_powers(_write(Path(tmpdir) / "b.csv", SAMPLE_ROWS, sentinel=False))
        self.assertEqual(with_sentinel, without)
        self.assertEqual(3, len(without))

    def test_non_numeric_float_cell_skips_only_that_row(self):
        rows = [
            _row(PowerName="A", PowerID="1", AccelMult="1"),
            _row(PowerName="B", PowerID="2", AccelMult="fast"),
            _row(PowerName="C", PowerID="3", AccelMult="0.5"),
        ]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(Path(tmpdir) / "powerTypes.csv", rows)
            with self.assertLogs(CODEC_LOGGER, level="WARNING") as logs:
                powers = load_powers(path)

        self.assertEqual(["A", "C"], [p.power_name for p in powers])
        self.assertTrue(any("B" in line and "AccelMult" in line for line in logs.output))

    def test_row_with_too_many_fields_is_skipped(self):
        rows = [SAMPLE_ROWS[0], SAMPLE_ROWS[1] + ",extra,cells", SAMPLE_ROWS[2]]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(Path(tmpdir) / "powerTypes.csv", rows)
            with self.assertLogs(CODEC_LOGGER, level="WARNING"):
                powers = load_powers(path)
        self.assertEqual(["UnarmedNLight", "UnarmedNLight3"], [p.power_name for p in powers])

    def test_overlong_first_row_does_not_shift_the_others(self):
        rows = [SAMPLE_ROWS[0] + ",spill", SAMPLE_ROWS[1], SAMPLE_ROWS[2]]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(Path(tmpdir) / "powerTypes.csv", rows)
            with self.assertLogs(CODEC_LOGGER, level="WARNING") as logs:
                powers = load_powers(path)
        self.assertEqual(["UnarmedNLight2", "UnarmedNLight3"], [p.power_name for p in powers])
        self.assertEqual(2, powers[0].power_id)
        self.assertTrue(any("UnarmedNLight" in line and "more fields" in line for line in logs.output))

    def test_row_with_too_few_fields_is_skipped(self):
        rows = [SAMPLE_ROWS[0], "Truncated,4,1", SAMPLE_ROWS[2]]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(Path(tmpdir) / "powerTypes.csv", rows)
            with self.assertLogs(CODEC_LOGGER, level="WARNING") as logs:
                powers = load_powers(path)
        self.assertEqual(["UnarmedNLight", "UnarmedNLight3"], [p.power_name for p in powers])
        self.assertTrue(any("Truncated" in line for line in logs.output))

    def test_unrecognised_boolean_keeps_row_with_empty_value(self):
        rows = [_row(PowerName="A", PowerID="1", IsAirPower="maybe", IsThrow="true")]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(Path(tmpdir) / "powerTypes.csv", rows)
            with self.assertLogs(CODEC_LOGGER, level="WARNING"):
                powers = load_powers(path)
        self.assertEqual(1, len(powers))
        self.assertIsNone(powers[0].is_air_power)
        self.assertIs(True, powers[0].is_throw)

    def test_missing_file_reports_path(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            missing = Path(tmpdir) / "nope.csv"
            with self.assertRaises(PowerFileNotFoundError) as ctx:
                load_powers(missing)
        self.assertTrue(str(ctx.exception).startswith("Error: File not found at"))

    def test_undecodable_bytes_are_a_decode_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "powerTypes.csv"
            path.write_bytes(b"powerTypes\n" + header_line().encode() + b"\n\xff\xfe\xfa,1\n")
            with self.assertRaises(PowerDecodeError):
                load_powers(path)

    def test_header_only_file_loads_empty_list(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(Path(tmpdir) / "powerTypes.csv", [])
            self.assertEqual([], load_powers(path))


class SaveTests(unittest.TestCase):
    def test_round_trip_is_stable(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            src = _write(Path(tmpdir) / "powerTypes.csv", SAMPLE_ROWS)
            first = load_powers(src)

            out = Path(tmpdir) / "saved.csv"
            save_powers(out, first)
            second = load_powers(out)
            saved_text = out.read_text(encoding="utf-8")

            save_powers(out, second)
            resaved_text = out.read_text(encoding="utf-8")

        self.assertEqual(first, second)
        self.assertEqual(saved_text, resaved_text)

    def test_unedited_file_is_written_back_byte_for_byte(self):
        rows = [
            SAMPLE_ROWS[0],
            _row(PowerName="Slide", PowerID="+4", AccelMult="1.0", GrabAnimSpeed="0.50",
                 IsThrow="True", IsAirPower="false", CastGfx__AnimScale="1e0"),
        ]
        with tempfile.TemporaryDirectory() as tmpdir:
            src = _write(Path(tmpdir) / "powerTypes.csv", rows)
            before = src.read_bytes()
            save_powers(src, load_powers(src))
            self.assertEqual(before, src.read_bytes())

    def test_edited_values_are_written_canonically(self):
        rows = [_row(PowerName="Slide", PowerID="4", AccelMult="1.0", GrabAnimSpeed="0.50",
                     IsThrow="True")]
        with tempfile.TemporaryDirectory() as tmpdir:
            src = _write(Path(tmpdir) / "powerTypes.csv", rows)
            [power] = load_powers(src)
            edited = copy_power(power)
            edited.accel_mult = 2.5
            edited.is_throw = False
            save_powers(src, [edited])
            cells = dict(zip(HEADER_COLUMNS, src.read_text(encoding="utf-8").split("\n")[2].split(",")))

        self.assertEqual("2.5", cells["AccelMult"])
        self.assertEqual("FALSE", cells["IsThrow"])
        self.assertEqual("0.50", cells["GrabAnimSpeed"])

    def test_output_starts_with_sentinel_and_canonical_header(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "powerTypes.csv"
            save_powers(out, [Power(power_name="A", power_id=1, accel_mult=2.0, is_throw=False)])
            lines = out.read_text(encoding="utf-8").split("\n")

        self.assertEqual("powerTypes", lines[0])
        self.assertEqual(header_line(), lines[1])
        cells = lines[2].split(",")
        self.assertEqual(len(HEADER_COLUMNS), len(cells))
        by_column = dict(zip(HEADER_COLUMNS, cells))
        self.assertEqual("A", by_column["PowerName"])
        self.assertEqual("1", by_column["PowerID"])
        self.assertEqual("2", by_column["AccelMult"])
        self.assertEqual("FALSE", by_column["IsThrow"])
        self.assertEqual("", by_column["IsAirPower"])

    def test_text_typed_in_the_editor_is_written_canonically(self):
        edited = Power(power_name="A", power_id="7", accel_mult="0.50", is_air_power="true")
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "powerTypes.csv"
            save_powers(out, [edited])
            [power] = load_powers(out)
        self.assertEqual(7, power.power_id)
        self.assertEqual(0.5, power.accel_mult)
        self.assertIs(True, power.is_air_power)

    def test_dict_records_are_accepted(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "powerTypes.csv"
            save_powers(out, [{"power_name": "A", "power_id": 3}])
            [power] = load_powers(out)
        self.assertEqual(("A", 3), (power.power_name, power.power_id))

    def test_write_failure_leaves_destination_untouched(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            dest = _write(Path(tmpdir) / "powerTypes.csv", SAMPLE_ROWS)
            before = dest.read_bytes()

            with mock.patch("pandas.DataFrame.to_csv", side_effect=OSError("disk full")):
                with self.assertRaises(PowerIOError) as ctx:
                    save_powers(dest, [Power(power_name="X", power_id=9)])

            self.assertIn("disk full", str(ctx.exception))
            self.assertEqual(before, dest.read_bytes())
            self.assertFalse((Path(tmpdir) / "powerTypes.csv.tmp").exists())

    def test_unwritable_value_fails_before_touching_disk(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            dest = Path(tmpdir) / "powerTypes.csv"
            with self.assertRaises(PowerDecodeError):
                save_powers(dest, [Power(power_name="A", accel_mult="quick")])
            self.assertFalse(dest.exists())
            self.assertFalse((Path(tmpdir) / "powerTypes.csv.tmp").exists())

    def test_config_controls_literals_and_delimiter(self):
        cfg = {"codec": {"delimiter": "|", "boolean_literals": {"true": "True", "false": "False"}}}
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "powerTypes.csv"
            save_powers(out, [Power(power_name="A,B", power_id=1, is_throw=True)], cfg)
            lines = out.read_text(encoding="utf-8").split("\n")
            [power] = load_powers(out, cfg)

        self.assertEqual(header_line("|"), lines[1])
        self.assertTrue(lines[2].startswith("A,B|1|"))
        self.assertIn("|True|", lines[2])
        self.assertEqual("A,B", power.power_name)
        self.assertIs(True, power.is_throw)


class CodecOptionsTests(unittest.TestCase):
    def test_defaults_without_config(self):
        opts = CodecOptions.from_config({})
        self.assertEqual("powerTypes", opts.sentinel)
        self.assertEqual(frozenset({"integer", "float"}), opts.strict_kinds)
        self.assertEqual(".tmp", opts.temp_suffix)

    def test_strict_kinds_from_config(self):
        opts = CodecOptions.from_config({"codec": {"strict_kinds": ["Boolean", "bogus"]}})
        self.assertEqual(frozenset({"boolean"}), opts.strict_kinds)

    def test_multi_character_delimiter_is_rejected(self):
        with self.assertRaises(PowerConfigError):
            CodecOptions.from_config({"codec": {"delimiter": "||"}})


if __name__ == "__main__":
    unittest.main()
