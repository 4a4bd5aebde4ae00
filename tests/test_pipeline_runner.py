"""
Integration tests for the sky-map runner.

Runs main() end to end on a small grid and checks the files a run
leaves behind, including the run record written when a step fails.
"""

import json
import math
import os

import pandas as pd
import pytest

from skybright.pipeline_runner import conditions_from_args, main, parse_args

BASE_ARGS = [
    "--year", "2020", "--month", "6", "--latitude", "50",
    "--altitude", "100", "--humidity", "50",
    "--sun-alt", "-19.5", "--moon-alt", "-10", "--moon-phase", "180",
    "--n-alt", "5", "--n-az", "8",
]


def _load_run(output_dir):
    with open(os.path.join(output_dir, "sky_map_run.json")) as f:
        return json.load(f)


class TestConditionsFromArgs:

    def test_degrees_to_radians(self):
        args = parse_args(BASE_ARGS)
        cond = conditions_from_args(args)
        assert cond["latitude"] == pytest.approx(math.radians(50.0))
        assert cond["moon_phase"] == pytest.approx(math.pi)
        assert cond["sun_zenith_dist"] == pytest.approx(math.radians(109.5))
        assert cond["moon_zenith_dist"] == pytest.approx(math.radians(100.0))

    def test_defaults(self):
        from skybright import config

        args = parse_args(["--year", "2020", "--month", "1", "--latitude", "0",
                           "--sun-alt", "-30"])
        cond = conditions_from_args(args)
        assert cond["temperature"] == config.DEFAULT_TEMPERATURE_C
        assert cond["relative_humidity"] == config.DEFAULT_RELATIVE_HUMIDITY
        assert cond["twilight_scale"] == config.DEFAULT_TWILIGHT_SCALE
        assert not args.exact

    def test_required_arguments(self):
        with pytest.raises(SystemExit):
            parse_args(["--year", "2020"])


class TestMain:

    def test_successful_run(self, tmp_dir):
        assert main(BASE_ARGS + ["--output-dir", tmp_dir]) == 0

        run = _load_run(tmp_dir)
        assert run["all_ok"]
        assert [s["step_name"] for s in run["steps"]] == [
            "validate_conditions", "prepare_session", "sample_sky",
            "summarize_sky", "write_csv", "plot_sky_map",
        ]
        assert run["session"]["year"] == 2020
        assert run["summary"]["n_samples"] == 40
        assert 1e-4 < run["summary"]["zenith_luminance_cd_m2"] < 1e-3
        assert len(run["output_files"]) == 2
        assert len(run["run_id"]) == 8

        assert os.path.exists(os.path.join(tmp_dir, "csv", "sky_map.csv"))
        assert os.path.exists(os.path.join(tmp_dir, "maps", "sky_map.png"))

    def test_csv_contents(self, tmp_dir):
        main(BASE_ARGS + ["--output-dir", tmp_dir, "--no-plot"])
        df = pd.read_csv(os.path.join(tmp_dir, "csv", "sky_map.csv"))
        assert len(df) == 40
        assert (df["luminance_cd_m2"] > 0).all()

    def test_no_plot(self, tmp_dir):
        assert main(BASE_ARGS + ["--output-dir", tmp_dir, "--no-plot"]) == 0
        assert not os.path.exists(os.path.join(tmp_dir, "maps", "sky_map.png"))
        assert "plot_sky_map" not in [s["step_name"] for s in _load_run(tmp_dir)["steps"]]

    def test_json_log_written(self, tmp_dir):
        main(BASE_ARGS + ["--output-dir", tmp_dir, "--no-plot"])
        with open(os.path.join(tmp_dir, "skybright.jsonl")) as f:
            entries = [json.loads(line) for line in f if line.strip()]
        steps = [e["step_name"] for e in entries if "step_name" in e]
        assert "prepare_session" in steps
        assert all(e["run_id"] for e in entries)

    def test_invalid_humidity_stops_run(self, tmp_dir):
        args = list(BASE_ARGS)
        args[args.index("--humidity") + 1] = "0"
        assert main(args + ["--output-dir", tmp_dir]) == 1

        run = _load_run(tmp_dir)
        assert not run["all_ok"]
        assert [s["step_name"] for s in run["steps"]] == ["validate_conditions"]
        assert run["steps"][0]["status"] == "error"
        assert "relative_humidity" in run["steps"][0]["error"]
        assert run["output_files"] == []
        assert not os.path.exists(os.path.join(tmp_dir, "csv", "sky_map.csv"))
