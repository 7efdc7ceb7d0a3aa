"""Tests for timeprop.trace."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from timeprop import SpringForce, Trace, TraceRecorder, propagate


@pytest.fixture
def spring_trace():
    _, _, trace = propagate(SpringForce(k=1.0), 1.0, 1.0, 0.0, 0.1, record=True)
    return trace


def test_recorder_accumulates_samples():
    recorder = TraceRecorder()
    recorder(0.0, 1.0, 0.0)
    recorder(0.5, 0.75, -0.5)

    assert len(recorder) == 2
    trace = recorder.to_trace()
    np.testing.assert_array_equal(trace.ts, [0.0, 0.5])
    np.testing.assert_array_equal(trace.xs, [1.0, 0.75])
    np.testing.assert_array_equal(trace.as_, [0.0, -0.5])

    # Later samples do not leak into a trace already returned
    recorder(1.0, 0.0, -1.0)
    assert trace.n_steps == 2
    assert len(recorder) == 3


def test_trace_length_mismatch():
    with pytest.raises(ValueError, match="Trace lengths differ"):
        Trace(ts=[0.0, 1.0], xs=[0.0], as_=[0.0, 1.0])


def test_trace_copies_input():
    ts = np.array([0.0, 1.0])
    trace = Trace(ts=ts, xs=[0.0, 1.0], as_=[1.0, 1.0])
    ts[0] = 5.0

    assert trace.ts[0] == 0.0
    assert not trace.ts.flags.writeable


def test_to_dataframe(spring_trace):
    df = spring_trace.to_dataframe()

    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["t", "x", "a"]
    assert len(df) == spring_trace.n_steps == len(spring_trace)
    np.testing.assert_array_equal(df["t"].to_numpy(), spring_trace.ts)
    np.testing.assert_array_equal(df["x"].to_numpy(), spring_trace.xs)
    np.testing.assert_array_equal(df["a"].to_numpy(), spring_trace.as_)


@pytest.mark.parametrize("ext", [".csv", ".npz", ".mat"])
def test_save_and_load(spring_trace, tmp_path, ext):
    filename = str(tmp_path / f"trace{ext}")
    spring_trace.save(filename)

    loaded = Trace.load(filename)

    assert loaded.n_steps == spring_trace.n_steps
    np.testing.assert_allclose(loaded.ts, spring_trace.ts)
    np.testing.assert_allclose(loaded.xs, spring_trace.xs)
    np.testing.assert_allclose(loaded.as_, spring_trace.as_)


def test_unsupported_extension(spring_trace, tmp_path):
    with pytest.raises(ValueError, match="Unsupported file extension"):
        spring_trace.save(str(tmp_path / "trace.txt"))
    with pytest.raises(ValueError, match="Unsupported file extension"):
        Trace.load(str(tmp_path / "trace.txt"))


def test_load_csv_missing_columns(tmp_path):
    filename = tmp_path / "bad.csv"
    pd.DataFrame({"t": [0.0], "x": [1.0]}).to_csv(filename, index=False)

    with pytest.raises(ValueError, match="Missing trace columns"):
        Trace.load(str(filename))


def test_plot(spring_trace, tmp_path):
    fig, ax = spring_trace.plot(title="Spring Motion", legend_loc="lower left")

    labels = [line.get_label() for line in ax.get_lines()]
    assert labels == ["x(t)", "a(t)"]
    assert ax.get_xlabel() == "t"
    assert ax.get_ylabel() == "x / a"
    assert ax.get_title() == "Spring Motion"

    filename = tmp_path / "spring_motion.png"
    fig.savefig(filename)
    plt.close(fig)
    assert filename.exists()


def test_plot_on_existing_axes(spring_trace):
    fig, ax = plt.subplots()
    fig_out, ax_out = spring_trace.plot(ax=ax)

    assert fig_out is fig
    assert ax_out is ax
    plt.close(fig)


def test_repr(spring_trace):
    assert repr(spring_trace) == f"Trace(n_steps={spring_trace.n_steps})"
    assert repr(TraceRecorder()) == "TraceRecorder(n_samples=0)"
