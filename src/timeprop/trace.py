"""Trace recording, storage and plotting.

This module provides the TraceRecorder observer used by the propagation
loop and the Trace container it produces.
"""

import os
from dataclasses import dataclass

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

TRACE_COLUMNS = ["t", "x", "a"]


def _frozen_array(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.flags.writeable = False
    return arr


class TraceRecorder:
    """Step observer that accumulates pre-step states.

    Each call appends one (t, x, a) sample. The recorder never touches the
    force function or the state it observes.

    Examples
    --------
    >>> recorder = TraceRecorder()
    >>> recorder(0.0, 1.0, 0.0)
    >>> recorder(0.1, 1.0, -0.1)
    >>> len(recorder)
    2
    >>> recorder.to_trace().ts
    array([0. , 0.1])
    """

    def __init__(self):
        self.ts = []
        self.xs = []
        self.as_ = []

    def __call__(self, t: float, x: float, a: float) -> None:
        self.ts.append(t)
        self.xs.append(x)
        self.as_.append(a)

    def __len__(self):
        return len(self.ts)

    def to_trace(self) -> "Trace":
        """Return the samples recorded so far as a Trace."""
        return Trace(ts=self.ts, xs=self.xs, as_=self.as_)

    def __repr__(self):
        return f"TraceRecorder(n_samples={len(self)})"


@dataclass(eq=False)
class Trace:
    """Time series of pre-step states from a propagation.

    Entry i holds (t, x, a) as observed before step i+1 was applied. The
    state after the last step is not part of the trace; it is returned
    separately by the propagation routine.

    Parameters
    ----------
    ts : array-like
        Pre-step times, shape (n_steps,)
    xs : array-like
        Pre-step positions, shape (n_steps,)
    as_ : array-like
        Pre-step rates of change, shape (n_steps,)

    Notes
    -----
    The arrays are copied and marked read-only on construction.
    """

    ts: np.ndarray
    xs: np.ndarray
    as_: np.ndarray

    def __post_init__(self):
        """Copy inputs into read-only arrays and check their lengths."""
        self.ts = _frozen_array(self.ts)
        self.xs = _frozen_array(self.xs)
        self.as_ = _frozen_array(self.as_)

        n = len(self.ts)
        if len(self.xs) != n or len(self.as_) != n:
            raise ValueError(
                f"Trace lengths differ: ts={n}, xs={len(self.xs)}, "
                f"as_={len(self.as_)}"
            )

    @property
    def n_steps(self) -> int:
        """Number of recorded steps."""
        return len(self.ts)

    def __len__(self):
        return self.n_steps

    def to_dataframe(self) -> pd.DataFrame:
        """Return the trace as a DataFrame with columns t, x and a.

        Examples
        --------
        >>> df = trace.to_dataframe()
        >>> df.plot(x='t', y=['x', 'a'])
        """
        return pd.DataFrame(
            {"t": self.ts, "x": self.xs, "a": self.as_},
            columns=TRACE_COLUMNS,
        )

    def plot(self, ax=None, title=None, legend_loc="best", **kwargs):
        """Plot x(t) and a(t) on one set of axes.

        Parameters
        ----------
        ax : matplotlib.axes.Axes, optional
            Axes to draw on. A new figure is created if None.
        title : str, optional
            Axes title
        legend_loc : str, optional
            Legend location, by default 'best'
        **kwargs
            Additional arguments passed to ax.plot()

        Returns
        -------
        fig : matplotlib.figure.Figure
        ax : matplotlib.axes.Axes
        """
        if ax is None:
            fig, ax = plt.subplots(figsize=(7, 4))
        else:
            fig = ax.figure

        ax.plot(self.ts, self.xs, label="x(t)", **kwargs)
        ax.plot(self.ts, self.as_, label="a(t)", **kwargs)
        ax.set_xlabel("t")
        ax.set_ylabel("x / a")
        if title is not None:
            ax.set_title(title)
        ax.legend(loc=legend_loc)
        ax.grid(True, alpha=0.3)

        return fig, ax

    def save(self, filename: str):
        """Save the trace to file.

        Supports .csv (via pandas), .npz (NumPy) and .mat (MATLAB) formats.

        Examples
        --------
        >>> trace.save('spring_motion_trace.csv')
        """
        ext = os.path.splitext(filename)[1].lower()

        if ext == ".csv":
            self.to_dataframe().to_csv(filename, index=False)
        elif ext == ".npz":
            np.savez_compressed(filename, ts=self.ts, xs=self.xs, as_=self.as_)
        elif ext == ".mat":
            from scipy.io import savemat

            savemat(filename, {"ts": self.ts, "xs": self.xs, "as_": self.as_})
        else:
            raise ValueError(
                f"Unsupported file extension '{ext}'. Use .csv, .npz or .mat"
            )

    @classmethod
    def load(cls, filename: str) -> "Trace":
        """Load a trace saved with :meth:`save`."""
        ext = os.path.splitext(filename)[1].lower()

        if ext == ".csv":
            df = pd.read_csv(filename)
            missing = [col for col in TRACE_COLUMNS if col not in df.columns]
            if missing:
                raise ValueError(f"Missing trace columns in {filename}: {missing}")
            return cls(ts=df["t"].values, xs=df["x"].values, as_=df["a"].values)

        elif ext == ".npz":
            with np.load(filename) as data:
                return cls(ts=data["ts"], xs=data["xs"], as_=data["as_"])

        elif ext == ".mat":
            from scipy.io import loadmat

            data = loadmat(filename)
            # savemat stores 1-D arrays as row vectors
            return cls(
                ts=data["ts"].flatten(),
                xs=data["xs"].flatten(),
                as_=data["as_"].flatten(),
            )

        else:
            raise ValueError(
                f"Unsupported file extension '{ext}'. Use .csv, .npz or .mat"
            )

    def __repr__(self):
        return f"Trace(n_steps={self.n_steps})"
