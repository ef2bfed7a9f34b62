from __future__ import annotations

import argparse

import numpy as np

from qplot import Lines, Point, Qplot, Scatter, Series, Show, Title


def main() -> None:
    parser = argparse.ArgumentParser(prog="qplot-demo")
    parser.add_argument("--backend", choices=["python", "gnuplot"], default="python")
    parser.add_argument("--samples", type=int, default=200)
    args = parser.parse_args()
    if args.samples <= 1:
        raise SystemExit("--samples must be > 1")

    t = np.linspace(0.0, 4.0 * np.pi, args.samples, dtype=np.float64)
    wave = Series.from_xy(np.sin(t), x=t, label="sin")
    noisy = Series.from_xy(np.sin(t) + np.random.default_rng(7).normal(0.0, 0.2, t.size), x=t, label="samples")

    # Title goes into the header and is replayed before each script.
    with Qplot(args.backend, [Point, Series], Title("qplot demo")) as qp:
        qp.plot(Lines(width=2.0), wave, Show())
        qp.plot(Scatter(size=3.0), noisy, Point(float(t[0]), 0.0), Show())


if __name__ == "__main__":
    main()
