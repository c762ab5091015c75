#!/usr/bin/env python3
"""
Example: smooth a stereo click train with a 5-tap linear-phase filter.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import logging

from ringfir import StereoSample, define_filter


Smoother = define_filter("Smoother", StereoSample, 5, [0.2, 0.4, 1.0, 0.4, 0.2])


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    Smoother.table.verify_symmetry()

    f = Smoother()
    clicks = [StereoSample(1.0, 0.0) if n % 8 == 0 else StereoSample(0.0, -0.5)
              for n in range(24)]

    print(f"{'n':>3}  {'in L':>6} {'in R':>6}  {'out L':>7} {'out R':>7}")
    print("-" * 36)
    for n, s in enumerate(clicks):
        y = f.feed(s)
        print(f"{n:3d}  {s.left:6.2f} {s.right:6.2f}  {y.left:7.3f} {y.right:7.3f}")

    print("\nHistory (oldest first):")
    for s in f.history():
        print(f"  ({s.left:.2f}, {s.right:.2f})")


if __name__ == "__main__":
    main()
