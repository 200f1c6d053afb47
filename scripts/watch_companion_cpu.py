"""
Watch the companion process CPU the way the monitor sees it.
Run this while the Claude CLI is working to tune the CPU threshold.

Expected behavior:
- Non-zero CPU while the CLI is generating
- ACTIVE flips on after the sustained window and off on the first low sample
"""

import argparse
import logging
import os
import sys
import time

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gitfit.core.monitor.cpu_sampler import ProcessCpuSampler
from gitfit.core.monitor.cpu_tracker import CpuSustainTracker

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
)

def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--pattern", default="claude|anthropic")
    parser.add_argument("--threshold", type=float, default=5.0)
    parser.add_argument("--sustained", type=float, default=2.0)
    parser.add_argument("--interval", type=float, default=1.0)
    args = parser.parse_args()

    print("=" * 60)
    print(f"Companion CPU watch: /{args.pattern}/  >= {args.threshold}% for {args.sustained}s")
    print("=" * 60)

    sampler = ProcessCpuSampler()
    tracker = CpuSustainTracker(args.threshold, args.sustained)

    try:
        sample_count = 0
        while True:
            cpu = sampler.sample(args.pattern)
            now = time.monotonic()
            active = tracker.on_sample(cpu, now)
            sample_count += 1

            bar_length = int(min(cpu, 100.0) / 2)
            bar = "#" * bar_length + "." * (50 - bar_length)
            flag = "ACTIVE" if active else "idle  "
            print(f"[{sample_count:4d}] {cpu:6.1f}% {flag} sustained {tracker.sustained_for(now):4.1f}s |{bar}|")

            time.sleep(args.interval)

    except KeyboardInterrupt:
        print()
        print("Stopped by user")

    return 0

if __name__ == "__main__":
    sys.exit(main())
